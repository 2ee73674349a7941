"""Likelihoods and their pointwise product with a prior."""

from collections.abc import Mapping
from typing import Any

import chex
import equinox as eqx
import jax
import jax.numpy as jnp

from measuretheory.exceptions import ArityMismatchError
from measuretheory.logger import MEASURETHEORY_LOGGER
from measuretheory.measures.measure import AbstractMeasure
from measuretheory.measures.parameterized import ParameterizedMeasure, is_positional_params
from measuretheory.transforms import Transform

Family = type[ParameterizedMeasure]

_NO_CONSTRAINT: Mapping[str, Any] = {}


class Likelihood(eqx.Module):
    """An observed value ``x`` viewed as a function of the parameters of a family.

    ``Likelihood(family, x)`` leaves every declared parameter free, while
    ``Likelihood(family, constraint, x)`` fixes the parameters named in
    ``constraint``. The family may be given as a class or as an instance, in
    which case its class is used.

    Evaluate it with ``logdensity`` or ``density``. Parameters are either a
    mapping of names to values, or positional values (a tuple, a list, a 1-d
    array, or a single scalar) matched to ``free_params`` in order:

        ell = Likelihood(Normal, {"sigma": 3.0}, 2.0)
        ell.logdensity({"mu": 2.0}) == ell.logdensity(2.0) == Normal(2.0, 3.0).logdensity(2.0)

    Constraint values always win over the values passed at evaluation time.
    An observation given as an array holds independent draws from the selected
    member.
    """

    family: Family = eqx.field(static=True)
    constraint: dict[str, Any]
    x: Any

    def __init__(self, family: Family | ParameterizedMeasure, *args: Any):
        if len(args) == 1:
            constraint, x = _NO_CONSTRAINT, args[0]
        elif len(args) == 2:
            constraint, x = args
        else:
            raise TypeError(f"Likelihood takes a family and 1 or 2 further arguments, got {len(args)}")
        if isinstance(family, ParameterizedMeasure):
            family = type(family)
        if not (isinstance(family, type) and issubclass(family, ParameterizedMeasure)):
            raise TypeError(f"Likelihood requires a parameterized measure family, got {family!r}")
        if not isinstance(constraint, Mapping):
            raise TypeError(f"The constraint must be a mapping, got {type(constraint)}")
        family.check_param_names(constraint)

        self.family = family
        self.constraint = dict(constraint)
        self.x = x

    @property
    def free_params(self) -> tuple[str, ...]:
        """The parameters left free, in the canonical order of the family."""
        return tuple(name for name in self.family.param_names if name not in self.constraint)

    def instance(self, p: Any) -> ParameterizedMeasure:
        """The member of the family selected by the parameters ``p``."""
        if isinstance(p, Mapping):
            self.family.check_param_names(p)
            named = dict(p)
        else:
            values = list(p) if is_positional_params(p) else [p]
            free = self.free_params
            if len(values) != len(free):
                raise ArityMismatchError(
                    f"Expected {len(free)} values for the free parameters ({', '.join(free)}), got {len(values)}"
                )
            MEASURETHEORY_LOGGER.debug("[likelihood] matching positional parameters to %s", free)
            named = dict(zip(free, values, strict=True))
        return self.family.from_params({**named, **self.constraint})

    def logdensity(self, p: Any) -> jax.Array:
        """Log-density of the observation under the member of the family selected by ``p``.

        An array of observations is treated as independent draws, so their
        log-densities are summed into a single value.
        """
        return jnp.sum(self.instance(p).logdensity(jnp.asarray(self.x)))

    def logdensity_def(self, p: Any) -> jax.Array:
        """Like ``logdensity``, relative to the base measure of the selected member."""
        return jnp.sum(self.instance(p).logdensity_def(jnp.asarray(self.x)))

    def density(self, p: Any) -> jax.Array:
        """Density of the observation under the member of the family selected by ``p``."""
        return jnp.exp(self.logdensity(p))

    def __repr__(self) -> str:
        if self.constraint:
            return f"Likelihood({self.family.__name__}, {self.constraint!r}, {self.x!r})"
        return f"Likelihood({self.family.__name__}, {self.x!r})"


class PointwiseProduct(AbstractMeasure):
    """An unnormalized posterior: a prior multiplied pointwise by likelihoods.

    Its density relative to the base measure of the prior is the density of the
    prior times the density of each likelihood.
    """

    prior: AbstractMeasure
    likelihoods: tuple[Likelihood, ...]

    def __init__(self, prior: AbstractMeasure, likelihoods: tuple[Likelihood, ...]):
        self.prior = prior
        self.likelihoods = tuple(likelihoods)

    @property
    def basemeasure(self) -> AbstractMeasure:
        return self.prior.basemeasure

    def _loglikelihood(self, theta: Any) -> jax.Array:
        return sum((ell.logdensity(theta) for ell in self.likelihoods), jnp.asarray(0.0))

    def logdensity_def(self, theta: Any) -> jax.Array:
        return self.prior.logdensity_def(theta) + self._loglikelihood(theta)

    def logdensity(self, theta: Any) -> jax.Array:
        return self.prior.logdensity(theta) + self._loglikelihood(theta)

    def sample(self, key: chex.PRNGKey) -> Any:
        raise NotImplementedError("An unnormalized posterior cannot be sampled directly")

    def as_transform(self) -> Transform:
        return self.prior.as_transform()

    def testvalue(self) -> Any:
        return self.prior.testvalue()

    def __repr__(self) -> str:
        terms = " * ".join(repr(ell) for ell in self.likelihoods)
        return f"{self.prior!r} * {terms}"


def pointwise_product(prior: AbstractMeasure, *likelihoods: Likelihood) -> PointwiseProduct:
    """Combine a prior with likelihoods into an unnormalized posterior.

    A ``PointwiseProduct`` prior is flattened, so chained products accumulate
    their likelihood terms in a single product.
    """
    for ell in likelihoods:
        if not isinstance(ell, Likelihood):
            raise TypeError(f"Expected a Likelihood, got {type(ell)}")
    if isinstance(prior, PointwiseProduct):
        return PointwiseProduct(prior.prior, prior.likelihoods + likelihoods)
    return PointwiseProduct(prior, likelihoods)
