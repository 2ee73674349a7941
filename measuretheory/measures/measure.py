"""The abstract measure interface and its functional forms."""

from abc import abstractmethod
from typing import Any

import chex
import equinox as eqx
import jax
import jax.numpy as jnp

from measuretheory.transforms import Transform


class AbstractMeasure(eqx.Module):
    """A measure supporting density evaluation and sampling.

    Densities are expressed with respect to ``basemeasure``. Following the chain
    of base measures ends at a primitive measure (Lebesgue or counting) which is
    its own base measure.
    """

    @property
    @abstractmethod
    def basemeasure(self) -> "AbstractMeasure":
        """The reference measure densities are expressed against."""
        ...

    @abstractmethod
    def logdensity_def(self, x: Any) -> jax.Array:
        """Log-density of ``x`` relative to ``basemeasure``."""
        ...

    @abstractmethod
    def sample(self, key: chex.PRNGKey) -> Any:
        """Draw a random variate using only the given key."""
        ...

    @abstractmethod
    def as_transform(self) -> Transform:
        """The transform describing the sample space of the measure."""
        ...

    @abstractmethod
    def testvalue(self) -> Any:
        """A representative point in the support."""
        ...

    def logdensity(self, x: Any) -> jax.Array:
        """Log-density of ``x`` relative to the primitive measure at the root of the base measure chain."""
        return self.logdensity_def(x) + self.basemeasure.logdensity(x)

    def density(self, x: Any) -> jax.Array:
        """Density of ``x`` relative to the primitive root measure."""
        return jnp.exp(self.logdensity(x))

    def __mul__(self, other: Any) -> "AbstractMeasure":
        # Imported here since the combinators build on this module.
        from measuretheory.combinators.likelihood import Likelihood, pointwise_product

        if isinstance(other, Likelihood):
            return pointwise_product(self, other)
        return NotImplemented


def logdensity(measure: Any, x: Any) -> jax.Array:
    """Log-density of ``x`` under ``measure``."""
    return measure.logdensity(x)


def logdensity_def(measure: Any, x: Any) -> jax.Array:
    """Log-density of ``x`` under ``measure`` relative to its base measure."""
    return measure.logdensity_def(x)


def density(measure: Any, x: Any) -> jax.Array:
    """Density of ``x`` under ``measure``."""
    return measure.density(x)


def rand(key: chex.PRNGKey, measure: AbstractMeasure) -> Any:
    """Draw a random variate from ``measure``."""
    return measure.sample(key)


def basemeasure(measure: AbstractMeasure) -> AbstractMeasure:
    """The base measure of ``measure``."""
    return measure.basemeasure


def as_transform(measure: AbstractMeasure) -> Transform:
    """The variable transform of ``measure``."""
    return measure.as_transform()


def testvalue(measure: AbstractMeasure) -> Any:
    """A representative point in the support of ``measure``."""
    return measure.testvalue()
