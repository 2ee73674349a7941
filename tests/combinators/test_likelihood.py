import math

import chex
import equinox as eqx
import jax
import jax.numpy as jnp
import pytest

from measuretheory.combinators import Likelihood, PointwiseProduct, pointwise_product
from measuretheory.exceptions import ArityMismatchError, UnknownParameterError
from measuretheory.measures import Exponential, Normal
from measuretheory.transforms import PositiveTransform


def test_likelihood_matches_family_logdensity():
    """A likelihood evaluates the family member at the observation."""
    ell = Likelihood(Normal, {"sigma": 3.0}, 2.0)
    chex.assert_trees_all_close(ell.logdensity({"mu": 2.0}), jnp.asarray(-math.log(3.0) - 0.9189385), rtol=1e-6)
    chex.assert_trees_all_close(ell.logdensity({"mu": 2.0}), Normal(2.0, 3.0).logdensity(2.0))
    chex.assert_trees_all_close(ell.logdensity_def({"mu": 2.0}), jnp.asarray(-math.log(3.0)), rtol=1e-6)


def test_standard_normal_likelihood():
    """The standard normal log-density at its mean is -log(sqrt(2 pi))."""
    ell = Likelihood(Normal, {"sigma": 1.0}, 0.0)
    chex.assert_trees_all_close(ell.logdensity({"mu": 0.0}), jnp.asarray(-0.9189385), rtol=1e-6)


@pytest.mark.parametrize("p", [{"mu": 2.0}, (2.0,), [2.0], 2.0, jnp.asarray(2.0), jnp.array([2.0])])
def test_named_and_positional_parameters_agree(p):
    """Named, positional and scalar parameters select the same member."""
    ell = Likelihood(Normal, {"sigma": 3.0}, 2.0)
    chex.assert_trees_all_close(ell.logdensity(p), Normal(2.0, 3.0).logdensity(2.0))


def test_free_params():
    """Free parameters are the unconstrained ones in canonical order."""
    assert Likelihood(Normal, 1.0).free_params == ("mu", "sigma")
    assert Likelihood(Normal, {"mu": 0.0}, 1.0).free_params == ("sigma",)
    assert Likelihood(Normal, {"mu": 0.0, "sigma": 1.0}, 1.0).free_params == ()


def test_unconstrained_positional_parameters():
    """Without a constraint every parameter is matched positionally."""
    ell = Likelihood(Normal, 1.0)
    chex.assert_trees_all_close(ell.logdensity((0.0, 2.0)), Normal(0.0, 2.0).logdensity(1.0))
    with pytest.raises(ArityMismatchError, match="Expected 2 values"):
        ell.logdensity((0.0,))


def test_constraint_wins_over_parameters():
    """Constrained parameters cannot be overridden at evaluation time."""
    ell = Likelihood(Normal, {"sigma": 3.0}, 2.0)
    chex.assert_trees_all_close(ell.logdensity({"mu": 2.0, "sigma": 100.0}), Normal(2.0, 3.0).logdensity(2.0))


def test_unknown_parameter():
    """Undeclared parameter names are rejected."""
    ell = Likelihood(Normal, {"sigma": 3.0}, 2.0)
    with pytest.raises(UnknownParameterError, match="tau"):
        ell.logdensity({"tau": 1.0})
    with pytest.raises(UnknownParameterError, match="tau"):
        Likelihood(Normal, {"tau": 1.0}, 2.0)


def test_wrong_number_of_positional_parameters():
    """Positional parameters must cover exactly the free parameters."""
    ell = Likelihood(Normal, {"sigma": 3.0}, 2.0)
    with pytest.raises(ArityMismatchError):
        ell.logdensity((1.0, 2.0))


def test_family_instance_and_invalid_family():
    """A family may be given by an instance; anything else is rejected."""
    ell = Likelihood(Exponential(5.0), 1.0)
    assert ell.family is Exponential
    with pytest.raises(TypeError):
        Likelihood(math.exp, 1.0)
    with pytest.raises(TypeError):
        Likelihood(Normal)


def test_density():
    """Density is the exponential of the log-density."""
    ell = Likelihood(Exponential, 0.5)
    chex.assert_trees_all_close(ell.density(2.0), jnp.asarray(2.0 * math.exp(-1.0)), rtol=1e-6)


def test_likelihood_repr():
    """Likelihoods render with their family, constraint and observation."""
    assert repr(Likelihood(Normal, {"sigma": 3.0}, 2.0)) == "Likelihood(Normal, {'sigma': 3.0}, 2.0)"
    assert repr(Likelihood(Normal, 2.0)) == "Likelihood(Normal, 2.0)"


def test_posterior_logdensity():
    """A prior times a likelihood adds their log-densities."""
    prior = Normal(0.0, 1.0)
    ell = Likelihood(Normal, {"sigma": 1.0}, 1.0)
    posterior = prior * ell
    assert isinstance(posterior, PointwiseProduct)
    for theta in (-1.0, 0.0, 2.5):
        chex.assert_trees_all_close(
            posterior.logdensity(theta), prior.logdensity(theta) + ell.logdensity(theta), rtol=1e-6
        )


def test_posterior_basemeasure_is_prior_basemeasure():
    """The posterior shares the base measure of the prior."""
    prior = Normal(0.0, 1.0)
    posterior = prior * Likelihood(Normal, {"sigma": 1.0}, 1.0)
    assert eqx.tree_equal(posterior.basemeasure, prior.basemeasure)
    chex.assert_trees_all_close(
        posterior.logdensity(1.0),
        posterior.logdensity_def(1.0) + posterior.basemeasure.logdensity(1.0),
        rtol=1e-6,
    )


def test_posterior_reference_value():
    """The unnormalized terms of a normal prior and likelihood at theta = 2."""
    prior = Normal(0.0, 1.0)
    ell = Likelihood(Normal, {"sigma": 1.0}, 3.0)
    posterior = prior * ell
    chex.assert_trees_all_close(prior.logdensity_def(2.0) + ell.logdensity_def(2.0), jnp.asarray(-2.5))
    chex.assert_trees_all_close(posterior.logdensity(2.0), jnp.asarray(-2.5 - 2 * 0.9189385), rtol=1e-6)


def test_chained_products_flatten():
    """Multiplying a posterior by another likelihood extends the same product."""
    prior = Normal()
    ell1 = Likelihood(Normal, {"sigma": 1.0}, 1.0)
    ell2 = Likelihood(Normal, {"sigma": 2.0}, -1.0)
    chained = prior * ell1 * ell2
    assert isinstance(chained.prior, Normal)
    assert len(chained.likelihoods) == 2
    swapped = pointwise_product(prior, ell2, ell1)
    chex.assert_trees_all_close(chained.logdensity(0.3), swapped.logdensity(0.3), rtol=1e-6)


def test_pointwise_product_rejects_non_likelihoods():
    """Only likelihoods can multiply a measure pointwise."""
    with pytest.raises(TypeError):
        pointwise_product(Normal(), Normal())
    with pytest.raises(TypeError):
        _ = Normal() * 2.0


def test_posterior_delegates_to_prior():
    """Transform and test value come from the prior; sampling is unavailable."""
    posterior = Exponential(2.0) * Likelihood(Exponential, 1.0)
    assert isinstance(posterior.as_transform(), PositiveTransform)
    assert float(posterior.testvalue()) == 0.5
    with pytest.raises(NotImplementedError):
        posterior.sample(jax.random.PRNGKey(0))
    assert repr(posterior) == "Exponential(rate=2) * Likelihood(Exponential, 1.0)"


def test_unconstrained_standard_normal_likelihood():
    """Without a constraint, named parameters select the standard normal."""
    ell = Likelihood(Normal, 2.0)
    chex.assert_trees_all_close(ell.logdensity({"mu": 2.0, "sigma": 1.0}), jnp.asarray(-0.9189385), rtol=1e-6)


def test_array_observation_is_summed():
    """An array observation holds independent draws whose log-densities add up."""
    ell = Likelihood(Normal, {"sigma": 1.0}, [1.0, 2.0])
    expected = Normal(0.0, 1.0).logdensity(1.0) + Normal(0.0, 1.0).logdensity(2.0)
    assert ell.logdensity(0.0).shape == ()
    chex.assert_trees_all_close(ell.logdensity(0.0), expected, rtol=1e-6)
    chex.assert_trees_all_close(ell.logdensity_def(0.0), jnp.asarray(-2.5), rtol=1e-6)

    posterior = Normal() * ell
    assert posterior.logdensity(0.0).shape == ()
    assert posterior.logdensity_def(0.0).shape == ()
    chex.assert_trees_all_close(posterior.logdensity(0.0), Normal().logdensity(0.0) + expected, rtol=1e-6)
