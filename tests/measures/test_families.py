import math

import chex
import jax
import jax.numpy as jnp
import pytest

from measuretheory.exceptions import ArityMismatchError, UnknownParameterError
from measuretheory.measures import Exponential, Lebesgue, Normal, WeightedMeasure
from measuretheory.measures.measure import density, logdensity, logdensity_def, rand
from measuretheory.transforms import PositiveTransform, RealTransform

LOG_SQRT_2PI = 0.5 * math.log(2 * math.pi)


def test_normal_logdensity():
    """The normal log-density is relative to Lebesgue measure."""
    normal = Normal(1.0, 2.0)
    expected = -0.5 * (0.5**2) - math.log(2.0) - LOG_SQRT_2PI
    chex.assert_trees_all_close(normal.logdensity(2.0), jnp.asarray(expected), rtol=1e-6)


def test_normal_logdensity_def_omits_normalizing_constant():
    """Relative to its base measure, the normal omits 1 / sqrt(2 pi)."""
    normal = Normal(2.0, 3.0)
    chex.assert_trees_all_close(normal.logdensity_def(2.0), jnp.asarray(-math.log(3.0)), rtol=1e-6)
    chex.assert_trees_all_close(
        normal.logdensity(2.0),
        normal.logdensity_def(2.0) + normal.basemeasure.logdensity(2.0),
        rtol=1e-6,
    )


def test_normal_basemeasure():
    """The normal base measure is a weighted Lebesgue measure."""
    base = Normal(0.0, 5.0).basemeasure
    assert isinstance(base, WeightedMeasure)
    assert base.log_weight == pytest.approx(-LOG_SQRT_2PI)
    assert isinstance(base.basemeasure, Lebesgue)
    assert base.basemeasure.support == "real"


def test_exponential_logdensity():
    """The exponential log-density is log(rate) - rate * x on the positive half-line."""
    exponential = Exponential(2.0)
    chex.assert_trees_all_close(exponential.logdensity(0.5), jnp.asarray(math.log(2.0) - 1.0), rtol=1e-6)
    assert exponential.logdensity(-1.0) == -jnp.inf


def test_density_is_exp_logdensity():
    """Density and log-density agree."""
    normal = Normal()
    chex.assert_trees_all_close(density(normal, 0.3), jnp.exp(logdensity(normal, 0.3)), rtol=1e-6)
    chex.assert_trees_all_close(logdensity_def(normal, 0.0), jnp.asarray(0.0))


def test_sample_is_reproducible():
    """Sampling depends only on the key."""
    key = jax.random.PRNGKey(0)
    normal = Normal(3.0, 0.1)
    chex.assert_trees_all_close(rand(key, normal), normal.sample(key))
    assert normal.sample(key).shape == ()

    draws = jnp.stack([Exponential(4.0).sample(k) for k in jax.random.split(key, 100)])
    assert jnp.all(draws > 0)


def test_params_in_canonical_order():
    """Params are reported in declaration order."""
    normal = Normal(sigma=2.0, mu=1.0)
    assert list(normal.params) == ["mu", "sigma"]
    assert float(normal.params["mu"]) == 1.0
    assert float(normal.params["sigma"]) == 2.0


@pytest.mark.parametrize("params", [{"mu": 1.0, "sigma": 2.0}, (1.0, 2.0), [1.0, 2.0], jnp.array([1.0, 2.0])])
def test_from_params(params):
    """Families can be built from named or positional parameters."""
    normal = Normal.from_params(params)
    assert float(normal.mu) == 1.0
    assert float(normal.sigma) == 2.0


def test_from_params_uses_defaults_for_missing_names():
    """Missing named parameters take the family defaults."""
    normal = Normal.from_params({"mu": 1.0})
    assert float(normal.sigma) == 1.0


def test_from_params_unknown_name():
    """Undeclared names are rejected."""
    with pytest.raises(UnknownParameterError, match="tau"):
        Normal.from_params({"mu": 1.0, "tau": 2.0})


def test_from_params_wrong_arity():
    """Positional parameters must cover every declared parameter."""
    with pytest.raises(ArityMismatchError, match="takes 2 positional parameters"):
        Normal.from_params((1.0,))


def test_transforms_and_testvalues():
    """Each family describes its support."""
    assert isinstance(Normal().as_transform(), RealTransform)
    assert isinstance(Exponential().as_transform(), PositiveTransform)
    assert float(Normal(4.0).testvalue()) == 4.0
    assert float(Exponential(2.0).testvalue()) == 0.5


def test_repr():
    """Measures render with their parameters."""
    assert repr(Normal(1, 2)) == "Normal(mu=1, sigma=2)"
    assert repr(Exponential(0.5)) == "Exponential(rate=0.5)"
