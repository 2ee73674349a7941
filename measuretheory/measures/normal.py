"""Normal distribution."""

import math
from typing import Any, ClassVar

import chex
import jax
import jax.numpy as jnp

from measuretheory.measures.base_measures import Lebesgue, WeightedMeasure
from measuretheory.measures.measure import AbstractMeasure
from measuretheory.measures.parameterized import ParameterizedMeasure, as_float_array
from measuretheory.transforms import RealTransform, Transform

# Normalizing constant of the standard normal, carried by the base measure.
_LOG_INV_SQRT_2PI = -0.5 * math.log(2.0 * math.pi)


class Normal(ParameterizedMeasure):
    """Normal distribution with mean ``mu`` and standard deviation ``sigma``.

    The density relative to the base measure omits the ``1 / sqrt(2 pi)``
    factor, which lives in the base measure instead. ``logdensity`` adds it
    back, so it is the usual log-density relative to Lebesgue measure.
    """

    param_names: ClassVar[tuple[str, ...]] = ("mu", "sigma")

    mu: jax.Array
    sigma: jax.Array

    def __init__(self, mu: Any = 0.0, sigma: Any = 1.0):
        self.mu = as_float_array(mu)
        self.sigma = as_float_array(sigma)

    @property
    def basemeasure(self) -> AbstractMeasure:
        return WeightedMeasure(_LOG_INV_SQRT_2PI, Lebesgue("real"))

    def logdensity_def(self, x: Any) -> jax.Array:
        z = (jnp.asarray(x) - self.mu) / self.sigma
        return -0.5 * jnp.square(z) - jnp.log(self.sigma)

    def sample(self, key: chex.PRNGKey) -> jax.Array:
        shape = jnp.broadcast_shapes(self.mu.shape, self.sigma.shape)
        return self.mu + self.sigma * jax.random.normal(key, shape)

    def as_transform(self) -> Transform:
        return RealTransform()

    def testvalue(self) -> jax.Array:
        return self.mu
