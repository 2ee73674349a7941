"""Exponential distribution."""

from typing import Any, ClassVar

import chex
import jax
import jax.numpy as jnp

from measuretheory.measures.base_measures import Lebesgue
from measuretheory.measures.measure import AbstractMeasure
from measuretheory.measures.parameterized import ParameterizedMeasure, as_float_array
from measuretheory.transforms import PositiveTransform, Transform


class Exponential(ParameterizedMeasure):
    """Exponential distribution with the given ``rate``."""

    param_names: ClassVar[tuple[str, ...]] = ("rate",)

    rate: jax.Array

    def __init__(self, rate: Any = 1.0):
        self.rate = as_float_array(rate)

    @property
    def basemeasure(self) -> AbstractMeasure:
        return Lebesgue("positive")

    def logdensity_def(self, x: Any) -> jax.Array:
        return jnp.log(self.rate) - self.rate * jnp.asarray(x)

    def sample(self, key: chex.PRNGKey) -> jax.Array:
        return jax.random.exponential(key, self.rate.shape) / self.rate

    def as_transform(self) -> Transform:
        return PositiveTransform()

    def testvalue(self) -> jax.Array:
        return 1.0 / self.rate
