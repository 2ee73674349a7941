"""Primitive and derived base measures."""

from typing import Any, Literal

import chex
import equinox as eqx
import jax
import jax.numpy as jnp

from measuretheory.exceptions import ShapeMismatchError
from measuretheory.measures.measure import AbstractMeasure
from measuretheory.transforms import ArrayTransform, PositiveTransform, RealTransform, Transform

Support = Literal["real", "positive"]


class PrimitiveMeasure(AbstractMeasure):
    """A measure that is its own base measure."""

    @property
    def basemeasure(self) -> AbstractMeasure:
        return self

    def logdensity(self, x: Any) -> jax.Array:
        return self.logdensity_def(x)

    def sample(self, key: chex.PRNGKey) -> Any:
        raise NotImplementedError(f"{type(self).__name__} is not a probability measure and cannot be sampled")


class Lebesgue(PrimitiveMeasure):
    """Lebesgue measure on the real line or the positive half-line."""

    support: Support = eqx.field(static=True, default="real")

    def __post_init__(self):
        if self.support not in ("real", "positive"):
            raise ValueError(f'Unknown support: "{self.support}".  Available supports are: real, positive')

    def logdensity_def(self, x: Any) -> jax.Array:
        if self.support == "positive":
            return jnp.where(jnp.asarray(x) >= 0, 0.0, -jnp.inf)
        return jnp.zeros(jnp.shape(jnp.asarray(x)))

    def as_transform(self) -> Transform:
        return PositiveTransform() if self.support == "positive" else RealTransform()

    def testvalue(self) -> jax.Array:
        return jnp.asarray(1.0) if self.support == "positive" else jnp.asarray(0.0)

    def __repr__(self) -> str:
        return f"Lebesgue({self.support})"


class Counting(PrimitiveMeasure):
    """Counting measure on the integers."""

    def logdensity_def(self, x: Any) -> jax.Array:
        x = jnp.asarray(x)
        return jnp.where(x == jnp.round(x), 0.0, -jnp.inf)

    def as_transform(self) -> Transform:
        raise NotImplementedError("Counting measure has no continuous transform")

    def testvalue(self) -> jax.Array:
        return jnp.asarray(0)

    def __repr__(self) -> str:
        return "Counting()"


class WeightedMeasure(AbstractMeasure):
    """A base measure scaled by a constant factor ``exp(log_weight)``."""

    log_weight: float = eqx.field(static=True)
    base: AbstractMeasure

    def __init__(self, log_weight: float, base: AbstractMeasure):
        self.log_weight = float(log_weight)
        self.base = base

    @property
    def basemeasure(self) -> AbstractMeasure:
        return self.base

    def logdensity_def(self, x: Any) -> jax.Array:
        return jnp.full(jnp.shape(jnp.asarray(x)), self.log_weight)

    def sample(self, key: chex.PRNGKey) -> Any:
        raise NotImplementedError("WeightedMeasure is not normalized and cannot be sampled")

    def as_transform(self) -> Transform:
        return self.base.as_transform()

    def testvalue(self) -> Any:
        return self.base.testvalue()

    def __repr__(self) -> str:
        return f"{self.log_weight} * {self.base!r}"


class PowerMeasure(AbstractMeasure):
    """The product of identical copies of ``base`` over an index shape.

    A value is an array whose leading axes equal ``shape``; its log-density is
    the sum of the elementwise log-densities under ``base``.
    """

    base: AbstractMeasure
    shape: tuple[int, ...] = eqx.field(static=True)

    def __init__(self, base: AbstractMeasure, shape: tuple[int, ...]):
        self.base = base
        self.shape = tuple(int(d) for d in shape)

    @property
    def basemeasure(self) -> AbstractMeasure:
        base_of_base = self.base.basemeasure
        if base_of_base is self.base:
            return self
        return PowerMeasure(base_of_base, self.shape)

    def _flatten(self, x: Any) -> jax.Array:
        x = jnp.asarray(x)
        ndim = len(self.shape)
        if x.shape[:ndim] != self.shape:
            raise ShapeMismatchError(f"Expected a value with leading shape {self.shape}, got {x.shape}")
        return jnp.reshape(x, (-1,) + x.shape[ndim:])

    def logdensity_def(self, x: Any) -> jax.Array:
        return sum((self.base.logdensity_def(xj) for xj in self._flatten(x)), jnp.asarray(0.0))

    def logdensity(self, x: Any) -> jax.Array:
        return sum((self.base.logdensity(xj) for xj in self._flatten(x)), jnp.asarray(0.0))

    def sample(self, key: chex.PRNGKey) -> Any:
        keys = jax.random.split(key, len(self))
        draws = jnp.stack([self.base.sample(k) for k in keys])
        return jnp.reshape(draws, self.shape + draws.shape[1:])

    def as_transform(self) -> Transform:
        return ArrayTransform(self.base.as_transform(), self.shape)

    def testvalue(self) -> jax.Array:
        value = jnp.asarray(self.base.testvalue())
        return jnp.broadcast_to(value, self.shape + value.shape)

    def __len__(self) -> int:
        size = 1
        for d in self.shape:
            size *= d
        return size

    def __repr__(self) -> str:
        return f"{self.base!r} ^ {self.shape}"
