"""Variable transforms describing the sample space of a measure.

A transform maps an unconstrained flat vector of length ``dimension`` onto the
support of a measure. Downstream inference code uses it to move between the
constrained and the unconstrained parameterization.
"""

from abc import abstractmethod

import chex
import equinox as eqx
import jax
import jax.numpy as jnp


class Transform(eqx.Module):
    """A bijection between an unconstrained vector and the support of a measure."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """The length of the unconstrained vector."""
        ...

    @abstractmethod
    def __call__(self, y: chex.Array) -> jax.Array:
        """Map an unconstrained vector onto the support."""
        ...

    @abstractmethod
    def inverse(self, x: chex.Array) -> jax.Array:
        """Map a point of the support back to an unconstrained vector."""
        ...


class RealTransform(Transform):
    """Identity transform for a scalar on the real line."""

    @property
    def dimension(self) -> int:
        return 1

    def __call__(self, y: chex.Array) -> jax.Array:
        return jnp.reshape(jnp.asarray(y), ())

    def inverse(self, x: chex.Array) -> jax.Array:
        return jnp.reshape(jnp.asarray(x), (1,))


class PositiveTransform(Transform):
    """Exponential transform for a scalar on the positive half-line."""

    @property
    def dimension(self) -> int:
        return 1

    def __call__(self, y: chex.Array) -> jax.Array:
        return jnp.exp(jnp.reshape(jnp.asarray(y), ()))

    def inverse(self, x: chex.Array) -> jax.Array:
        return jnp.reshape(jnp.log(jnp.asarray(x)), (1,))


class ArrayTransform(Transform):
    """Applies an element transform independently over an array of the given shape.

    The unconstrained vector is laid out in row-major order, ``element.dimension``
    entries per array position.
    """

    element: Transform
    shape: tuple[int, ...] = eqx.field(static=True)

    def __init__(self, element: Transform, shape: tuple[int, ...]):
        self.element = element
        self.shape = tuple(int(d) for d in shape)

    @property
    def size(self) -> int:
        """The number of array positions."""
        size = 1
        for d in self.shape:
            size *= d
        return size

    @property
    def dimension(self) -> int:
        return self.size * self.element.dimension

    def __call__(self, y: chex.Array) -> jax.Array:
        blocks = jnp.reshape(jnp.asarray(y), (self.size, self.element.dimension))
        values = jnp.stack([self.element(block) for block in blocks])
        return jnp.reshape(values, self.shape + values.shape[1:])

    def inverse(self, x: chex.Array) -> jax.Array:
        x = jnp.asarray(x)
        flat = jnp.reshape(x, (self.size,) + x.shape[len(self.shape) :])
        return jnp.concatenate([self.element.inverse(value) for value in flat])
