"""Product measures built by applying a function over an index source."""

from collections.abc import Callable, Iterator
from typing import Any

import chex
import equinox as eqx
import jax
import jax.numpy as jnp

from measuretheory.combinators.index_sources import IndexSource, LazySequence, Position, make_index_source
from measuretheory.exceptions import HeterogeneousBaseMeasureError, ShapeMismatchError
from measuretheory.logger import MEASURETHEORY_LOGGER
from measuretheory.measures.base_measures import PowerMeasure
from measuretheory.measures.measure import AbstractMeasure
from measuretheory.transforms import ArrayTransform, Transform

_EXHAUSTED = object()


class ProductMeasure(AbstractMeasure):
    """An array of independent measures, element ``i`` being ``f(*args_i)``.

    Elements are computed on demand every time they are accessed and are never
    cached. For finite index sources a value of the product is an array whose
    leading axes equal ``shape``; for lazy sources it is a sequence consumed in
    lock-step with the elements.
    """

    f: Callable[..., AbstractMeasure]
    source: IndexSource

    def __init__(self, f: Callable[..., AbstractMeasure], source: IndexSource):
        self.f = f
        self.source = source

    @property
    def shape(self) -> tuple[int, ...] | None:
        """The index shape, or None for lazy sources."""
        return self.source.shape

    @property
    def is_lazy(self) -> bool:
        """Whether the product is backed by a lazy sequence."""
        return self.source.shape is None

    def __len__(self) -> int:
        length = self.source.length
        if length is None:
            raise TypeError("A product measure over a lazy sequence has no length")
        return length

    def __getitem__(self, position: Position) -> AbstractMeasure:
        return self.f(*self.source.element_at(position))

    def marginals(self) -> Iterator[AbstractMeasure]:
        """Iterate over the element measures in enumeration order."""
        return (self.f(*args) for args in self.source.iterate())

    def __iter__(self) -> Iterator[AbstractMeasure]:
        return self.marginals()

    def _first(self) -> AbstractMeasure:
        first = next(self.marginals(), None)
        if first is None:
            raise ShapeMismatchError("The product measure has no elements")
        return first

    def _flatten(self, x: Any) -> jax.Array:
        x = jnp.asarray(x)
        ndim = len(self.shape)
        if x.shape[:ndim] != self.shape:
            raise ShapeMismatchError(f"Expected a value with leading shape {self.shape}, got {x.shape}")
        return jnp.reshape(x, (-1,) + x.shape[ndim:])

    def _fold(self, x: Any, score: Callable[[AbstractMeasure, Any], jax.Array]) -> jax.Array:
        total = jnp.asarray(0.0)
        if not self.is_lazy:
            for measure, xj in zip(self.marginals(), self._flatten(x), strict=True):
                total = total + score(measure, xj)
            return total

        values = iter(x)
        count = 0
        for measure in self.marginals():
            xj = next(values, _EXHAUSTED)
            if xj is _EXHAUSTED:
                raise ShapeMismatchError(f"The value ran out after {count} elements while the product continued")
            total = total + score(measure, xj)
            count += 1
        if next(values, _EXHAUSTED) is not _EXHAUSTED:
            raise ShapeMismatchError(f"The product ran out after {count} elements while the value continued")
        return total

    def logdensity(self, x: Any) -> jax.Array:
        """Sum of the elementwise log-densities of ``x``."""
        return self._fold(x, lambda measure, xj: measure.logdensity(xj))

    def logdensity_def(self, x: Any) -> jax.Array:
        """Sum of the elementwise log-densities of ``x`` relative to the element base measures."""
        return self._fold(x, lambda measure, xj: measure.logdensity_def(xj))

    @property
    def basemeasure(self) -> AbstractMeasure:
        """The shared element base measure raised to the index shape.

        Every element is checked against the first; a differing base measure
        raises ``HeterogeneousBaseMeasureError``.
        """
        if self.is_lazy:
            raise TypeError("A product measure over a lazy sequence has no base measure")
        base = self._first().basemeasure
        elements = self.marginals()
        next(elements)
        for position, measure in enumerate(elements, start=1):
            other = measure.basemeasure
            if not bool(eqx.tree_equal(other, base)):
                raise HeterogeneousBaseMeasureError(
                    f"Element {position} has base measure {other!r}, expected {base!r} like element 0"
                )
        return PowerMeasure(base, self.shape)

    def sample(self, key: chex.PRNGKey) -> jax.Array | Iterator[Any]:
        """Draw one independent variate per element.

        Finite products return an array of shape ``shape + element_shape``. Lazy
        products return a lazy iterator whose ``i``-th draw uses
        ``jax.random.fold_in(key, i)``.
        """
        if self.is_lazy:
            return (measure.sample(jax.random.fold_in(key, i)) for i, measure in enumerate(self.marginals()))
        keys = jax.random.split(key, len(self))
        draws = jnp.stack([measure.sample(k) for measure, k in zip(self.marginals(), keys, strict=True)])
        return jnp.reshape(draws, self.shape + draws.shape[1:])

    def as_transform(self) -> Transform:
        if self.is_lazy:
            source = self.source
            if not isinstance(source, LazySequence) or source.size is None:
                raise TypeError("A transform needs a sized, restartable source")
            return ArrayTransform(self._first().as_transform(), (source.size,))
        return ArrayTransform(self._first().as_transform(), self.shape)

    def testvalue(self) -> jax.Array | Iterator[Any]:
        if self.is_lazy:
            return (measure.testvalue() for measure in self.marginals())
        values = jnp.stack([jnp.asarray(measure.testvalue()) for measure in self.marginals()])
        return jnp.reshape(values, self.shape + values.shape[1:])

    def __repr__(self) -> str:
        name = getattr(self.f, "__name__", repr(self.f))
        return f"For({name}, {self.source.describe()})"


def For(f: Callable[..., AbstractMeasure], *base: Any) -> ProductMeasure:  # pylint: disable=invalid-name
    """Build a product measure by applying ``f`` over an index source.

    The kind of ``base`` decides the index source:

    - One or more positive integers ``d1, ..., dk``: the element at grid
      coordinate ``(i1, ..., ik)``, each ``ij`` in ``1..dj``, is
      ``f(i1, ..., ik)``, e.g. ``For(Exponential, 3)`` has rates 1, 2, 3 and
      ``For(Normal, 4, 3)`` is a 4x3 grid of ``Normal(i, j)``.

    - One or more arrays of a common shape: the arrays are zipped, the element
      at position ``i`` is ``f(a1[i], ..., am[i])``. Arrays of different shapes
      raise ``ShapeMismatchError``.

    - A single ``Generator(g, source)`` or iterator: the element for ``x`` in
      ``source`` is ``f(g(x))``. Iterators are consumed on first use, e.g.
      ``For(lambda row: Normal(row[0], row[1]), Generator(tuple, rows))``.
    """
    source = make_index_source(*base)
    MEASURETHEORY_LOGGER.debug("[for] building product measure over %s", type(source).__name__)
    return ProductMeasure(f, source)
