"""Index sources for product measures.

An index source enumerates the argument tuples a product measure applies its
function to. There are three kinds:

- ``IntegerGrid``: the dense grid ``{1..d1} x ... x {1..dk}``.
- ``ZippedArrays``: several equal-shape arrays traversed in lock-step.
- ``LazySequence``: a possibly infinite, possibly single-pass sequence.

Finite sources enumerate positions in row-major order (last axis fastest), the
order ``jax.numpy.reshape`` uses, so sampling, densities and display agree.
"""

import itertools
import numbers
from abc import abstractmethod
from collections.abc import Callable, Iterable, Iterator, Mapping, Sized
from typing import Any

import equinox as eqx

from measuretheory.exceptions import ShapeMismatchError

Position = int | tuple[int, ...]


def _identity(x: Any) -> Any:
    return x


class Generator(eqx.Module):
    """A lazy sequence yielding ``transform(x)`` for each ``x`` in ``source``.

    Iterating a ``Generator`` iterates ``source`` afresh, so a generator over a
    list or a range can be replayed while one over an iterator is single-pass.
    """

    transform: Callable[[Any], Any]
    source: Iterable[Any]

    def __init__(self, transform: Callable[[Any], Any], source: Iterable[Any]):
        self.transform = transform
        self.source = source

    def __iter__(self) -> Iterator[Any]:
        return (self.transform(x) for x in self.source)

    def __repr__(self) -> str:
        name = getattr(self.transform, "__name__", repr(self.transform))
        return f"Generator({name}, {self.source!r})"


def _normalize_position(position: Position, ndim: int) -> tuple[int, ...]:
    if isinstance(position, numbers.Integral):
        position = (int(position),)
    position = tuple(position)
    if len(position) != ndim:
        raise IndexError(f"Expected a position with {ndim} indices, got {position}")
    return position


class IndexSource(eqx.Module):
    """Enumerates the argument tuples of a product measure."""

    @property
    @abstractmethod
    def shape(self) -> tuple[int, ...] | None:
        """The index shape, or None when the source is lazy."""
        ...

    @abstractmethod
    def element_at(self, position: Position) -> tuple[Any, ...]:
        """The argument tuple at a 0-based position."""
        ...

    @abstractmethod
    def iterate(self) -> Iterator[tuple[Any, ...]]:
        """Iterate over the argument tuples in enumeration order."""
        ...

    @abstractmethod
    def describe(self) -> str:
        """A short description of the source for display."""
        ...

    @property
    def length(self) -> int | None:
        """The number of elements, or None when the source is lazy."""
        if self.shape is None:
            return None
        length = 1
        for d in self.shape:
            length *= d
        return length

    def positions(self) -> Iterator[tuple[int, ...]]:
        """Iterate over the 0-based positions in enumeration order."""
        if self.shape is None:
            raise TypeError(f"{type(self).__name__} has no finite positions")
        return itertools.product(*(range(d) for d in self.shape))


class IntegerGrid(IndexSource):
    """The grid of 1-based integer coordinates ``{1..d1} x ... x {1..dk}``."""

    dims: tuple[int, ...] = eqx.field(static=True)

    def __init__(self, dims: tuple[int, ...]):
        for d in dims:
            if d <= 0:
                raise ShapeMismatchError(f"Grid dimensions must be positive, got {tuple(dims)}")
        self.dims = tuple(int(d) for d in dims)

    @property
    def shape(self) -> tuple[int, ...]:
        return self.dims

    def element_at(self, position: Position) -> tuple[int, ...]:
        position = _normalize_position(position, len(self.dims))
        for i, d in zip(position, self.dims, strict=True):
            if not 0 <= i < d:
                raise IndexError(f"Position {position} is out of bounds for grid {self.dims}")
        return tuple(i + 1 for i in position)

    def iterate(self) -> Iterator[tuple[int, ...]]:
        return itertools.product(*(range(1, d + 1) for d in self.dims))

    def describe(self) -> str:
        return ", ".join(str(d) for d in self.dims)


def _array_shape(array: Any) -> tuple[int, ...]:
    shape = getattr(array, "shape", None)
    if shape is not None:
        return tuple(shape)
    return (len(array),)


class ZippedArrays(IndexSource):
    """Arrays of a common shape, traversed in lock-step.

    Arrays whose shapes differ, or that have an empty axis, are rejected with
    ``ShapeMismatchError``; no truncation to the shortest input takes place.
    """

    arrays: tuple[Any, ...]
    array_shape: tuple[int, ...] = eqx.field(static=True)

    def __init__(self, arrays: tuple[Any, ...]):
        shapes = [_array_shape(array) for array in arrays]
        if any(shape != shapes[0] for shape in shapes[1:]):
            raise ShapeMismatchError(f"Zipped arrays must share a shape, got {shapes}")
        if any(d <= 0 for d in shapes[0]):
            raise ShapeMismatchError(f"Zipped arrays must not be empty, got shape {shapes[0]}")
        self.arrays = tuple(arrays)
        self.array_shape = shapes[0]

    @property
    def shape(self) -> tuple[int, ...]:
        return self.array_shape

    def element_at(self, position: Position) -> tuple[Any, ...]:
        position = _normalize_position(position, len(self.array_shape))
        for i, d in zip(position, self.array_shape, strict=True):
            if not 0 <= i < d:
                raise IndexError(f"Position {position} is out of bounds for shape {self.array_shape}")
        if len(position) == 1:
            return tuple(array[position[0]] for array in self.arrays)
        return tuple(array[position] for array in self.arrays)

    def iterate(self) -> Iterator[tuple[Any, ...]]:
        if len(self.array_shape) == 1:
            return zip(*self.arrays, strict=True)
        return (self.element_at(position) for position in self.positions())

    def describe(self) -> str:
        return ", ".join(repr(array) for array in self.arrays)


class LazySequence(IndexSource):
    """A lazy, possibly infinite sequence with an attached transform.

    The source is single-pass when it is an iterator: once consumed, iterating
    again yields nothing. Re-iterable sources (lists, ranges, ...) restart.
    """

    transform: Callable[[Any], Any]
    source: Iterable[Any]

    def __init__(self, source: Iterable[Any], transform: Callable[[Any], Any] = _identity):
        self.source = source
        self.transform = transform

    @property
    def shape(self) -> None:
        return None

    @property
    def restartable(self) -> bool:
        """Whether iterating again replays the sequence from the start."""
        return not isinstance(self.source, Iterator)

    @property
    def size(self) -> int | None:
        """The number of elements if the source is sized and restartable."""
        if self.restartable and isinstance(self.source, Sized):
            return len(self.source)
        return None

    def element_at(self, position: Position) -> tuple[Any, ...]:
        if not isinstance(position, numbers.Integral):
            raise IndexError(f"Lazy sequences are indexed by a single integer, got {position}")
        if not hasattr(self.source, "__getitem__") or not self.restartable:
            raise TypeError(f"{type(self.source).__name__} does not support random access")
        return (self.transform(self.source[position]),)

    def iterate(self) -> Iterator[tuple[Any, ...]]:
        return ((self.transform(x),) for x in self.source)

    def describe(self) -> str:
        if self.transform is _identity:
            return repr(self.source)
        return repr(Generator(self.transform, self.source))


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_array_like(value: Any) -> bool:
    if isinstance(value, (str, bytes, Mapping)):
        return False
    if getattr(value, "shape", None) is not None:
        return len(value.shape) > 0
    return isinstance(value, Sized) and hasattr(value, "__getitem__")


def make_index_source(*base: Any) -> IndexSource:
    """Choose the index source for the arguments given to ``For``."""
    if not base:
        raise TypeError("For requires at least one index argument")
    if all(_is_integer(b) for b in base):
        return IntegerGrid(tuple(base))
    if len(base) == 1 and isinstance(base[0], Generator):
        return LazySequence(base[0].source, base[0].transform)
    if len(base) == 1 and isinstance(base[0], Iterator):
        return LazySequence(base[0])
    if all(_is_array_like(b) for b in base):
        return ZippedArrays(tuple(base))
    kinds = ", ".join(type(b).__name__ for b in base)
    raise TypeError(
        f"Cannot build an index source from ({kinds}).  "
        "Expected positive integers, equal-shape arrays, or a single generator"
    )
