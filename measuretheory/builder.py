"""Builders for measures, product measures and likelihoods from plain values.

Families are looked up by name in ``MEASURE_FAMILIES`` so that every builder
can be targeted from a structured config.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from measuretheory.combinators.likelihood import Likelihood
from measuretheory.combinators.product_measure import For, ProductMeasure
from measuretheory.exceptions import ArityMismatchError
from measuretheory.logger import MEASURETHEORY_LOGGER
from measuretheory.measures.exponential import Exponential
from measuretheory.measures.normal import Normal
from measuretheory.measures.parameterized import ParameterizedMeasure

MEASURE_FAMILIES: dict[str, type[ParameterizedMeasure]] = {
    "normal": Normal,
    "exponential": Exponential,
}


def resolve_family(family: str) -> type[ParameterizedMeasure]:
    """Look up a measure family by name."""
    if family not in MEASURE_FAMILIES:
        raise KeyError(
            f'Unknown measure family: "{family}".  Available families are: {", ".join(MEASURE_FAMILIES.keys())}'
        )
    family_cls = MEASURE_FAMILIES[family]
    MEASURETHEORY_LOGGER.debug("[builder] resolved family %s to %s", family, family_cls.__name__)
    return family_cls


def build_measure(family: str, params: Mapping[str, Any] | Sequence[Any] | None = None) -> ParameterizedMeasure:
    """Build a member of a named family from named or positional parameters."""
    family_cls = resolve_family(family)
    return family_cls.from_params(params if params is not None else {})


def build_for_grid(family: str, dims: Sequence[int]) -> ProductMeasure:
    """Build a product measure over an integer grid.

    The grid coordinates are passed positionally to the family, so
    ``build_for_grid("normal", [4, 3])`` has ``Normal(i, j)`` at coordinate ``(i, j)``.
    """
    family_cls = resolve_family(family)
    if len(dims) > len(family_cls.param_names):
        raise ArityMismatchError(
            f"{family_cls.__name__} takes at most {len(family_cls.param_names)} parameters, "
            f"got a grid with {len(dims)} dimensions"
        )
    return For(family_cls, *dims)


def _keyword_constructor(family_cls: type[ParameterizedMeasure], names: Sequence[str]) -> Callable[..., Any]:
    def constructor(*values: Any) -> ParameterizedMeasure:
        return family_cls.from_params(dict(zip(names, values, strict=True)))

    constructor.__name__ = family_cls.__name__
    return constructor


def build_for_arrays(family: str, arrays: Mapping[str, Sequence[Any]]) -> ProductMeasure:
    """Build a product measure zipping one array per named parameter.

    ``build_for_arrays("normal", {"mu": [0.0, 1.0], "sigma": [1.0, 2.0]})`` has
    ``Normal(mu=0.0, sigma=1.0)`` and ``Normal(mu=1.0, sigma=2.0)`` as elements.
    """
    family_cls = resolve_family(family)
    family_cls.check_param_names(arrays)
    names = list(arrays.keys())
    return For(_keyword_constructor(family_cls, names), *(arrays[name] for name in names))


def build_likelihood(family: str, x: Any, constraint: Mapping[str, Any] | None = None) -> Likelihood:
    """Build a likelihood for a named family observing ``x``."""
    family_cls = resolve_family(family)
    if constraint is None:
        return Likelihood(family_cls, x)
    return Likelihood(family_cls, constraint, x)
