"""Measures, base measures and parameterized families."""

from measuretheory.measures.base_measures import Counting, Lebesgue, PowerMeasure, WeightedMeasure
from measuretheory.measures.exponential import Exponential
from measuretheory.measures.measure import (
    AbstractMeasure,
    as_transform,
    basemeasure,
    density,
    logdensity,
    logdensity_def,
    rand,
    testvalue,
)
from measuretheory.measures.normal import Normal
from measuretheory.measures.parameterized import ParameterizedMeasure

__all__ = [
    "AbstractMeasure",
    "Counting",
    "Exponential",
    "Lebesgue",
    "Normal",
    "ParameterizedMeasure",
    "PowerMeasure",
    "WeightedMeasure",
    "as_transform",
    "basemeasure",
    "density",
    "logdensity",
    "logdensity_def",
    "rand",
    "testvalue",
]
