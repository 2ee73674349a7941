"""measuretheory package: product measures and likelihoods over a small measure layer."""

from measuretheory.combinators import For, Generator, Likelihood, PointwiseProduct, ProductMeasure, pointwise_product
from measuretheory.measures import (
    AbstractMeasure,
    Exponential,
    Lebesgue,
    Normal,
    ParameterizedMeasure,
    PowerMeasure,
    as_transform,
    basemeasure,
    density,
    logdensity,
    logdensity_def,
    rand,
    testvalue,
)

__all__ = [
    "AbstractMeasure",
    "Exponential",
    "For",
    "Generator",
    "Lebesgue",
    "Likelihood",
    "Normal",
    "ParameterizedMeasure",
    "PointwiseProduct",
    "PowerMeasure",
    "ProductMeasure",
    "as_transform",
    "basemeasure",
    "density",
    "logdensity",
    "logdensity_def",
    "pointwise_product",
    "rand",
    "testvalue",
]
