"""Combinators building new measures out of existing ones."""

from measuretheory.combinators.index_sources import (
    Generator,
    IndexSource,
    IntegerGrid,
    LazySequence,
    ZippedArrays,
    make_index_source,
)
from measuretheory.combinators.likelihood import Likelihood, PointwiseProduct, pointwise_product
from measuretheory.combinators.product_measure import For, ProductMeasure

__all__ = [
    "For",
    "Generator",
    "IndexSource",
    "IntegerGrid",
    "LazySequence",
    "Likelihood",
    "PointwiseProduct",
    "ProductMeasure",
    "ZippedArrays",
    "make_index_source",
    "pointwise_product",
]
