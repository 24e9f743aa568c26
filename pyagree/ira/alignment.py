"""Category alignment: reconcile declared categories with table columns and resolve weights."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from loguru import logger

from pyagree.data.tables import DistributionTable, as_distribution_table, pad_categories
from pyagree.exceptions import InvalidInput
from pyagree.ira.weights import CategoryAxis, WeightSpec, weight_spec
from pyagree.types import CategoriesLike, FloatMatrix, RatingsLike, WeightsLike


@dataclass(frozen=True)
class AlignedRatings:
    """A distribution table whose width matches its category axis and weight matrix."""

    table: DistributionTable
    axis: CategoryAxis
    weights: FloatMatrix
    weights_name: str

    @property
    def counts(self) -> FloatMatrix:
        return self.table.counts

    @property
    def n_subjects(self) -> int:
        return self.table.n_subjects

    @property
    def n_categories(self) -> int:
        return self.table.n_categories


def align_categories(
    table: DistributionTable, categ: CategoriesLike | None = None
) -> tuple[DistributionTable, CategoryAxis]:
    """Widen ``table`` with zero columns for declared but unobserved categories.

    Without ``categ`` the categories default to ``1..q``. A declared list longer
    than the table adds ``len(categ) - q`` all-zero columns on the right.

    Raises:
        InvalidInput: If ``categ`` is empty, has duplicates, or is shorter than the table.
    """
    if categ is None:
        return table, CategoryAxis.from_size(table.n_categories)

    axis = categ if isinstance(categ, CategoryAxis) else CategoryAxis(categ)
    if len(axis) < table.n_categories:
        raise InvalidInput(
            f"Category list has {len(axis)} entries but the table has "
            f"{table.n_categories} columns."
        )
    return pad_categories(table, len(axis)), axis


def align(
    ratings: RatingsLike,
    *,
    weights: WeightsLike | WeightSpec = "unweighted",
    categ: CategoriesLike | None = None,
    unknown_policy: Literal["error", "identity"] = "error",
) -> AlignedRatings:
    """Validate ``ratings``, align its categories and build the weight matrix once."""
    table, axis = align_categories(as_distribution_table(ratings), categ)
    spec = weight_spec(weights, unknown_policy=unknown_policy)
    matrix = spec.resolve(axis)
    logger.debug(f"Resolved {spec.name!r} weights for {len(axis)} categories")
    return AlignedRatings(table=table, axis=axis, weights=matrix, weights_name=spec.name)
