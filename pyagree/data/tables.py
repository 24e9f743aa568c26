# pyagree/data/tables.py
"""Coercion and boundary validation of rating-distribution tables."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from loguru import logger

from pyagree.exceptions import InvalidInput
from pyagree.types import FloatMatrix, FloatVector, RatingsLike


@dataclass(frozen=True)
class DistributionTable:
    """An n x q table of rater counts by subject (rows) and category (columns)."""

    counts: FloatMatrix
    columns: tuple[str, ...]

    @property
    def n_subjects(self) -> int:
        return int(self.counts.shape[0])

    @property
    def n_categories(self) -> int:
        return int(self.counts.shape[1])

    @property
    def rater_counts(self) -> FloatVector:
        """Number of raters who rated each subject (row sums)."""
        return self.counts.sum(axis=1)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.counts, columns=list(self.columns))


def as_distribution_table(ratings: RatingsLike) -> DistributionTable:
    """Convert supported inputs to a validated ``DistributionTable``.

    Accepts numpy arrays, nested sequences, pandas DataFrames and any frame-like
    object exposing ``to_pandas()`` (polars, ibis, ...). Column labels of frames
    are kept; other inputs get ``"1".."q"``.

    Raises:
        InvalidInput: If the table is not 2-D, is empty, or holds non-numeric,
            non-finite or negative counts.
    """
    if isinstance(ratings, DistributionTable):
        return ratings

    if hasattr(ratings, "to_pandas") and not isinstance(ratings, pd.DataFrame):
        ratings = ratings.to_pandas()

    columns: tuple[str, ...] | None = None
    if isinstance(ratings, pd.DataFrame):
        columns = tuple(str(col) for col in ratings.columns)
        values = ratings.to_numpy()
    else:
        values = np.asarray(ratings)

    if values.ndim != 2:
        raise InvalidInput(
            f"Ratings must be a 2-D subjects x categories table; got {values.ndim} dimension(s)."
        )
    if values.shape[0] == 0 or values.shape[1] == 0:
        raise InvalidInput(f"Ratings table is empty (shape {values.shape}).")

    try:
        counts = values.astype(np.float64)
    except (TypeError, ValueError) as error:
        raise InvalidInput("Ratings table must contain numeric counts.") from error

    if not np.isfinite(counts).all():
        raise InvalidInput("Ratings table contains missing or non-finite counts.")
    if (counts < 0).any():
        bad_rows = np.unique(np.nonzero(counts < 0)[0]).tolist()
        raise InvalidInput(f"Ratings table contains negative counts (rows {bad_rows}).")

    if columns is None:
        columns = tuple(str(k + 1) for k in range(counts.shape[1]))

    n_rows, n_cols = counts.shape
    logger.debug(f"Loaded distribution table: {n_rows} subjects x {n_cols} categories")
    return DistributionTable(counts=counts, columns=columns)


def pad_categories(table: DistributionTable, n_categories: int) -> DistributionTable:
    """Append all-zero columns ``v1, v2, ...`` until the table has ``n_categories`` columns."""
    extra = n_categories - table.n_categories
    if extra <= 0:
        return table

    zeros = np.zeros((table.n_subjects, extra), dtype=np.float64)
    counts = np.hstack([table.counts, zeros])
    columns = table.columns + tuple(f"v{k + 1}" for k in range(extra))
    logger.debug(f"Padded table with {extra} unobserved category column(s): {columns[-extra:]}")
    return DistributionTable(counts=counts, columns=columns)
