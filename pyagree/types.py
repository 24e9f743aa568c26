"""Type aliases shared across pyagree."""

from __future__ import annotations

from typing import Any, Sequence, Union

import numpy as np
import pandas as pd
from numpy.typing import NDArray

FloatMatrix = NDArray[np.float64]
FloatVector = NDArray[np.float64]

# ndarray, pandas/polars DataFrame, or nested sequences of counts.
RatingsLike = Any

# A scheme name ("quadratic", "unweighted", ...) or an explicit square matrix.
WeightsLike = Union[str, FloatMatrix, Sequence[Sequence[float]], pd.DataFrame]

CategoriesLike = Sequence[Any]

__all__ = [
    "CategoriesLike",
    "FloatMatrix",
    "FloatVector",
    "RatingsLike",
    "WeightsLike",
]
