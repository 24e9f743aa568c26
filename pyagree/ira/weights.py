"""Agreement weight matrices for ordered and unordered category sets."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Literal, Union

import numpy as np
import pandas as pd
from loguru import logger

from pyagree.exceptions import InvalidInput, UnknownWeightScheme, WeightMatrixShapeMismatch
from pyagree.types import CategoriesLike, FloatMatrix, FloatVector, WeightsLike


class WeightScheme(str, Enum):
    """Named weighting schemes."""

    IDENTITY = "identity"
    QUADRATIC = "quadratic"
    LINEAR = "linear"
    RADICAL = "radical"
    RATIO = "ratio"
    CIRCULAR = "circular"
    BIPOLAR = "bipolar"
    ORDINAL = "ordinal"

    @classmethod
    def aliases(cls) -> dict[str, WeightScheme]:
        return {"unweighted": cls.IDENTITY}

    @classmethod
    def names(cls) -> list[str]:
        """All accepted scheme names, aliases included."""
        return [scheme.value for scheme in cls] + list(cls.aliases())

    @classmethod
    def parse(cls, name: str) -> WeightScheme:
        key = name.strip().lower()
        if key in cls.aliases():
            return cls.aliases()[key]
        try:
            return cls(key)
        except ValueError:
            raise UnknownWeightScheme(name, cls.names()) from None


class CategoryAxis:
    """Ordered category list and the numeric axis the weight formulas work on.

    Numeric categories are placed on the axis by value (sorted ascending).
    Any other categories are placed at positions ``1..q`` in the given order.
    """

    def __init__(self, categories: CategoriesLike):
        labels = list(categories)
        if not labels:
            raise InvalidInput("Category list must contain at least one category.")

        unhashable = [label for label in labels if not isinstance(label, Hashable)]
        if unhashable:
            raise InvalidInput(f"Category labels must be hashable; got {unhashable}.")

        raw = np.asarray(labels)
        self.is_numeric = raw.ndim == 1 and raw.dtype.kind in "iuf"

        if pd.Index(labels).has_duplicates:
            raise InvalidInput(f"Category list contains duplicates: {labels}")

        if self.is_numeric:
            values = raw.astype(np.float64)
            if not np.isfinite(values).all():
                raise InvalidInput("Numeric categories must be finite.")
            self._values = np.sort(values)
        else:
            self._values = np.arange(1, len(labels) + 1, dtype=np.float64)

        self.labels = labels

    @classmethod
    def from_size(cls, n_categories: int) -> CategoryAxis:
        """Default axis ``1..q`` used when no category list is supplied."""
        if n_categories < 1:
            raise InvalidInput("At least one category is required.")
        return cls(list(range(1, n_categories + 1)))

    def __len__(self) -> int:
        return len(self.labels)

    def __repr__(self) -> str:
        kind = "numeric" if self.is_numeric else "categorical"
        return f"CategoryAxis({self.labels!r}, {kind})"

    def sorted_values(self) -> FloatVector:
        return self._values.copy()

    @property
    def span(self) -> float:
        return float(self._values[-1] - self._values[0])


def _as_axis(categ: CategoriesLike | CategoryAxis) -> CategoryAxis:
    return categ if isinstance(categ, CategoryAxis) else CategoryAxis(categ)


def _differences(axis: CategoryAxis) -> FloatMatrix:
    x = axis.sorted_values()
    return x[:, None] - x[None, :]


def _rescale(raw: FloatMatrix) -> FloatMatrix:
    """Map raw disagreement scores to weights via ``1 - raw / max(raw)``."""
    return 1.0 - raw / raw.max()


def identity_weights(categ: CategoriesLike | CategoryAxis) -> FloatMatrix:
    """Identity weights: full credit for exact agreement only."""
    return np.eye(len(_as_axis(categ)))


def quadratic_weights(categ: CategoriesLike | CategoryAxis) -> FloatMatrix:
    axis = _as_axis(categ)
    if len(axis) == 1:
        return np.eye(1)
    return 1.0 - _differences(axis) ** 2 / axis.span**2


def linear_weights(categ: CategoriesLike | CategoryAxis) -> FloatMatrix:
    axis = _as_axis(categ)
    if len(axis) == 1:
        return np.eye(1)
    return 1.0 - np.abs(_differences(axis)) / abs(axis.span)


def radical_weights(categ: CategoriesLike | CategoryAxis) -> FloatMatrix:
    axis = _as_axis(categ)
    if len(axis) == 1:
        return np.eye(1)
    return 1.0 - np.sqrt(np.abs(_differences(axis))) / np.sqrt(abs(axis.span))


def ratio_weights(categ: CategoriesLike | CategoryAxis) -> FloatMatrix:
    """Ratio weights; no two distinct categories may sum to zero."""
    axis = _as_axis(categ)
    if len(axis) == 1:
        return np.eye(1)

    x = axis.sorted_values()
    xmin, xmax = x[0], x[-1]
    sums = x[:, None] + x[None, :]
    np.fill_diagonal(sums, 1.0)  # diagonal differences are 0; avoids 0/0 when a category is 0
    if xmax + xmin == 0 or (sums == 0).any():
        raise InvalidInput(
            "Ratio weights are undefined when two categories sum to zero "
            f"(categories {axis.labels})."
        )

    weights = 1.0 - (_differences(axis) / sums) ** 2 / ((xmax - xmin) / (xmax + xmin)) ** 2
    np.fill_diagonal(weights, 1.0)
    return weights


def circular_weights(categ: CategoriesLike | CategoryAxis) -> FloatMatrix:
    axis = _as_axis(categ)
    if len(axis) == 1:
        return np.eye(1)
    period = axis.span + 1.0
    raw = np.sin(np.pi * _differences(axis) / period) ** 2
    return _rescale(raw)


def bipolar_weights(categ: CategoriesLike | CategoryAxis) -> FloatMatrix:
    axis = _as_axis(categ)
    if len(axis) == 1:
        return np.eye(1)

    x = axis.sorted_values()
    xmin, xmax = x[0], x[-1]
    sums = x[:, None] + x[None, :]
    denominator = (sums - 2.0 * xmin) * (2.0 * xmax - sums)
    off_diagonal = ~np.eye(len(axis), dtype=bool)

    raw = np.zeros((len(axis), len(axis)))
    raw[off_diagonal] = _differences(axis)[off_diagonal] ** 2 / denominator[off_diagonal]
    return _rescale(raw)


def ordinal_weights(categ: CategoriesLike | CategoryAxis) -> FloatMatrix:
    """Ordinal weights; depend only on the rank positions of the categories."""
    q = len(_as_axis(categ))
    if q == 1:
        return np.eye(1)
    ranks = np.arange(1, q + 1, dtype=np.float64)
    n_kl = np.abs(ranks[:, None] - ranks[None, :]) + 1.0
    return _rescale(n_kl * (n_kl - 1.0) / 2.0)


_BUILDERS: dict[WeightScheme, Callable[[CategoriesLike | CategoryAxis], FloatMatrix]] = {
    WeightScheme.IDENTITY: identity_weights,
    WeightScheme.QUADRATIC: quadratic_weights,
    WeightScheme.LINEAR: linear_weights,
    WeightScheme.RADICAL: radical_weights,
    WeightScheme.RATIO: ratio_weights,
    WeightScheme.CIRCULAR: circular_weights,
    WeightScheme.BIPOLAR: bipolar_weights,
    WeightScheme.ORDINAL: ordinal_weights,
}


def weight_matrix(
    scheme: WeightScheme | str, categ: CategoriesLike | CategoryAxis
) -> FloatMatrix:
    """Build the q x q weight matrix of a named scheme for the given categories."""
    if not isinstance(scheme, WeightScheme):
        scheme = WeightScheme.parse(scheme)
    return _BUILDERS[scheme](categ)


@dataclass(frozen=True)
class NamedWeights:
    """A weight scheme to be built once the category axis is known."""

    scheme: WeightScheme

    @property
    def name(self) -> str:
        return self.scheme.value

    def resolve(self, axis: CategoryAxis) -> FloatMatrix:
        return weight_matrix(self.scheme, axis)


@dataclass(frozen=True)
class CustomWeights:
    """A caller-supplied square weight matrix, used as-is."""

    matrix: FloatMatrix = field(compare=False)

    name = "Custom Weights"

    def resolve(self, axis: CategoryAxis) -> FloatMatrix:
        q = len(axis)
        if self.matrix.shape != (q, q):
            raise WeightMatrixShapeMismatch(self.matrix.shape, q)
        return self.matrix


WeightSpec = Union[NamedWeights, CustomWeights]


def weight_spec(
    weights: WeightsLike | WeightSpec,
    *,
    unknown_policy: Literal["error", "identity"] = "error",
) -> WeightSpec:
    """Turn a scheme name or a matrix into a ``WeightSpec``.

    Args:
        weights: Scheme name, explicit matrix, or an existing spec.
        unknown_policy: ``"error"`` raises ``UnknownWeightScheme`` for unrecognised
            names; ``"identity"`` substitutes identity weights and logs a warning.

    Raises:
        UnknownWeightScheme: Unrecognised name under the ``"error"`` policy.
        WeightMatrixShapeMismatch: A matrix that is not square.
        InvalidInput: A matrix with non-numeric or non-finite entries.
    """
    if isinstance(weights, (NamedWeights, CustomWeights)):
        return weights

    if isinstance(weights, WeightScheme):
        return NamedWeights(weights)

    if isinstance(weights, str):
        try:
            return NamedWeights(WeightScheme.parse(weights))
        except UnknownWeightScheme:
            if unknown_policy == "error":
                raise
            logger.warning(f"Unknown weight scheme {weights!r}; falling back to identity weights")
            return NamedWeights(WeightScheme.IDENTITY)

    if hasattr(weights, "to_numpy"):
        weights = weights.to_numpy()
    try:
        matrix = np.asarray(weights, dtype=np.float64)
    except (TypeError, ValueError) as error:
        raise InvalidInput("Custom weights must be a numeric square matrix.") from error

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise WeightMatrixShapeMismatch(matrix.shape, matrix.shape[0] if matrix.ndim else 0)
    if not np.isfinite(matrix).all():
        raise InvalidInput("Custom weights must be finite.")
    return CustomWeights(matrix)
