"""Error types raised by pyagree.

All errors derive from ``ValueError`` so callers catching ``ValueError`` for bad
input keep working.
"""

from __future__ import annotations


class AgreementError(ValueError):
    """Base class for every pyagree error."""


class InvalidInput(AgreementError):
    """Raised when a rating table, category list or option fails validation."""


class WeightMatrixShapeMismatch(InvalidInput):
    """Raised when a custom weight matrix is not square or does not match the category count."""

    def __init__(self, shape: tuple[int, ...], n_categories: int):
        self.shape = tuple(shape)
        self.n_categories = n_categories
        super().__init__(
            f"Weight matrix shape {self.shape} does not match the category count "
            f"({n_categories}); expected ({n_categories}, {n_categories})."
        )


class UnknownWeightScheme(InvalidInput):
    """Raised when a weight scheme name is not recognised."""

    def __init__(self, name: str, supported: list[str]):
        self.name = name
        self.supported = supported
        super().__init__(
            f"Unknown weight scheme: {name!r}. Supported schemes: {', '.join(supported)}."
        )


class DegenerateVariance(AgreementError):
    """Raised when the standard error is zero and the p-value is undefined."""


class UndefinedCoefficient(AgreementError):
    """Raised when chance agreement equals one, so (pa - pe) / (1 - pe) is undefined."""
