"""Shared point-estimate and linearized-variance engine for all agreement coefficients.

Every coefficient follows the same pipeline over an aligned n x q table ``A``
and weight matrix ``W``:

1. weighted table ``Aw = A W^T`` and rater counts ``r_i``;
2. per-subject agreement ``s_i = sum_k A[i,k] (Aw[i,k] - 1)``;
3. percent agreement ``pa`` over subjects rated at least twice;
4. category proportions ``pi`` and a coefficient-specific chance agreement ``pe``;
5. ``coeff = (pa - pe) / (1 - pe)``;
6. per-subject pseudo-values whose spread around ``coeff`` gives the variance.

An ``AgreementPolicy`` supplies steps 4 and 6 (and may override 3);
``AgreementEngine`` runs the rest and hands the result to the inference step.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from pyagree.config import PyagreeSettings, get_settings
from pyagree.exceptions import InvalidInput, UndefinedCoefficient
from pyagree.ira.alignment import AlignedRatings, align
from pyagree.ira.inference import infer
from pyagree.ira.results import EstimationResult
from pyagree.ira.weights import WeightSpec
from pyagree.types import CategoriesLike, FloatMatrix, FloatVector, RatingsLike, WeightsLike


@dataclass(frozen=True)
class SubjectStatistics:
    """Per-subject quantities shared by every coefficient."""

    counts: FloatMatrix
    weights: FloatMatrix
    weighted: FloatMatrix
    rater_counts: FloatVector
    agreement: FloatVector

    @classmethod
    def from_aligned(cls, aligned: AlignedRatings) -> SubjectStatistics:
        counts = aligned.counts
        weights = aligned.weights
        weighted = counts @ weights.T
        return cls(
            counts=counts,
            weights=weights,
            weighted=weighted,
            rater_counts=counts.sum(axis=1),
            agreement=(counts * (weighted - 1.0)).sum(axis=1),
        )

    @property
    def n_subjects(self) -> int:
        return int(self.counts.shape[0])

    @property
    def n_categories(self) -> int:
        return int(self.counts.shape[1])

    @property
    def multi_rated(self) -> NDArray[np.bool_]:
        """Mask of subjects rated by two or more raters."""
        return self.rater_counts >= 2

    @property
    def n_multi_rated(self) -> int:
        return int(self.multi_rated.sum())

    def subset(self, mask: NDArray[np.bool_]) -> SubjectStatistics:
        return replace(
            self,
            counts=self.counts[mask],
            weighted=self.weighted[mask],
            rater_counts=self.rater_counts[mask],
            agreement=self.agreement[mask],
        )


@dataclass(frozen=True)
class PointEstimate:
    """Coefficient, its ingredients and the pseudo-values used for its variance."""

    coeff: float
    pa: float
    pe: float
    pseudo_values: FloatVector
    n_subjects: int


def subject_percent_agreement(stats: SubjectStatistics) -> FloatVector:
    """``s_i / (r_i (r_i - 1))`` with the denominator of single-rater subjects set to -1.

    Subjects with fewer than two raters have ``s_i = 0``, so the guard only
    keeps the division defined.
    """
    denominator = stats.rater_counts * (stats.rater_counts - 1.0)
    denominator = np.where(denominator == 0, -1.0, denominator)
    return stats.agreement / denominator


def linearized_variance(
    pseudo_values: FloatVector, estimate: float, *, sampling_fraction: float = 0.0
) -> float:
    """``(1 - f) / (n (n - 1)) * sum((v_i - estimate)^2)``."""
    n = len(pseudo_values)
    spread = float(np.sum((pseudo_values - estimate) ** 2))
    return (1.0 - sampling_fraction) / (n * (n - 1)) * spread


class AgreementPolicy(ABC):
    """Coefficient-specific parts of the agreement pipeline."""

    #: Reported coefficient name.
    name: str = ""

    def coefficient_name(self, stats: SubjectStatistics) -> str:
        return self.name

    def prepare(self, stats: SubjectStatistics) -> SubjectStatistics:
        """Check (and possibly reduce) the subjects before any statistic is computed."""
        if (stats.rater_counts == 0).any():
            empty = np.nonzero(stats.rater_counts == 0)[0].tolist()
            raise InvalidInput(f"Subjects without any rating must be removed first (rows {empty}).")
        if stats.n_multi_rated == 0:
            raise InvalidInput("No subject was rated by two or more raters.")
        return stats

    def percent_agreement(self, stats: SubjectStatistics) -> tuple[float, FloatVector]:
        """Return ``pa`` and the per-subject agreement values it averages."""
        pa_i = subject_percent_agreement(stats)
        pa = float(pa_i[stats.multi_rated].sum() / stats.n_multi_rated)
        return pa, pa_i

    def class_proportions(self, stats: SubjectStatistics) -> FloatVector:
        """Mean over subjects of each subject's own category proportions."""
        return (stats.counts / stats.rater_counts[:, None]).mean(axis=0)

    @abstractmethod
    def chance_agreement(self, pi: FloatVector, stats: SubjectStatistics) -> float:
        """Chance agreement ``pe``."""

    def coefficient(self, pa: float, pe: float) -> float:
        if math.isclose(pe, 1.0, abs_tol=1e-12):
            raise UndefinedCoefficient(
                f"{self.name} is undefined because chance agreement equals 1."
            )
        return (pa - pe) / (1.0 - pe)

    @abstractmethod
    def pseudo_values(
        self,
        stats: SubjectStatistics,
        *,
        pa_i: FloatVector,
        pi: FloatVector,
        pe: float,
        coeff: float,
    ) -> FloatVector:
        """Per-subject values whose spread around ``coeff`` estimates its variance."""

    def subject_coefficients(
        self, stats: SubjectStatistics, pa_i: FloatVector, pe: float
    ) -> FloatVector:
        """Per-subject coefficients, rescaled to all subjects, before the ``pe`` correction."""
        scale = stats.n_subjects / stats.n_multi_rated
        pe_r2 = pe * stats.multi_rated
        return scale * (pa_i - pe_r2) / (1.0 - pe)

    def estimate(self, stats: SubjectStatistics) -> PointEstimate:
        stats = self.prepare(stats)
        pa, pa_i = self.percent_agreement(stats)
        pi = self.class_proportions(stats)
        pe = self.chance_agreement(pi, stats)
        coeff = self.coefficient(pa, pe)
        pseudo = self.pseudo_values(stats, pa_i=pa_i, pi=pi, pe=pe, coeff=coeff)
        return PointEstimate(
            coeff=float(coeff),
            pa=float(pa),
            pe=float(pe),
            pseudo_values=pseudo,
            n_subjects=stats.n_subjects,
        )


class AgreementEngine:
    """Run an ``AgreementPolicy`` over a rating-distribution table."""

    def __init__(self, policy: AgreementPolicy, *, settings: PyagreeSettings | None = None):
        self.policy = policy
        self.settings = settings

    def estimate(
        self,
        ratings: RatingsLike,
        *,
        weights: WeightsLike | WeightSpec | None = None,
        categ: CategoriesLike | None = None,
        conflev: float | None = None,
        population_size: float | None = None,
    ) -> EstimationResult:
        """Compute the coefficient, its standard error, confidence interval and p-value.

        Args:
            ratings: n x q table; cell (i, k) counts the raters who put subject i in category k.
            weights: Scheme name, explicit q x q matrix, or ``None`` for the configured default.
            categ: Ordered category list (at least q entries); defaults to ``1..q``.
            conflev: Confidence level; defaults to the configured value (0.95).
            population_size: Finite subject population N; defaults to infinity.

        Raises:
            InvalidInput: Malformed table, categories, weights or options.
            UndefinedCoefficient: Chance agreement equal to one.
            DegenerateVariance: Zero standard error under the ``"raise"`` policy.
        """
        settings = self.settings or get_settings()
        if weights is None:
            weights = settings.weights.default_scheme
        if conflev is None:
            conflev = settings.estimation.conflev
        if population_size is None:
            population_size = settings.estimation.population_size

        if not 0.0 < conflev < 1.0:
            raise InvalidInput(f"conflev must lie strictly between 0 and 1; got {conflev}.")
        if not population_size > 0:
            raise InvalidInput(f"population_size must be positive; got {population_size}.")

        aligned = align(
            ratings,
            weights=weights,
            categ=categ,
            unknown_policy=settings.weights.unknown_scheme_policy,
        )
        stats = SubjectStatistics.from_aligned(aligned)
        point = self.policy.estimate(stats)

        n = point.n_subjects
        if n < 2:
            raise InvalidInput(f"At least two subjects are required; got {n}.")
        if population_size < n:
            raise InvalidInput(
                f"population_size ({population_size}) is smaller than the number of subjects ({n})."
            )

        variance = linearized_variance(
            point.pseudo_values, point.coeff, sampling_fraction=n / population_size
        )
        inference = infer(
            point.coeff,
            variance,
            df=n - 1,
            conflev=conflev,
            degenerate=settings.estimation.degenerate_variance,
        )

        name = self.policy.coefficient_name(stats)
        logger.debug(
            f"{name}: coeff={point.coeff:.6g}, pa={point.pa:.6g}, pe={point.pe:.6g}, "
            f"stderr={inference.stderr:.6g} over {n} subjects"
        )
        return EstimationResult(
            coeff_name=name,
            coeff=point.coeff,
            stderr=inference.stderr,
            conf_int=inference.conf_int,
            p_value=inference.p_value,
            pa=point.pa,
            pe=point.pe,
            weights_name=aligned.weights_name,
            n_subjects=n,
            n_categories=aligned.n_categories,
            conflev=conflev,
            ci_decimals=settings.estimation.ci_decimals,
        )
