"""Gwet's AC1 (unweighted) and AC2 (weighted) coefficients."""

from __future__ import annotations

import numpy as np

from pyagree.exceptions import InvalidInput
from pyagree.ira.engine import AgreementEngine, AgreementPolicy, SubjectStatistics
from pyagree.ira.results import EstimationResult
from pyagree.ira.weights import WeightSpec
from pyagree.types import CategoriesLike, FloatVector, RatingsLike, WeightsLike


class GwetPolicy(AgreementPolicy):
    """Chance agreement ``sum(W) * sum(pi_k (1 - pi_k)) / (q (q - 1))``."""

    name = "Gwet's AC1"

    def coefficient_name(self, stats: SubjectStatistics) -> str:
        if np.isclose(stats.weights.sum(), stats.n_categories):
            return "Gwet's AC1"
        return "Gwet's AC2"

    def prepare(self, stats: SubjectStatistics) -> SubjectStatistics:
        if stats.n_categories < 2:
            raise InvalidInput("Gwet's AC1/AC2 requires at least two categories.")
        return super().prepare(stats)

    def _weight_factor(self, stats: SubjectStatistics) -> float:
        q = stats.n_categories
        return float(stats.weights.sum()) / (q * (q - 1))

    def chance_agreement(self, pi: FloatVector, stats: SubjectStatistics) -> float:
        return self._weight_factor(stats) * float(np.sum(pi * (1.0 - pi)))

    def pseudo_values(
        self,
        stats: SubjectStatistics,
        *,
        pa_i: FloatVector,
        pi: FloatVector,
        pe: float,
        coeff: float,
    ) -> FloatVector:
        ac_i = self.subject_coefficients(stats, pa_i, pe)
        pe_i = self._weight_factor(stats) * (stats.counts @ (1.0 - pi)) / stats.rater_counts
        return ac_i - 2.0 * (1.0 - coeff) * (pe_i - pe) / (1.0 - pe)


def gwet_ac1_dist(
    ratings: RatingsLike,
    *,
    weights: WeightsLike | WeightSpec | None = None,
    categ: CategoriesLike | None = None,
    conflev: float | None = None,
    population_size: float | None = None,
) -> EstimationResult:
    """Gwet's AC1/AC2 from a distribution of raters by subject and category.

    Reported as "Gwet's AC1" when the weights sum to q (identity weights) and
    "Gwet's AC2" otherwise.

    Args:
        ratings: n x q table of rater counts; subjects nobody rated must be excluded.
        weights: Scheme name (``"unweighted"``, ``"quadratic"``, ...) or a q x q matrix.
        categ: Ordered category list of length >= q.
        conflev: Confidence level of the interval.
        population_size: Finite subject population size (infinite by default).

    Returns:
        The estimate with its standard error, confidence interval and p-value.
    """
    return AgreementEngine(GwetPolicy()).estimate(
        ratings,
        weights=weights,
        categ=categ,
        conflev=conflev,
        population_size=population_size,
    )
