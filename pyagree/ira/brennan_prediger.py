"""Brennan-Prediger coefficient."""

from __future__ import annotations

from pyagree.ira.engine import AgreementEngine, AgreementPolicy, SubjectStatistics
from pyagree.ira.results import EstimationResult
from pyagree.ira.weights import WeightSpec
from pyagree.types import CategoriesLike, FloatVector, RatingsLike, WeightsLike


class BrennanPredigerPolicy(AgreementPolicy):
    """Chance agreement ``sum(W) / q^2``; it does not depend on the data."""

    name = "Brennan-Prediger"

    def chance_agreement(self, pi: FloatVector, stats: SubjectStatistics) -> float:
        return float(stats.weights.sum()) / stats.n_categories**2

    def pseudo_values(
        self,
        stats: SubjectStatistics,
        *,
        pa_i: FloatVector,
        pi: FloatVector,
        pe: float,
        coeff: float,
    ) -> FloatVector:
        return self.subject_coefficients(stats, pa_i, pe)


def brennan_prediger_dist(
    ratings: RatingsLike,
    *,
    weights: WeightsLike | WeightSpec | None = None,
    categ: CategoriesLike | None = None,
    conflev: float | None = None,
    population_size: float | None = None,
) -> EstimationResult:
    """Compute the Brennan-Prediger coefficient and its standard error."""
    return AgreementEngine(BrennanPredigerPolicy()).estimate(
        ratings,
        weights=weights,
        categ=categ,
        conflev=conflev,
        population_size=population_size,
    )
