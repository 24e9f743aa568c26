"""Percent agreement, reported with the same inference as the chance-corrected coefficients."""

from __future__ import annotations

from pyagree.ira.engine import AgreementEngine, AgreementPolicy, SubjectStatistics
from pyagree.ira.results import EstimationResult
from pyagree.ira.weights import WeightSpec
from pyagree.types import CategoriesLike, FloatVector, RatingsLike, WeightsLike


class PercentAgreementPolicy(AgreementPolicy):
    name = "Percent agreement"

    def chance_agreement(self, pi: FloatVector, stats: SubjectStatistics) -> float:
        return 0.0

    def coefficient(self, pa: float, pe: float) -> float:
        return pa

    def pseudo_values(
        self,
        stats: SubjectStatistics,
        *,
        pa_i: FloatVector,
        pi: FloatVector,
        pe: float,
        coeff: float,
    ) -> FloatVector:
        return (stats.n_subjects / stats.n_multi_rated) * pa_i


def percent_agreement_dist(
    ratings: RatingsLike,
    *,
    weights: WeightsLike | WeightSpec | None = None,
    categ: CategoriesLike | None = None,
    conflev: float | None = None,
    population_size: float | None = None,
) -> EstimationResult:
    """Compute (weighted) percent agreement and its standard error; ``pe`` is reported as 0."""
    return AgreementEngine(PercentAgreementPolicy()).estimate(
        ratings,
        weights=weights,
        categ=categ,
        conflev=conflev,
        population_size=population_size,
    )
