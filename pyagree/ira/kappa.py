"""Fleiss' generalized kappa for multiple raters."""

from __future__ import annotations

import numpy as np

from pyagree.ira.engine import AgreementEngine, AgreementPolicy, SubjectStatistics
from pyagree.ira.results import EstimationResult
from pyagree.ira.weights import WeightSpec
from pyagree.types import CategoriesLike, FloatMatrix, FloatVector, RatingsLike, WeightsLike


def weighted_chance_agreement(pi: FloatVector, weights: FloatMatrix) -> float:
    """``sum_{k,l} W[k,l] pi_k pi_l``."""
    return float(np.sum(weights * np.outer(pi, pi)))


def symmetrized_weighted_proportions(pi: FloatVector, weights: FloatMatrix) -> FloatVector:
    """Average of the row- and column-weighted proportions ``(W pi + W^T pi) / 2``."""
    return (weights @ pi + weights.T @ pi) / 2.0


class FleissPolicy(AgreementPolicy):
    name = "Fleiss' Kappa"

    def chance_agreement(self, pi: FloatVector, stats: SubjectStatistics) -> float:
        return weighted_chance_agreement(pi, stats.weights)

    def pseudo_values(
        self,
        stats: SubjectStatistics,
        *,
        pa_i: FloatVector,
        pi: FloatVector,
        pe: float,
        coeff: float,
    ) -> FloatVector:
        kappa_i = self.subject_coefficients(stats, pa_i, pe)
        pi_w = symmetrized_weighted_proportions(pi, stats.weights)
        pe_i = (stats.counts @ pi_w) / stats.rater_counts
        return kappa_i - 2.0 * (1.0 - coeff) * (pe_i - pe) / (1.0 - pe)


def fleiss_kappa_dist(
    ratings: RatingsLike,
    *,
    weights: WeightsLike | WeightSpec | None = None,
    categ: CategoriesLike | None = None,
    conflev: float | None = None,
    population_size: float | None = None,
) -> EstimationResult:
    """Compute Fleiss' generalized (weighted) kappa and its standard error.

    Args:
        ratings: n x q table of rater counts by subject and category.
        weights: Scheme name or explicit q x q weight matrix.
        categ: Ordered category list of length >= q.
        conflev: Confidence level of the interval.
        population_size: Finite subject population size.
    """
    return AgreementEngine(FleissPolicy()).estimate(
        ratings,
        weights=weights,
        categ=categ,
        conflev=conflev,
        population_size=population_size,
    )
