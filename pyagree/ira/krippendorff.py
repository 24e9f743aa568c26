"""Krippendorff's alpha for a distribution of raters by subject and category."""

from __future__ import annotations

from loguru import logger

from pyagree.exceptions import InvalidInput
from pyagree.ira.engine import AgreementEngine, AgreementPolicy, SubjectStatistics
from pyagree.ira.kappa import symmetrized_weighted_proportions, weighted_chance_agreement
from pyagree.ira.results import EstimationResult
from pyagree.ira.weights import WeightSpec
from pyagree.types import CategoriesLike, FloatVector, RatingsLike, WeightsLike


class KrippendorffPolicy(AgreementPolicy):
    """
    Krippendorff's alpha as a chance-corrected agreement coefficient.

    Differs from the other coefficients in three ways:
    - subjects rated by fewer than two raters are dropped before anything is computed;
    - proportions and percent agreement are taken against the mean rater count;
    - percent agreement carries the small-sample correction ``eps = 1 / sum(r_i)``.
    """

    name = "Krippendorff's Alpha"

    def prepare(self, stats: SubjectStatistics) -> SubjectStatistics:
        keep = stats.multi_rated
        if not keep.any():
            raise InvalidInput("No subject was rated by two or more raters.")

        dropped = stats.n_subjects - int(keep.sum())
        if dropped:
            logger.debug(f"Dropping {dropped} subject(s) rated by fewer than two raters")
            stats = stats.subset(keep)
        return stats

    @staticmethod
    def _mean_raters(stats: SubjectStatistics) -> float:
        return float(stats.rater_counts.mean())

    @staticmethod
    def _epsilon(stats: SubjectStatistics) -> float:
        return 1.0 / float(stats.rater_counts.sum())

    def percent_agreement(self, stats: SubjectStatistics) -> tuple[float, FloatVector]:
        r = stats.rater_counts
        r_bar = self._mean_raters(stats)
        eps = self._epsilon(stats)

        raw = stats.agreement / (r_bar * (r - 1.0))
        raw_mean = float(raw.mean())
        pa = (1.0 - eps) * raw_mean + eps
        pa_i = (1.0 - eps) * (raw - raw_mean * (r - r_bar) / r_bar) + eps
        return pa, pa_i

    def class_proportions(self, stats: SubjectStatistics) -> FloatVector:
        return (stats.counts / self._mean_raters(stats)).mean(axis=0)

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
        r = stats.rater_counts
        r_bar = self._mean_raters(stats)

        alpha_i = (pa_i - pe) / (1.0 - pe)
        pi_w = symmetrized_weighted_proportions(pi, stats.weights)
        pe_i = (stats.counts @ pi_w) / r_bar - pi.sum() * (r - r_bar) / r_bar
        return alpha_i - (1.0 - coeff) * (pe_i - pe) / (1.0 - pe)


def krippendorff_alpha_dist(
    ratings: RatingsLike,
    *,
    weights: WeightsLike | WeightSpec | None = None,
    categ: CategoriesLike | None = None,
    conflev: float | None = None,
    population_size: float | None = None,
) -> EstimationResult:
    """
    Compute Krippendorff's alpha and its standard error.

    Subjects rated by fewer than two raters are removed from every statistic,
    including the subject count used for the degrees of freedom.

    Args:
        ratings: n x q table of rater counts by subject and category.
        weights: Scheme name or explicit q x q weight matrix.
        categ: Ordered category list of length >= q.
        conflev: Confidence level of the interval.
        population_size: Finite subject population size.
    """
    return AgreementEngine(KrippendorffPolicy()).estimate(
        ratings,
        weights=weights,
        categ=categ,
        conflev=conflev,
        population_size=population_size,
    )
