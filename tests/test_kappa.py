"""Tests for Fleiss' generalized kappa."""

import math

import pytest

from pyagree.ira.kappa import (
    fleiss_kappa_dist,
    symmetrized_weighted_proportions,
    weighted_chance_agreement,
)
from pyagree.ira.weights import quadratic_weights


def test_worked_example(worked_table):
    result = fleiss_kappa_dist(worked_table)

    assert result.coeff_name == "Fleiss' Kappa"
    assert result.pa == pytest.approx(2 / 3)
    assert result.pe == pytest.approx(0.5)
    assert result.coeff == pytest.approx(1 / 3)
    assert result.stderr == pytest.approx(2 / 3)
    assert result.p_value == pytest.approx(2 / 3)


def test_unequal_rater_counts(mixed_raters_table):
    result = fleiss_kappa_dist(mixed_raters_table)

    assert result.n_subjects == 4
    assert result.pe == pytest.approx(17 / 32)
    assert result.coeff == pytest.approx(13 / 45)
    assert result.stderr == pytest.approx(0.71414, abs=1e-4)


def test_quadratic_weights_on_widened_table(worked_table):
    result = fleiss_kappa_dist(worked_table, weights="quadratic", categ=[1, 2, 3])

    assert result.pa == pytest.approx(11 / 12)
    assert result.pe == pytest.approx(7 / 8)
    assert result.coeff == pytest.approx(1 / 3)


def test_weighted_chance_agreement_helpers():
    pi = [0.5, 0.5, 0.0]
    weights = quadratic_weights([1, 2, 3])
    assert weighted_chance_agreement(pi, weights) == pytest.approx(0.875)
    assert symmetrized_weighted_proportions(pi, weights).tolist() == pytest.approx(
        [0.875, 0.875, 0.375]
    )


def test_p_value_is_two_sided():
    """A negative kappa gets the same p-value as its mirror image."""
    result = fleiss_kappa_dist([[1, 1], [1, 1], [2, 0], [1, 1]])
    assert result.coeff < 0
    assert 0.0 <= result.p_value <= 1.0
    statistic = abs(result.coeff / result.stderr)
    assert result.p_value == pytest.approx(
        2 * (1 - _t_cdf_df3(statistic)), rel=1e-6
    )


def _t_cdf_df3(t: float) -> float:
    """Closed-form Student-t CDF for three degrees of freedom."""
    x = t / math.sqrt(3)
    return 0.5 + (x / (1 + x * x) + math.atan(x)) / math.pi
