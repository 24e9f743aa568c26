"""Tests for percent agreement."""

import math

import pytest

from pyagree.ira.percent import percent_agreement_dist


def test_worked_example(worked_table):
    result = percent_agreement_dist(worked_table)

    assert result.coeff_name == "Percent agreement"
    assert result.coeff == result.pa == pytest.approx(2 / 3)
    assert result.pe == 0.0
    assert result.stderr == pytest.approx(1 / 3)
    assert result.p_value == pytest.approx(1 - 2 / math.sqrt(6))


def test_single_rater_subjects_rescale_variance(mixed_raters_table):
    """Subjects rated once stay in n and are rescaled by n / n2."""
    result = percent_agreement_dist(mixed_raters_table)

    assert result.n_subjects == 4
    assert result.pa == pytest.approx(2 / 3)
    assert result.stderr == pytest.approx(2 / math.sqrt(27))


def test_weighted_percent_agreement(worked_table):
    result = percent_agreement_dist(worked_table, weights="quadratic", categ=[1, 2, 3])
    assert result.coeff == pytest.approx(11 / 12)
