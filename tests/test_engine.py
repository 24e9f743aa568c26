"""Tests for the shared agreement engine."""

import math

import numpy as np
import pytest

from pyagree.config import EstimationSettings, PyagreeSettings
from pyagree.exceptions import DegenerateVariance, InvalidInput, UndefinedCoefficient
from pyagree.ira import POLICIES
from pyagree.ira.alignment import align
from pyagree.ira.engine import (
    AgreementEngine,
    SubjectStatistics,
    linearized_variance,
    subject_percent_agreement,
)
from pyagree.ira.kappa import FleissPolicy
from pyagree.ira.percent import PercentAgreementPolicy


def test_subject_statistics_worked_example(worked_table):
    stats = SubjectStatistics.from_aligned(align(worked_table))
    np.testing.assert_array_equal(stats.rater_counts, [2, 2, 2])
    np.testing.assert_array_equal(stats.agreement, [2, 2, 0])
    np.testing.assert_array_equal(stats.weighted, worked_table)
    assert stats.n_multi_rated == 3


def test_single_rater_denominator_is_guarded(mixed_raters_table):
    stats = SubjectStatistics.from_aligned(align(mixed_raters_table))
    pa_i = subject_percent_agreement(stats)
    assert np.isfinite(pa_i).all()
    # The single-rater subject has s_i = 0 and a -1 denominator.
    assert pa_i[3] == 0.0
    np.testing.assert_allclose(pa_i[:3], [1.0, 1.0, 0.0])


def test_subset_keeps_weights(mixed_raters_table):
    stats = SubjectStatistics.from_aligned(align(mixed_raters_table))
    reduced = stats.subset(stats.multi_rated)
    assert reduced.n_subjects == 3
    assert reduced.weights is stats.weights


def test_linearized_variance_formula():
    values = np.array([1.0, 1.0, -1.0])
    assert linearized_variance(values, 1 / 3) == pytest.approx(4 / 9)
    assert linearized_variance(values, 1 / 3, sampling_fraction=0.5) == pytest.approx(2 / 9)


@pytest.mark.parametrize("name", list(POLICIES))
def test_every_policy_reproduces_worked_example_pa(name, worked_table):
    """Subjects 1 and 2 agree, subject 3 splits: pa = 2/3."""
    result = AgreementEngine(POLICIES[name]()).estimate(worked_table)
    if name == "krippendorff":
        # Alpha carries the 1 / sum(r_i) small-sample correction.
        assert result.pa == pytest.approx((1 - 1 / 6) * (2 / 3) + 1 / 6)
    else:
        assert result.pa == pytest.approx(2 / 3)


@pytest.mark.parametrize("name", list(POLICIES))
def test_identity_name_matches_explicit_identity(name, ordinal_frame):
    engine = AgreementEngine(POLICIES[name]())
    named = engine.estimate(ordinal_frame, weights="unweighted")
    explicit = engine.estimate(ordinal_frame, weights=np.eye(5))
    assert named.pa == pytest.approx(explicit.pa, abs=1e-12)
    assert named.pe == pytest.approx(explicit.pe, abs=1e-12)
    assert named.coeff == pytest.approx(explicit.coeff, abs=1e-12)
    assert named.stderr == pytest.approx(explicit.stderr, abs=1e-12)


@pytest.mark.parametrize("name", list(POLICIES))
@pytest.mark.parametrize("weights", ["unweighted", "quadratic", "linear", "ordinal", "bipolar"])
def test_percent_agreement_is_bounded(name, weights):
    rng = np.random.default_rng(7)
    table = rng.multinomial(5, [0.4, 0.3, 0.2, 0.1], size=25)
    result = AgreementEngine(POLICIES[name]()).estimate(table, weights=weights)
    assert 0.0 <= result.pa <= 1.0
    assert result.conf_int[1] <= 1.0


@pytest.mark.parametrize("name", list(POLICIES))
def test_unanimous_table_has_perfect_pa(name, unanimous_table):
    result = AgreementEngine(POLICIES[name]()).estimate(unanimous_table)
    assert result.pa == pytest.approx(1.0)
    assert result.coeff == pytest.approx(1.0)


def test_zero_stderr_reports_undefined_p_value(unanimous_table, log_messages):
    result = AgreementEngine(PercentAgreementPolicy()).estimate(unanimous_table)
    assert result.stderr == 0.0
    assert result.p_value is None
    assert result.conf_int == (1.0, 1.0)
    assert any("p-value is undefined" in message for message in log_messages)


def test_zero_stderr_raises_under_raise_policy(unanimous_table):
    settings = PyagreeSettings(estimation=EstimationSettings(degenerate_variance="raise"))
    engine = AgreementEngine(PercentAgreementPolicy(), settings=settings)
    with pytest.raises(DegenerateVariance):
        engine.estimate(unanimous_table)


def test_chance_agreement_of_one_is_undefined():
    with pytest.raises(UndefinedCoefficient, match="chance agreement equals 1"):
        AgreementEngine(FleissPolicy()).estimate([[3, 0], [2, 0], [4, 0]])


def test_finite_population_shrinks_stderr(worked_table):
    engine = AgreementEngine(FleissPolicy())
    infinite = engine.estimate(worked_table)
    finite = engine.estimate(worked_table, population_size=6)
    assert finite.coeff == pytest.approx(infinite.coeff)
    assert finite.stderr == pytest.approx(infinite.stderr * math.sqrt(1 - 3 / 6))


@pytest.mark.parametrize(
    ("ratings", "kwargs", "match"),
    [
        ([[2, 0], [0, 0], [1, 1]], {}, "without any rating"),
        ([[1, 0], [0, 1]], {}, "two or more raters"),
        ([[1, 1]], {}, "At least two subjects"),
        ([[2, 0], [1, 1]], {"conflev": 1.5}, "conflev"),
        ([[2, 0], [1, 1]], {"population_size": 0}, "population_size"),
        ([[2, 0], [1, 1], [0, 2]], {"population_size": 2}, "smaller than the number of subjects"),
    ],
)
def test_invalid_inputs(ratings, kwargs, match):
    with pytest.raises(InvalidInput, match=match):
        AgreementEngine(FleissPolicy()).estimate(ratings, **kwargs)


def test_defaults_come_from_settings(worked_table):
    settings = PyagreeSettings(estimation=EstimationSettings(conflev=0.9, ci_decimals=2))
    result = AgreementEngine(FleissPolicy(), settings=settings).estimate(worked_table)
    assert result.conflev == 0.9
    assert result.conf_int_label.count(".") == 2
    assert len(result.conf_int_label.split(",")[0].split(".")[1]) == 2
