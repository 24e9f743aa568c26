"""Tests for category alignment and one-time weight resolution."""

import numpy as np
import pytest

from pyagree.data.tables import as_distribution_table
from pyagree.exceptions import InvalidInput, UnknownWeightScheme, WeightMatrixShapeMismatch
from pyagree.ira.alignment import align, align_categories
from pyagree.ira.weights import CategoryAxis, quadratic_weights


def test_default_categories_are_one_to_q(worked_table):
    table, axis = align_categories(as_distribution_table(worked_table))
    assert axis.labels == [1, 2]
    assert table.n_categories == 2


def test_declared_categories_widen_the_table(worked_table):
    table, axis = align_categories(as_distribution_table(worked_table), [1, 2, 3, 4])
    assert table.n_categories == 4
    assert table.columns == ("1", "2", "v1", "v2")
    np.testing.assert_array_equal(table.counts[:, 2:], np.zeros((3, 2)))
    assert len(axis) == 4


def test_short_category_list_is_rejected(worked_table):
    with pytest.raises(InvalidInput, match="1 entries but the table has 2 columns"):
        align_categories(as_distribution_table(worked_table), ["only"])


def test_axis_instance_is_accepted(worked_table):
    axis = CategoryAxis(["a", "b", "c"])
    table, resolved = align_categories(as_distribution_table(worked_table), axis)
    assert resolved is axis
    assert table.n_categories == 3


def test_align_builds_weights_for_widened_table(worked_table):
    aligned = align(worked_table, weights="quadratic", categ=[1, 2, 3])
    assert aligned.n_categories == 3
    assert aligned.n_subjects == 3
    assert aligned.weights_name == "quadratic"
    np.testing.assert_allclose(aligned.weights, quadratic_weights([1, 2, 3]))


def test_align_custom_matrix_checked_after_widening(worked_table):
    with pytest.raises(WeightMatrixShapeMismatch):
        align(worked_table, weights=np.eye(2), categ=[1, 2, 3])

    aligned = align(worked_table, weights=np.eye(3), categ=[1, 2, 3])
    assert aligned.weights_name == "Custom Weights"


def test_align_unknown_scheme_policies(worked_table):
    with pytest.raises(UnknownWeightScheme):
        align(worked_table, weights="cubic")

    aligned = align(worked_table, weights="cubic", unknown_policy="identity")
    assert aligned.weights_name == "identity"
    np.testing.assert_array_equal(aligned.weights, np.eye(2))
