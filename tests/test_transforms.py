"""Tests for the additive, multiplicative and Box-Cox transforms."""

from __future__ import annotations

import numpy as np
import pytest

from stl_loess.errors import InvalidLambdaError
from stl_loess.transforms import additive, box_cox, multiplicative, transform_from_name

VALUES = np.array([0.5, 1.0, 2.0, 4.0, 9.0, 100.0])


def test_additive_is_identity():
    t = additive()
    assert t.is_identity
    np.testing.assert_array_equal(t.forward(VALUES), VALUES)
    np.testing.assert_array_equal(t.inverse(VALUES), VALUES)


def test_multiplicative_is_log():
    t = multiplicative()
    assert not t.is_identity
    np.testing.assert_allclose(t.forward(VALUES), np.log(VALUES))
    np.testing.assert_allclose(t.inverse(t.forward(VALUES)), VALUES)


@pytest.mark.parametrize("values", [[1.0, 0.0, 2.0], [1.0, -3.0]])
def test_multiplicative_rejects_non_positive(values):
    with pytest.raises(ValueError):
        multiplicative().forward(np.array(values))


@pytest.mark.parametrize("lmbda", [0.25, 0.5, 2.0])
def test_box_cox_inverts(lmbda):
    t = box_cox(lmbda)
    assert t.lmbda == lmbda
    np.testing.assert_allclose(t.inverse(t.forward(VALUES)), VALUES)


def test_box_cox_zero_is_log():
    t = box_cox(0.0)
    assert t.name == "multiplicative"
    np.testing.assert_allclose(t.forward(VALUES), np.log(VALUES))


def test_box_cox_one_is_shift():
    np.testing.assert_allclose(box_cox(1.0).forward(VALUES), VALUES - 1.0)


def test_box_cox_negative_lambda():
    with pytest.raises(InvalidLambdaError):
        box_cox(-0.5)
    # also usable as a ValueError
    with pytest.raises(ValueError):
        box_cox(-2.0)


def test_transform_from_name():
    assert transform_from_name("additive").is_identity
    assert transform_from_name("multiplicative").name == "multiplicative"
    assert transform_from_name("boxcox", 0.5).lmbda == 0.5
    with pytest.raises(ValueError):
        transform_from_name("boxcox")
    with pytest.raises(ValueError):
        transform_from_name("logistic")
