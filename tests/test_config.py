"""Tests for STL configuration models and stage defaults."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from stl_loess.config import (
    SmootherConfig,
    STLConfig,
    default_lowpass,
    default_seasonal,
    default_trend,
    trend_width,
)


@pytest.mark.parametrize(
    "periodicity, width, expected",
    [(12, 35, 19), (12, 7, 23), (4, 7, 8), (7, 1001, 11)],
)
def test_trend_width(periodicity, width, expected):
    assert trend_width(periodicity, width) == expected


def test_trend_width_small_seasonal_width():
    # 1 - 1.5/w is not positive, fall back to the large-width limit
    assert trend_width(12, 1) == 18


@pytest.mark.parametrize("width", [1, 5, 9, 10, 35, 500])
def test_default_seasonal(width):
    conf = default_seasonal(width)
    assert conf.width == width
    assert conf.jump == max(1, int(0.1 * width))
    assert conf.kernel == "linear"


@pytest.mark.parametrize("periodicity, width", [(2, 1), (12, 35), (52, 7)])
def test_default_trend_and_lowpass(periodicity, width):
    trend = default_trend(periodicity, width)
    assert trend.width == trend_width(periodicity, width)
    assert trend.jump >= 1

    lowpass = default_lowpass(periodicity)
    assert lowpass.width == periodicity
    assert lowpass.jump >= 1


def test_smoother_config_validation():
    with pytest.raises(ValidationError):
        SmootherConfig(width=0)
    with pytest.raises(ValidationError):
        SmootherConfig(width=5, jump=0)
    with pytest.raises(ValidationError):
        SmootherConfig(width=5, kernel="cubic")
    with pytest.raises(ValidationError):
        SmootherConfig(width=5, span=0.3)


def test_stl_config_validation():
    with pytest.raises(ValidationError):
        STLConfig(periodicity=1, width=7)
    with pytest.raises(ValidationError):
        STLConfig(periodicity=12, width=0)
    with pytest.raises(ValidationError):
        STLConfig(periodicity=12, width=7, model="boxcox")
    with pytest.raises(ValidationError):
        STLConfig(periodicity=12, width=7, model="boxcox", boxcox_lambda=-0.5)


def test_resolved_stages():
    config = STLConfig(periodicity=12, width=35, lowpass=SmootherConfig(width=13, jump=2))
    assert config.resolved_seasonal() == default_seasonal(35)
    assert config.resolved_trend() == default_trend(12, 35)
    assert config.resolved_lowpass() == SmootherConfig(width=13, jump=2)


def test_config_transform():
    config = STLConfig(periodicity=12, width=35, model="boxcox", boxcox_lambda=0.5)
    transform = config.transform()
    assert transform.name == "boxcox"
    assert transform.lmbda == 0.5


def test_yaml_round_trip(tmp_path):
    config = STLConfig(
        periodicity=12,
        width=35,
        trend=SmootherConfig(width=21, jump=2, kernel="quadratic"),
        robust_iter=2,
        model="multiplicative",
    )
    path = tmp_path / "configs" / "stl.yaml"
    config.to_yaml(path)
    assert STLConfig.from_yaml(path) == config


def test_yaml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        STLConfig.from_yaml(tmp_path / "missing.yaml")
