from __future__ import annotations

import pytest
from pydantic import ValidationError

from eda_report.config import EdaConfig


def test_defaults_without_environment(monkeypatch) -> None:
    for name in (
        "EDA_IQR_MULTIPLIER",
        "EDA_CORR_THRESHOLD",
        "EDA_TOP_K",
        "EDA_NUMERIC_MIN_RATIO",
        "EDA_SKEW_THRESHOLD",
        "EDA_HIGH_OUTLIER_RATIO",
        "EDA_CSV_DELIMITER",
        "EDA_STRICT_TYPES",
        "EDA_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    assert EdaConfig.from_env() == EdaConfig()


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("EDA_IQR_MULTIPLIER", "3")
    monkeypatch.setenv("EDA_TOP_K", "5")
    monkeypatch.setenv("EDA_STRICT_TYPES", "yes")
    monkeypatch.setenv("EDA_CSV_DELIMITER", ";")
    monkeypatch.setenv("EDA_LOG_LEVEL", "debug")

    cfg = EdaConfig.from_env()
    assert cfg.iqr_multiplier == 3.0
    assert cfg.top_k == 5
    assert cfg.strict_types is True
    assert cfg.delimiter == ";"
    assert cfg.log_level == "DEBUG"


def test_invalid_environment_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("EDA_IQR_MULTIPLIER", "-2")
    monkeypatch.setenv("EDA_CORR_THRESHOLD", "high")
    monkeypatch.setenv("EDA_TOP_K", "0")
    monkeypatch.setenv("EDA_CSV_DELIMITER", ";;")

    cfg = EdaConfig.from_env()
    assert cfg.iqr_multiplier == 1.5
    assert cfg.corr_threshold == 0.8
    assert cfg.top_k == 10
    assert cfg.delimiter == ","


def test_config_is_validated_and_frozen() -> None:
    with pytest.raises(ValidationError):
        EdaConfig(corr_threshold=1.5)

    cfg = EdaConfig()
    with pytest.raises(ValidationError):
        cfg.top_k = 3  # type: ignore[misc]


def test_infinite_thresholds_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("EDA_IQR_MULTIPLIER", "inf")
    monkeypatch.setenv("EDA_SKEW_THRESHOLD", "Infinity")

    cfg = EdaConfig.from_env()
    assert cfg.iqr_multiplier == 1.5
    assert cfg.skew_threshold == 1.0

    with pytest.raises(ValidationError):
        EdaConfig(iqr_multiplier=float("inf"))
