from __future__ import annotations

import math
import os
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

DEFAULT_MISSING_MARKERS: tuple[str, ...] = ("", "NA", "N/A", "NaN", "nan", "null", "NULL", "None", "-")


class EdaConfig(BaseModel):
    """
    Thresholds and loader options for a report run.

    iqr_multiplier: k in [Q1 - k*IQR, Q3 + k*IQR]
    corr_threshold: pairs with |r| strictly above this are flagged redundant
    top_k: size of the categorical frequency table
    numeric_min_ratio: share of parseable values needed to type a column numeric
    skew_threshold: |skew| at or above this sets skew_flag
    high_outlier_ratio: outlier ratio at or above this produces a report warning
    """

    model_config = ConfigDict(frozen=True)

    iqr_multiplier: float = Field(default=1.5, gt=0, allow_inf_nan=False)
    corr_threshold: float = Field(default=0.8, ge=0, le=1)
    top_k: int = Field(default=10, gt=0)
    numeric_min_ratio: float = Field(default=0.9, gt=0, le=1)
    skew_threshold: float = Field(default=1.0, gt=0, allow_inf_nan=False)
    high_outlier_ratio: float = Field(default=0.05, gt=0, le=1)
    delimiter: str = Field(default=",", min_length=1, max_length=1)
    missing_markers: tuple[str, ...] = DEFAULT_MISSING_MARKERS
    strict_types: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "EdaConfig":
        """Build a config from EDA_* environment variables.

        Unset, blank or invalid values fall back to the defaults.
        """
        defaults = cls()
        return cls(
            iqr_multiplier=_env("EDA_IQR_MULTIPLIER", float, defaults.iqr_multiplier, _positive),
            corr_threshold=_env("EDA_CORR_THRESHOLD", float, defaults.corr_threshold, _unit_interval),
            top_k=_env("EDA_TOP_K", int, defaults.top_k, _positive),
            numeric_min_ratio=_env(
                "EDA_NUMERIC_MIN_RATIO", float, defaults.numeric_min_ratio, _open_unit_interval
            ),
            skew_threshold=_env("EDA_SKEW_THRESHOLD", float, defaults.skew_threshold, _positive),
            high_outlier_ratio=_env(
                "EDA_HIGH_OUTLIER_RATIO", float, defaults.high_outlier_ratio, _open_unit_interval
            ),
            delimiter=_env("EDA_CSV_DELIMITER", _delimiter, defaults.delimiter, strip=False),
            strict_types=_env("EDA_STRICT_TYPES", _flag, defaults.strict_types),
            log_level=_env("EDA_LOG_LEVEL", _level, defaults.log_level),
        )

    def settings_snapshot(self) -> dict[str, object]:
        """Thresholds that influence report content, recorded in the report."""
        return {
            "iqr_multiplier": self.iqr_multiplier,
            "corr_threshold": self.corr_threshold,
            "top_k": self.top_k,
            "numeric_min_ratio": self.numeric_min_ratio,
            "skew_threshold": self.skew_threshold,
            "high_outlier_ratio": self.high_outlier_ratio,
            "std_ddof": 0,
            "quantile_interpolation": "linear",
            "correlation_method": "pearson",
        }


def _env(
    name: str,
    parse: Callable[[str], T],
    default: T,
    check: Optional[Callable[[T], bool]] = None,
    strip: bool = True,
) -> T:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        v = parse(raw.strip() if strip else raw)
    except ValueError:
        return default
    if check is not None and not check(v):
        return default
    return v


def _positive(v: float) -> bool:
    return math.isfinite(v) and v > 0


def _unit_interval(v: float) -> bool:
    return 0 <= v <= 1


def _open_unit_interval(v: float) -> bool:
    return 0 < v <= 1


def _flag(raw: str) -> bool:
    s = raw.lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    raise ValueError(raw)


def _delimiter(raw: str) -> str:
    if raw in ("\\t", "tab"):
        return "\t"
    if len(raw) != 1:
        raise ValueError(raw)
    return raw


def _level(raw: str) -> str:
    s = raw.upper()
    if s not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ValueError(raw)
    return s
