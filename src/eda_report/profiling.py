from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from .config import EdaConfig
from .loader import Dataset
from .models import CategoricalSummary, ColumnKind, ColumnProfile, FrequencyEntry, NumericSummary
from .utils import round_or_none

QUANTILES: tuple[tuple[str, float], ...] = (
    ("p05", 0.05),
    ("p25", 0.25),
    ("p50", 0.50),
    ("p75", 0.75),
    ("p95", 0.95),
)


def profile_dataset(dataset: Dataset, config: Optional[EdaConfig] = None) -> tuple[ColumnProfile, ...]:
    """Profile every column of the dataset, in column order."""
    cfg = config or EdaConfig()
    return tuple(
        profile_column(
            name,
            dataset.column(name),
            dataset.kind(name),
            cfg,
            type_mismatches=dataset.mismatch_count(name),
        )
        for name in dataset.columns
    )


def profile_column(
    name: str,
    values: pd.Series,
    kind: ColumnKind,
    config: Optional[EdaConfig] = None,
    *,
    type_mismatches: int = 0,
) -> ColumnProfile:
    """
    Summarize one column.

    Missing values are excluded from every statistic and reported in
    `missing`. An EMPTY column gets count=0 and neither numeric nor
    categorical details.
    """
    cfg = config or EdaConfig()
    rows = int(values.shape[0])
    present = values.dropna()
    count = int(present.shape[0])
    missing = rows - count

    numeric: Optional[NumericSummary] = None
    categorical: Optional[CategoricalSummary] = None
    if kind == ColumnKind.NUMERIC and count > 0:
        numeric = _numeric_summary(present.astype(float), skew_threshold=cfg.skew_threshold)
    elif kind == ColumnKind.CATEGORICAL and count > 0:
        categorical = _categorical_summary(present.astype(str), top_k=cfg.top_k)

    return ColumnProfile(
        name=name,
        kind=kind,
        count=count,
        missing=missing,
        missing_fraction=round_or_none(missing / rows) if rows > 0 else 0.0,
        cardinality=int(present.nunique()),
        type_mismatches=type_mismatches,
        numeric=numeric,
        categorical=categorical,
    )


def _numeric_summary(s: pd.Series, *, skew_threshold: float) -> NumericSummary:
    q = s.quantile([p for _, p in QUANTILES], interpolation="linear")
    skew, kurt = _moments(s.to_numpy(dtype=float))
    return NumericSummary(
        mean=round_or_none(float(s.mean())),
        median=round_or_none(float(s.median())),
        std=round_or_none(float(s.std(ddof=0))),
        min=round_or_none(float(s.min())),
        max=round_or_none(float(s.max())),
        quantiles={label: round_or_none(float(q.loc[p])) for label, p in QUANTILES},
        skewness=round_or_none(skew),
        kurtosis=round_or_none(kurt),
        skew_flag=bool(skew is not None and abs(skew) >= skew_threshold),
    )


def _moments(x: np.ndarray) -> tuple[Optional[float], Optional[float]]:
    """Population skewness g1 and excess kurtosis g2.

    Undefined for a constant column; skewness needs 3 values, kurtosis 4.
    """
    n = x.shape[0]
    if n < 3:
        return None, None
    d = x - x.mean()
    m2 = float(np.mean(d**2))
    if m2 == 0.0:
        return None, None
    m3 = float(np.mean(d**3))
    skew = m3 / m2**1.5
    if n < 4:
        return skew, None
    m4 = float(np.mean(d**4))
    return skew, m4 / m2**2 - 3.0


def _categorical_summary(s: pd.Series, *, top_k: int) -> CategoricalSummary:
    counts = s.value_counts()
    first_seen = list(pd.unique(s))
    # sorted() is stable, so equal counts keep first-seen order
    ordered = sorted(first_seen, key=lambda v: -int(counts[v]))
    total = int(s.shape[0])
    top = tuple(
        FrequencyEntry(value=str(v), count=int(counts[v]), fraction=round_or_none(int(counts[v]) / total))
        for v in ordered[:top_k]
    )
    other = total - sum(e.count for e in top)
    return CategoricalSummary(top=top, other_count=other)
