from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from .config import EdaConfig
from .errors import TargetColumnError
from .loader import Dataset
from .models import (
    ColumnKind,
    CorrelationMatrix,
    GroupBreakdown,
    GroupMean,
    RedundantPair,
    RelationshipSummary,
)
from .utils import round_or_none


def analyze_relationships(
    dataset: Dataset,
    config: Optional[EdaConfig] = None,
    target: Optional[str] = None,
) -> RelationshipSummary:
    cfg = config or EdaConfig()
    matrix = correlation_matrix(dataset)
    return RelationshipSummary(
        correlation=matrix,
        redundant_pairs=redundant_pairs(matrix, threshold=cfg.corr_threshold),
        target=target,
        group_means=group_means(dataset, target) if target is not None else (),
    )


def correlation_matrix(dataset: Dataset) -> CorrelationMatrix:
    """Pearson coefficients over pairwise-complete rows for all numeric columns.

    Only the upper triangle is computed; the lower one is its mirror, so the
    result is symmetric. The diagonal is 1.0. A pair with a constant side or
    fewer than two complete rows has no coefficient (None).
    """
    cols = dataset.columns_of_kind(ColumnKind.NUMERIC)
    series = {c: dataset.column(c) for c in cols}
    n = len(cols)
    grid: list[list[Optional[float]]] = [[None] * n for _ in range(n)]

    for i in range(n):
        grid[i][i] = 1.0
        for j in range(i + 1, n):
            r = _pearson(series[cols[i]], series[cols[j]])
            grid[i][j] = r
            grid[j][i] = r

    return CorrelationMatrix(
        columns=tuple(cols),
        values=tuple(tuple(row) for row in grid),
    )


def _pearson(a: pd.Series, b: pd.Series) -> Optional[float]:
    pair = pd.DataFrame({"a": a, "b": b}).dropna()
    if pair.shape[0] < 2:
        return None
    r = pair["a"].corr(pair["b"], method="pearson")
    if pd.isna(r):
        return None
    return round_or_none(float(np.clip(r, -1.0, 1.0)))


def redundant_pairs(matrix: CorrelationMatrix, *, threshold: float = 0.8) -> tuple[RedundantPair, ...]:
    """Pairs with |r| > threshold, strongest first, then by name."""
    cols = matrix.columns
    flags: list[RedundantPair] = []
    for i in range(len(cols)):
        for j in range(i + 1, len(cols)):
            r = matrix.values[i][j]
            if r is None:
                continue
            if abs(r) > threshold:
                flags.append(RedundantPair(a=cols[i], b=cols[j], r=r))

    flags.sort(key=lambda p: (-abs(p.r), p.a, p.b))
    return tuple(flags)


def group_means(dataset: Dataset, target: str) -> tuple[GroupBreakdown, ...]:
    """
    Mean of `target` per group for every categorical column.

    Groups are ordered by mean descending; equal means keep first-seen
    order. Rows missing either the group or the target are skipped.
    """
    if target not in dataset.kinds:
        raise TargetColumnError(f"Target column '{target}' not found. Columns: {list(dataset.columns)}")
    if dataset.kind(target) != ColumnKind.NUMERIC:
        raise TargetColumnError(
            f"Target column '{target}' must be numeric (found {dataset.kind(target).value})."
        )

    m = dataset.column(target)
    out: list[GroupBreakdown] = []
    for col in dataset.columns_of_kind(ColumnKind.CATEGORICAL):
        tmp = pd.DataFrame({"g": dataset.column(col), "m": m}).dropna()
        if tmp.empty:
            out.append(GroupBreakdown(column=col, target=target, groups=()))
            continue

        grouped = tmp.groupby("g", sort=False)["m"].agg(["mean", "count"])
        grouped = grouped.sort_values("mean", ascending=False, kind="mergesort")
        groups = tuple(
            GroupMean(group=str(g), mean=round_or_none(float(row["mean"])), count=int(row["count"]))
            for g, row in grouped.iterrows()
        )
        out.append(GroupBreakdown(column=col, target=target, groups=groups))
    return tuple(out)
