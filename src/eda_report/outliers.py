from __future__ import annotations

from typing import Optional

import pandas as pd

from .config import EdaConfig
from .loader import Dataset
from .models import ColumnKind, OutlierSet
from .utils import round_or_none


def detect_dataset_outliers(dataset: Dataset, config: Optional[EdaConfig] = None) -> tuple[OutlierSet, ...]:
    """IQR outliers for each numeric column, in column order. Columns are independent."""
    cfg = config or EdaConfig()
    return tuple(
        detect_outliers(name, dataset.column(name), cfg)
        for name in dataset.columns_of_kind(ColumnKind.NUMERIC)
    )


def detect_outliers(name: str, values: pd.Series, config: Optional[EdaConfig] = None) -> OutlierSet:
    """
    Flag values outside [Q1 - k*IQR, Q3 + k*IQR].

    Q1/Q3 use linear interpolation over the non-missing values; k is
    config.iqr_multiplier (1.5 by default). Values exactly on a bound are
    not flagged. Row indices are positions in `values`.
    """
    cfg = config or EdaConfig()
    s = pd.to_numeric(values, errors="coerce").reset_index(drop=True)
    present = s.dropna()
    if present.empty:
        return OutlierSet(column=name)

    q1 = float(present.quantile(0.25, interpolation="linear"))
    q3 = float(present.quantile(0.75, interpolation="linear"))
    iqr = q3 - q1
    lower = q1 - cfg.iqr_multiplier * iqr
    upper = q3 + cfg.iqr_multiplier * iqr

    below = present < lower
    above = present > upper
    flagged = present.index[(below | above).to_numpy()]
    n_flagged = int(flagged.shape[0])

    return OutlierSet(
        column=name,
        q1=round_or_none(q1),
        q3=round_or_none(q3),
        iqr=round_or_none(iqr),
        lower_bound=round_or_none(lower),
        upper_bound=round_or_none(upper),
        row_indices=tuple(sorted(int(i) for i in flagged)),
        flagged=n_flagged,
        below=int(below.sum()),
        above=int(above.sum()),
        ratio=round_or_none(n_flagged / int(present.shape[0])),
    )
