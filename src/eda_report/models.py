from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

REPORT_SCHEMA = "eda_report.report.v1"


class ColumnKind(str, Enum):
    """
    Semantic type of a loaded column.

    - NUMERIC: finite floats, unparseable values recorded as type mismatches
    - CATEGORICAL: stripped strings
    - EMPTY: every value is a missing marker
    """
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"
    EMPTY = "empty"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class TypeMismatch(_Frozen):
    """A value that could not be parsed in a numeric column; counted as missing."""
    column: str
    row_index: int
    value: str


class NumericSummary(_Frozen):
    """Statistics that overflow float64 are None."""
    mean: Optional[float] = None
    median: Optional[float] = None
    std: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    quantiles: dict[str, Optional[float]] = {}
    skewness: Optional[float] = None
    kurtosis: Optional[float] = None
    skew_flag: bool = False


class FrequencyEntry(_Frozen):
    value: str
    count: int
    fraction: float


class CategoricalSummary(_Frozen):
    """
    top: most frequent values, descending by count, ties in first-seen order.
    other_count: occurrences of values that did not make it into `top`.
    """
    top: tuple[FrequencyEntry, ...]
    other_count: int = 0


class ColumnProfile(_Frozen):
    """
    Per-column summary.

    count: non-missing values
    missing: missing values, including type mismatches coerced to missing
    """
    name: str
    kind: ColumnKind
    count: int
    missing: int
    missing_fraction: float
    cardinality: int
    type_mismatches: int = 0
    numeric: Optional[NumericSummary] = None
    categorical: Optional[CategoricalSummary] = None


class OutlierSet(_Frozen):
    """
    IQR outliers for one numeric column.

    row_indices: dataset row positions, ascending
    ratio: flagged / non-missing values (0.0 for a column without values)
    """
    column: str
    q1: Optional[float] = None
    q3: Optional[float] = None
    iqr: Optional[float] = None
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None
    row_indices: tuple[int, ...] = ()
    flagged: int = 0
    below: int = 0
    above: int = 0
    ratio: float = 0.0


class CorrelationMatrix(_Frozen):
    """Square, symmetric Pearson matrix over `columns`; undefined entries are None."""
    method: str = "pearson"
    columns: tuple[str, ...] = ()
    values: tuple[tuple[Optional[float], ...], ...] = ()

    def coefficient(self, a: str, b: str) -> Optional[float]:
        i = self.columns.index(a)
        j = self.columns.index(b)
        return self.values[i][j]


class RedundantPair(_Frozen):
    a: str
    b: str
    r: float


class GroupMean(_Frozen):
    group: str
    mean: Optional[float]
    count: int


class GroupBreakdown(_Frozen):
    """Mean of `target` per value of categorical `column`, highest mean first."""
    column: str
    target: str
    groups: tuple[GroupMean, ...]


class RelationshipSummary(_Frozen):
    correlation: CorrelationMatrix
    redundant_pairs: tuple[RedundantPair, ...] = ()
    target: Optional[str] = None
    group_means: tuple[GroupBreakdown, ...] = ()


class SourceInfo(_Frozen):
    path: str
    sha256: Optional[str] = None
    rows: int
    columns: int


class EdaReport(_Frozen):
    """
    The complete report. Serialized by report.report_to_json; contains no
    timestamps so that identical inputs give byte-identical output.
    """
    schema_: str = Field(default=REPORT_SCHEMA, alias="_schema")
    source: SourceInfo
    settings: dict[str, Any]
    columns: tuple[ColumnProfile, ...]
    outliers: tuple[OutlierSet, ...]
    relationships: RelationshipSummary
    warnings: tuple[str, ...] = ()
