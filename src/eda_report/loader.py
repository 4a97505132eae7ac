from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd

from .config import EdaConfig
from .errors import DatasetIOError, FormatError, TypeMismatchError
from .models import ColumnKind, TypeMismatch
from .utils import sha256_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    Immutable, typed in-memory table.

    Numeric columns hold float64 values (NaN for missing), categorical
    columns hold stripped strings (None for missing), empty columns hold
    only None. Accessors hand out copies; the underlying frame is never
    exposed.
    """

    source_path: str
    sha256: Optional[str]
    kinds: Mapping[str, ColumnKind]
    type_mismatches: tuple[TypeMismatch, ...]
    _frame: pd.DataFrame = field(repr=False)

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self.kinds.keys())

    @property
    def n_rows(self) -> int:
        return int(self._frame.shape[0])

    @property
    def n_columns(self) -> int:
        return int(self._frame.shape[1])

    def column(self, name: str) -> pd.Series:
        return self._frame[name].copy()

    def kind(self, name: str) -> ColumnKind:
        return self.kinds[name]

    def columns_of_kind(self, kind: ColumnKind) -> list[str]:
        return [c for c, k in self.kinds.items() if k == kind]

    def mismatch_count(self, name: str) -> int:
        return sum(1 for m in self.type_mismatches if m.column == name)

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()


def load_dataset(path: Path | str, config: Optional[EdaConfig] = None) -> Dataset:
    """
    Read a CSV file into an immutable Dataset.

    Raises:
      DatasetIOError: the file is missing, unreadable or not valid UTF-8
      FormatError: no header, duplicate header names, or a row whose field
        count differs from the header
      TypeMismatchError: only with config.strict_types
    """
    cfg = config or EdaConfig()
    path = Path(path)
    delimiter = "\t" if path.suffix.lower() == ".tsv" else cfg.delimiter

    try:
        with path.open("r", encoding="utf-8-sig", newline="") as f:
            header, rows = _read_rows(f, delimiter)
        fingerprint = sha256_file(path)
    except UnicodeDecodeError as e:
        raise DatasetIOError(str(path), f"not valid UTF-8 ({e.reason})") from e
    except OSError as e:
        raise DatasetIOError(str(path), e.strerror or type(e).__name__) from e

    frame = pd.DataFrame(rows, columns=header, dtype=object)
    dataset = _build_dataset(frame, cfg, source_path=str(path), sha256=fingerprint)
    logger.info(
        "Loaded %s: %d rows x %d columns (%d type mismatches)",
        path,
        dataset.n_rows,
        dataset.n_columns,
        len(dataset.type_mismatches),
    )
    return dataset


def dataset_from_frame(
    frame: pd.DataFrame,
    config: Optional[EdaConfig] = None,
    source_path: str = "<memory>",
) -> Dataset:
    """Apply the same typing rules to an in-memory DataFrame (row positions become row indices)."""
    cfg = config or EdaConfig()
    names = [str(c) for c in frame.columns]
    if len(set(names)) != len(names):
        raise FormatError(f"Duplicate column names: {_duplicates(names)}")
    raw = frame.reset_index(drop=True).astype(object)
    raw.columns = names
    return _build_dataset(raw, cfg, source_path=source_path, sha256=None)


def _read_rows(f: Any, delimiter: str) -> tuple[list[str], list[list[str]]]:
    reader = csv.reader(f, delimiter=delimiter)
    header: Optional[list[str]] = None
    rows: list[list[str]] = []
    try:
        for record in reader:
            if not record:
                # blank line
                continue
            if header is None:
                header = _normalize_header(record, reader.line_num)
                continue
            if len(record) != len(header):
                row_index = len(rows)
                raise FormatError(
                    f"Row {row_index} (line {reader.line_num}) has {len(record)} fields, "
                    f"expected {len(header)}.",
                    row_index=row_index,
                    line_number=reader.line_num,
                    expected=len(header),
                    actual=len(record),
                )
            rows.append(record)
    except csv.Error as e:
        raise FormatError(
            f"Malformed CSV near line {reader.line_num}: {e}",
            row_index=len(rows),
            line_number=reader.line_num,
        ) from e

    if header is None:
        raise FormatError("Dataset has no header row.")
    return header, rows


def _normalize_header(record: list[str], line_number: int) -> list[str]:
    names = [c.strip() or f"unnamed_{i}" for i, c in enumerate(record)]
    if len(set(names)) != len(names):
        raise FormatError(
            f"Duplicate column names: {_duplicates(names)}", row_index=None, line_number=line_number
        )
    return names


def _duplicates(names: list[str]) -> list[str]:
    seen: set[str] = set()
    dups: list[str] = []
    for n in names:
        if n in seen and n not in dups:
            dups.append(n)
        seen.add(n)
    return dups


def _build_dataset(raw: pd.DataFrame, cfg: EdaConfig, *, source_path: str, sha256: Optional[str]) -> Dataset:
    markers = set(cfg.missing_markers)
    columns: dict[str, pd.Series] = {}
    kinds: dict[str, ColumnKind] = {}
    mismatches: list[TypeMismatch] = []

    for name in raw.columns:
        values, kind, col_mismatches = _type_column(str(name), raw[name], markers, cfg)
        if col_mismatches and cfg.strict_types:
            first = col_mismatches[0]
            raise TypeMismatchError(first.column, first.row_index, first.value)
        columns[str(name)] = values
        kinds[str(name)] = kind
        mismatches.extend(col_mismatches)

    frame = pd.DataFrame(columns, index=pd.RangeIndex(raw.shape[0]))
    return Dataset(
        source_path=source_path,
        sha256=sha256,
        kinds=MappingProxyType(kinds),
        type_mismatches=tuple(mismatches),
        _frame=frame,
    )


def _is_missing(value: Any, markers: set[str]) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in markers
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _type_column(
    name: str,
    series: pd.Series,
    markers: set[str],
    cfg: EdaConfig,
) -> tuple[pd.Series, ColumnKind, list[TypeMismatch]]:
    series = series.reset_index(drop=True)
    missing = series.map(lambda v: _is_missing(v, markers)).astype(bool)
    present = series[~missing].map(lambda v: v.strip() if isinstance(v, str) else v)

    if present.empty:
        return pd.Series([None] * len(series), dtype=object), ColumnKind.EMPTY, []

    parsed = pd.to_numeric(present.map(_numeric_candidate), errors="coerce").astype(float)
    parsed = parsed.where(np.isfinite(parsed))
    ok = parsed.notna().to_numpy()
    ratio = float(ok.sum()) / float(present.shape[0])

    if ratio >= cfg.numeric_min_ratio:
        numeric = pd.Series(np.nan, index=series.index, dtype=float)
        numeric.loc[parsed.index[ok]] = parsed.to_numpy()[ok]
        mismatches = [
            TypeMismatch(column=name, row_index=int(i), value=str(present.loc[i]))
            for i in present.index[~ok]
        ]
        return numeric, ColumnKind.NUMERIC, mismatches

    text = pd.Series([None] * len(series), dtype=object)
    text.loc[present.index] = present.map(str)
    return text, ColumnKind.CATEGORICAL, []


def _numeric_candidate(value: Any) -> Any:
    # bools would otherwise parse as 0/1
    if isinstance(value, (bool, np.bool_)):
        return None
    return value
