from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import EdaConfig
from .loader import Dataset
from .models import (
    ColumnKind,
    ColumnProfile,
    EdaReport,
    OutlierSet,
    RelationshipSummary,
    SourceInfo,
)
from .outliers import detect_dataset_outliers
from .profiling import profile_dataset
from .relationships import analyze_relationships
from .utils import stable_dumps, write_text

logger = logging.getLogger(__name__)


def build_report(
    dataset: Dataset,
    config: Optional[EdaConfig] = None,
    target: Optional[str] = None,
) -> EdaReport:
    """Run every analysis over the dataset and compose the results.

    Raises TargetColumnError when `target` is given but unusable.
    """
    cfg = config or EdaConfig()

    profiles = profile_dataset(dataset, cfg)
    outliers = detect_dataset_outliers(dataset, cfg)
    relationships = analyze_relationships(dataset, cfg, target=target)

    report = EdaReport(
        source=SourceInfo(
            path=dataset.source_path,
            sha256=dataset.sha256,
            rows=dataset.n_rows,
            columns=dataset.n_columns,
        ),
        settings=cfg.settings_snapshot(),
        columns=profiles,
        outliers=outliers,
        relationships=relationships,
        warnings=_collect_warnings(profiles, outliers, relationships, cfg),
    )
    logger.info(
        "Report built: %d columns, %d numeric, %d redundant pairs, %d warnings",
        len(profiles),
        len(outliers),
        len(relationships.redundant_pairs),
        len(report.warnings),
    )
    return report


def _collect_warnings(
    profiles: tuple[ColumnProfile, ...],
    outliers: tuple[OutlierSet, ...],
    relationships: RelationshipSummary,
    cfg: EdaConfig,
) -> tuple[str, ...]:
    warnings: list[str] = []
    for p in profiles:
        if p.kind == ColumnKind.EMPTY:
            warnings.append(f"Column '{p.name}' has no values.")
        if p.type_mismatches:
            warnings.append(
                f"Column '{p.name}': {p.type_mismatches} non-numeric value(s) treated as missing."
            )
    for o in outliers:
        if o.flagged and o.ratio >= cfg.high_outlier_ratio:
            warnings.append(f"Column '{o.column}': {o.ratio:.1%} of values are IQR outliers.")
    for pair in relationships.redundant_pairs:
        warnings.append(f"Columns '{pair.a}' and '{pair.b}' are highly correlated (r={pair.r}).")
    return tuple(warnings)


def report_to_dict(report: EdaReport) -> dict:
    return report.model_dump(mode="json", by_alias=True)


def report_to_json(report: EdaReport) -> str:
    """Stable JSON: sorted keys, 2-space indent, trailing newline."""
    return stable_dumps(report_to_dict(report))


def write_report(report: EdaReport, path: Path) -> Path:
    write_text(path, report_to_json(report))
    return path
