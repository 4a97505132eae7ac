"""Descriptive EDA reports for a single tabular file.

load -> profile / outliers / relationships -> report
"""

from .config import EdaConfig
from .errors import DatasetIOError, EdaError, FormatError, TargetColumnError, TypeMismatchError
from .loader import Dataset, dataset_from_frame, load_dataset
from .models import ColumnKind, EdaReport
from .report import build_report, report_to_json, write_report

__all__ = [
    "ColumnKind",
    "Dataset",
    "DatasetIOError",
    "EdaConfig",
    "EdaError",
    "EdaReport",
    "FormatError",
    "TargetColumnError",
    "TypeMismatchError",
    "build_report",
    "dataset_from_frame",
    "load_dataset",
    "report_to_json",
    "write_report",
]
