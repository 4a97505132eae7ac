from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from eda_report.config import EdaConfig
from eda_report.errors import TargetColumnError
from eda_report.loader import dataset_from_frame, load_dataset
from eda_report.relationships import (
    analyze_relationships,
    correlation_matrix,
    group_means,
    redundant_pairs,
)

FIXTURES = Path(__file__).parent / "fixtures"


def test_matrix_is_symmetric_with_unit_diagonal() -> None:
    ds = load_dataset(FIXTURES / "podcasts.csv")
    m = correlation_matrix(ds)

    n = len(m.columns)
    assert n == 5
    assert len(m.values) == n
    for i in range(n):
        assert len(m.values[i]) == n
        assert m.values[i][i] == 1.0
        for j in range(n):
            assert m.values[i][j] == m.values[j][i]
            if m.values[i][j] is not None:
                assert -1.0 <= m.values[i][j] <= 1.0


def test_identical_sequences_correlate_perfectly_and_are_flagged() -> None:
    ds = dataset_from_frame(
        pd.DataFrame({"a": [3.0, 1.0, 4.0, 1.0, 5.0], "b": [3.0, 1.0, 4.0, 1.0, 5.0], "c": [1, 0, 1, 0, 0]})
    )
    m = correlation_matrix(ds)
    assert m.coefficient("a", "b") == 1.0

    pairs = redundant_pairs(m, threshold=0.8)
    assert ("a", "b") in {(p.a, p.b) for p in pairs}


def test_negative_correlation_is_flagged_by_magnitude() -> None:
    ds = dataset_from_frame(pd.DataFrame({"x": [1, 2, 3, 4], "y": [8, 6, 4, 2]}))
    pairs = redundant_pairs(correlation_matrix(ds), threshold=0.8)
    assert [(p.a, p.b, p.r) for p in pairs] == [("x", "y", -1.0)]


def test_threshold_is_strict() -> None:
    ds = dataset_from_frame(pd.DataFrame({"x": [1, 2, 3, 4], "y": [1, 2, 3, 4]}))
    assert redundant_pairs(correlation_matrix(ds), threshold=1.0) == ()


def test_constant_column_has_undefined_coefficients() -> None:
    ds = dataset_from_frame(pd.DataFrame({"x": [1.0, 2.0, 3.0], "k": [5.0, 5.0, 5.0]}))
    m = correlation_matrix(ds)
    assert m.coefficient("x", "k") is None
    assert m.coefficient("k", "k") == 1.0


def test_pairwise_complete_rows_are_used() -> None:
    ds = dataset_from_frame(
        pd.DataFrame({"x": [1.0, 2.0, np.nan, 4.0], "y": [2.0, 4.0, 100.0, 8.0]})
    )
    assert correlation_matrix(ds).coefficient("x", "y") == 1.0


def test_fixture_flags_length_and_listening_time() -> None:
    ds = load_dataset(FIXTURES / "podcasts.csv")
    summary = analyze_relationships(ds, EdaConfig())

    pairs = {(p.a, p.b): p.r for p in summary.redundant_pairs}
    assert pairs[("Episode_Length_minutes", "Listening_Time_minutes")] == 1.0
    assert summary.target is None
    assert summary.group_means == ()


def test_group_means_sorted_descending() -> None:
    ds = load_dataset(FIXTURES / "podcasts.csv")
    breakdowns = {b.column: b for b in group_means(ds, "Listening_Time_minutes")}

    assert set(breakdowns) == {"Podcast_Name", "Genre", "Episode_Sentiment"}
    genre = breakdowns["Genre"]
    assert genre.target == "Listening_Time_minutes"
    assert [(g.group, g.mean, g.count) for g in genre.groups] == [
        ("Education", 266.25, 2),
        ("Technology", 67.5, 1),
        ("True Crime", 60.0, 2),
        ("Health", 48.75, 2),
        ("Comedy", 41.25, 2),
        ("News", 18.75, 2),
    ]

    # Missing sentiment row is skipped.
    sentiment = breakdowns["Episode_Sentiment"]
    assert sum(g.count for g in sentiment.groups) == 10


def test_equal_group_means_keep_first_seen_order() -> None:
    ds = dataset_from_frame(pd.DataFrame({"g": ["z", "a", "z", "a"], "t": [1.0, 2.0, 3.0, 2.0]}))
    (b,) = group_means(ds, "t")
    assert [g.group for g in b.groups] == ["z", "a"]


def test_bad_target_raises() -> None:
    ds = load_dataset(FIXTURES / "podcasts.csv")
    with pytest.raises(TargetColumnError, match="not found"):
        group_means(ds, "Rating")
    with pytest.raises(TargetColumnError, match="must be numeric"):
        group_means(ds, "Genre")
