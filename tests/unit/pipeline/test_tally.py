# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Unit tests for label normalization and per-record tallying."""

from __future__ import annotations

import pytest

from oculointelligence.models import ModelFeedbackRecord
from oculointelligence.pipeline.tally import (
    group_by_exam_type,
    normalize_label,
    tally_labels,
    top_labels,
)
from oculointelligence.testing import make_feedback_row


def _records(*removed: list[str], exam_type: str = "oct_macular") -> list[ModelFeedbackRecord]:
    return [
        ModelFeedbackRecord.from_row(make_feedback_row(exam_type, diagnosis_removed=labels))
        for labels in removed
    ]


@pytest.mark.unit
class TestNormalizeLabel:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Drusen", "drusen"),
            ("  DRUSEN  ", "drusen"),
            ("Edema   Macular Diabético", "edema macular diabetico"),
            ("Neuropatia Óptica", "neuropatia optica"),
            ("", ""),
        ],
    )
    def test_normalization(self, raw: str, expected: str) -> None:
        assert normalize_label(raw) == expected


@pytest.mark.unit
class TestTallyLabels:
    def test_variants_count_together_under_most_frequent_spelling(self) -> None:
        records = _records(["Drusen"], ["drusen "], ["Drusen"], ["DRUSEN"])

        tallies = tally_labels(records, lambda r: r.diagnosis_removed)

        assert list(tallies) == ["drusen"]
        assert tallies["drusen"].count == 4
        assert tallies["drusen"].label == "Drusen"

    def test_label_counts_once_per_record(self) -> None:
        records = _records(["Drusen", "drusen", "DMRI"], ["DMRI"])

        tallies = tally_labels(records, lambda r: r.diagnosis_removed)

        assert tallies["drusen"].count == 1
        assert tallies["dmri"].count == 2

    def test_examples_are_bounded_and_in_order(self) -> None:
        records = _records(*([["Glaucoma"]] * 4))

        tally = tally_labels(records, lambda r: r.diagnosis_removed, max_examples=2)["glaucoma"]

        assert tally.examples == [str(records[0].exam_id), str(records[1].exam_id)]

    def test_top_labels_orders_by_count_then_first_appearance(self) -> None:
        records = _records(["A"], ["B"], ["B"], ["C"])

        top = top_labels(tally_labels(records, lambda r: r.diagnosis_removed), 2)

        assert [t.label for t in top] == ["B", "A"]


@pytest.mark.unit
class TestGroupByExamType:
    def test_groups_in_first_appearance_order(self) -> None:
        records = [
            *_records(["x"], exam_type="retinography"),
            *_records(["y"], ["z"], exam_type="oct_macular"),
            *_records(["w"], exam_type="retinography"),
        ]

        groups = group_by_exam_type(records)

        assert list(groups) == ["retinography", "oct_macular"]
        assert len(groups["retinography"]) == 2
