# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Unit tests for error pattern detection and significance gating."""

from __future__ import annotations

from typing import Any

import pytest

from oculointelligence.enums import EnumErrorPatternType
from oculointelligence.models import (
    ModelCorrectionThresholds,
    ModelErrorPattern,
    ModelFeedbackRecord,
)
from oculointelligence.pipeline import (
    detect_error_patterns,
    is_significant,
    select_significant_patterns,
)
from oculointelligence.pipeline.handler_error_patterns import QUALITY_TARGET
from oculointelligence.testing import make_feedback_row


def _record(**overrides: Any) -> ModelFeedbackRecord:
    return ModelFeedbackRecord.from_row(make_feedback_row("oct_macular", **overrides))


def _missed(target: str, count: int, rate: float) -> ModelErrorPattern:
    return ModelErrorPattern(
        target=target, type=EnumErrorPatternType.MISSED_DIAGNOSIS, count=count, rate=rate
    )


def _by_type(
    patterns: list[ModelErrorPattern],
    pattern_type: EnumErrorPatternType,
) -> dict[str, ModelErrorPattern]:
    return {p.target: p for p in patterns if p.type is pattern_type}


@pytest.mark.unit
class TestDetectErrorPatterns:
    def test_empty_group_has_no_candidates(self) -> None:
        assert detect_error_patterns([]) == []

    def test_missed_and_false_positive_rates_use_group_size(self) -> None:
        records = [
            *[_record(diagnosis_added=["Glaucoma"]) for _ in range(3)],
            *[_record(diagnosis_removed=["Drusen"]) for _ in range(2)],
            *[_record() for _ in range(5)],
        ]

        patterns = detect_error_patterns(records)

        missed = _by_type(patterns, EnumErrorPatternType.MISSED_DIAGNOSIS)["Glaucoma"]
        false_positive = _by_type(patterns, EnumErrorPatternType.FALSE_POSITIVE)["Drusen"]
        assert (missed.count, missed.rate) == (3, 0.3)
        assert (false_positive.count, false_positive.rate) == (2, 0.2)

    def test_quality_rate_ignores_records_without_a_verdict(self) -> None:
        records = [
            *[_record(quality_feedback="disagree") for _ in range(2)],
            *[_record(quality_feedback="agree") for _ in range(2)],
            *[_record(quality_feedback=None) for _ in range(6)],
        ]

        quality = _by_type(
            detect_error_patterns(records), EnumErrorPatternType.QUALITY_DISAGREEMENT
        )[QUALITY_TARGET]

        assert quality.count == 2
        assert quality.rate == 0.5

    def test_no_disagreement_no_quality_candidate(self) -> None:
        records = [_record(quality_feedback="agree") for _ in range(4)]

        assert detect_error_patterns(records) == []

    def test_biomarker_rate_uses_records_reporting_the_key(self) -> None:
        records = [
            _record(
                biomarkers_feedback={"drusas": False},
                analysis_biomarkers={"drusas": {"present": True}},
            ),
            _record(biomarkers_feedback={"drusas": False}),
            _record(biomarkers_feedback={"drusas": True}),
            _record(biomarkers_feedback={"drusas": True}),
            _record(biomarkers_feedback={"dep": True}),
            _record(),
        ]

        patterns = _by_type(detect_error_patterns(records), EnumErrorPatternType.BIOMARKER_ERROR)

        assert list(patterns) == ["drusas"]
        drusas = patterns["drusas"]
        assert drusas.count == 2
        assert drusas.rate == 0.5
        assert drusas.breakdown == {"missed": 1, "false_positive": 1}

    def test_examples_are_capped(self) -> None:
        records = [_record(diagnosis_added=["Glaucoma"]) for _ in range(8)]

        (pattern,) = detect_error_patterns(records, max_examples=3)

        assert len(pattern.examples) == 3
        assert pattern.examples[0] == str(records[0].exam_id)


@pytest.mark.unit
class TestSignificance:
    @pytest.mark.parametrize(
        ("pattern_type", "count", "rate", "expected"),
        [
            (EnumErrorPatternType.MISSED_DIAGNOSIS, 5, 0.10, True),
            (EnumErrorPatternType.MISSED_DIAGNOSIS, 4, 0.90, False),
            (EnumErrorPatternType.MISSED_DIAGNOSIS, 50, 0.09, False),
            (EnumErrorPatternType.FALSE_POSITIVE, 10, 0.12, False),
            (EnumErrorPatternType.FALSE_POSITIVE, 10, 0.15, True),
            (EnumErrorPatternType.QUALITY_DISAGREEMENT, 6, 0.12, True),
            (EnumErrorPatternType.BIOMARKER_ERROR, 6, 0.12, True),
        ],
    )
    def test_threshold_gates(
        self,
        pattern_type: EnumErrorPatternType,
        count: int,
        rate: float,
        expected: bool,
        thresholds: ModelCorrectionThresholds,
    ) -> None:
        pattern = ModelErrorPattern(target="x", type=pattern_type, count=count, rate=rate)

        assert is_significant(pattern, thresholds) is expected

    def test_no_pattern_below_either_gate_is_retained(
        self,
        thresholds: ModelCorrectionThresholds,
    ) -> None:
        candidates = [
            ModelErrorPattern(target=f"t{count}-{rate}", type=pattern_type, count=count, rate=rate)
            for pattern_type in EnumErrorPatternType
            for count in range(0, 8)
            for rate in (0.0, 0.05, 0.1, 0.14, 0.15, 0.5, 1.0)
        ]

        retained = select_significant_patterns(candidates, thresholds)

        for pattern in retained:
            assert pattern.count >= thresholds.min_feedback_count
            floor = (
                thresholds.min_false_positive_rate
                if pattern.type is EnumErrorPatternType.FALSE_POSITIVE
                else thresholds.min_error_rate
            )
            assert pattern.rate >= floor
        assert len(retained) == sum(is_significant(p, thresholds) for p in candidates)

    def test_retained_patterns_are_sorted(self, thresholds: ModelCorrectionThresholds) -> None:
        candidates = [
            _missed("b", 6, 0.3),
            _missed("a", 6, 0.3),
            _missed("c", 9, 0.3),
            _missed("d", 5, 0.8),
        ]

        retained = select_significant_patterns(candidates, thresholds)

        assert [p.target for p in retained] == ["d", "c", "a", "b"]
