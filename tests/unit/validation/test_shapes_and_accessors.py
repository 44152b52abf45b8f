# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Unit tests for exam-family shapes, family dispatch and response accessors."""

from __future__ import annotations

from typing import Any

import pytest

from oculointelligence.validation import (
    get_diagnosis_from_response,
    get_quality_score_from_response,
    get_recommendations_from_response,
    is_bilateral_response,
    validate_ai_response,
)
from oculointelligence.validation.shapes import (
    OctMacularBilateralResponse,
    OctMacularSingleEyeResponse,
    OctNerveSingleEyeResponse,
    RetinographySingleEyeResponse,
)


def _single_eye(score: str = "boa") -> dict[str, Any]:
    return {
        "quality": {"score": score, "issues": []},
        "biomarkers": {
            "drusas": {"present": True, "size": "medias", "type": "moles"},
            "fluido_intraretiniano": {"present": False},
        },
        "diagnosis": {"primary": "DMRI seca", "secondary": ["Drusas", "  "]},
        "recommendations": ["Retorno em 6 meses", ""],
    }


def _bilateral(od_score: str, oe_score: str) -> dict[str, Any]:
    return {
        "bilateral": True,
        "od": {"quality": {"score": od_score}},
        "oe": {"quality": {"score": oe_score}},
        "diagnosis": {"primary": "Normal"},
    }


@pytest.mark.unit
class TestValidateAiResponse:
    def test_single_eye_macular_response(self) -> None:
        result = validate_ai_response("oct_macular", _single_eye())

        assert result.success is True
        assert isinstance(result.data, OctMacularSingleEyeResponse)
        assert result.data.biomarkers is not None
        assert result.data.biomarkers.drusas is not None
        assert result.data.biomarkers.drusas.present is True

    def test_bilateral_macular_response(self) -> None:
        result = validate_ai_response("oct_macular", _bilateral("boa", "moderada"))

        assert result.success is True
        assert isinstance(result.data, OctMacularBilateralResponse)

    @pytest.mark.parametrize(
        ("exam_type", "shape"),
        [
            ("oct_nerve", OctNerveSingleEyeResponse),
            ("retinography", RetinographySingleEyeResponse),
        ],
    )
    def test_other_families_dispatch_to_their_shape(self, exam_type: str, shape: type) -> None:
        result = validate_ai_response(exam_type, {"quality": {"score": "moderada"}})

        assert result.success is True
        assert isinstance(result.data, shape)

    def test_missing_quality_fails(self) -> None:
        result = validate_ai_response("retinography", {"diagnosis": {"primary": "Normal"}})

        assert result.success is False
        assert result.error_summary

    def test_invalid_enum_value_fails(self) -> None:
        result = validate_ai_response("oct_macular", _single_eye(score="excelente"))

        assert result.success is False

    def test_unknown_exam_type_raises(self) -> None:
        with pytest.raises(ValueError):
            validate_ai_response("angiography", _single_eye())


@pytest.mark.unit
class TestResponseAccessors:
    def test_bilateral_detection(self) -> None:
        assert is_bilateral_response(_bilateral("boa", "boa")) is True
        assert is_bilateral_response(_single_eye()) is False
        assert is_bilateral_response("garbage") is False

    def test_single_eye_quality(self) -> None:
        assert get_quality_score_from_response(_single_eye("ruim")) == "ruim"

    def test_equal_bilateral_scores_collapse(self) -> None:
        assert get_quality_score_from_response(_bilateral("boa", "boa")) == "boa"

    def test_unequal_bilateral_scores_are_labelled(self) -> None:
        assert (
            get_quality_score_from_response(_bilateral("boa", "ruim")) == "OD: boa, OE: ruim"
        )

    def test_accessors_accept_parsed_shapes(self) -> None:
        parsed = validate_ai_response("oct_macular", _single_eye()).data

        assert get_quality_score_from_response(parsed) == "boa"
        assert get_diagnosis_from_response(parsed) == ["DMRI seca", "Drusas"]

    def test_diagnosis_is_primary_then_non_blank_secondary(self) -> None:
        assert get_diagnosis_from_response(_single_eye()) == ["DMRI seca", "Drusas"]

    def test_recommendations_drop_blank_entries(self) -> None:
        assert get_recommendations_from_response(_single_eye()) == ["Retorno em 6 meses"]

    @pytest.mark.parametrize("response", [None, 42, "text", {"diagnosis": "Normal"}])
    def test_accessors_never_raise(self, response: object) -> None:
        assert get_quality_score_from_response(response) is None
        assert get_diagnosis_from_response(response) == []
        assert get_recommendations_from_response(response) == []
