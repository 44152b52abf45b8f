# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Shapes shared by every exam family.

The AI answers in the clinical vocabulary of the product (Portuguese terms),
so enumerated values are declared exactly as the model emits them. Unknown
keys are ignored; missing optional lists and strings default to empty.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

QualityScore = Literal["boa", "moderada", "ruim"]
LayerStatus = Literal["normal", "alterada", "alterado", "ausente"]
Severity = Literal["leve", "moderado", "moderada", "severo", "severa"]
Classification = Literal["normal", "borderline", "anormal", "aumentada", "diminuida"]
EyeType = Literal["od", "oe", "both"]
Symmetry = Literal["simetrico", "assimetrico"]

QUALITY_ORDER: tuple[str, ...] = ("boa", "moderada", "ruim")
"""Quality scores from best to worst."""


class AiShape(BaseModel):
    """Base for AI output shapes: tolerant of extra keys, not frozen."""

    model_config = ConfigDict(extra="ignore")


class QualityAssessment(AiShape):
    score: QualityScore
    issues: list[str] = Field(default_factory=list)
    centered: bool | None = None
    signal_strength: float | None = None


class LayerAnalysis(AiShape):
    status: LayerStatus
    description: str = ""


class MeasurementValue(AiShape):
    value: float | None
    unit: str = "μm"
    classification: Classification | None = None


class BiomarkerPresence(AiShape):
    present: bool
    location: str = ""
    severity: Severity | None = None


class LocationPresence(AiShape):
    present: bool
    location: str = ""


class Diagnosis(AiShape):
    primary: str
    secondary: list[str] = Field(default_factory=list)
    differential: list[str] = Field(default_factory=list)


class Comparison(AiShape):
    symmetry: Symmetry | None = None
    asymmetry_details: str = ""
    notes: str = ""


__all__ = [
    "QUALITY_ORDER",
    "AiShape",
    "BiomarkerPresence",
    "Classification",
    "Comparison",
    "Diagnosis",
    "EyeType",
    "LayerAnalysis",
    "LayerStatus",
    "LocationPresence",
    "MeasurementValue",
    "QualityAssessment",
    "QualityScore",
    "Severity",
    "Symmetry",
]
