# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Declared shapes for AI analysis output, one module per exam family."""

from oculointelligence.validation.shapes.analysis_record import AiAnalysisRecordShape
from oculointelligence.validation.shapes.common import (
    QUALITY_ORDER,
    AiShape,
    BiomarkerPresence,
    Comparison,
    Diagnosis,
    LayerAnalysis,
    LocationPresence,
    MeasurementValue,
    QualityAssessment,
)
from oculointelligence.validation.shapes.oct_macular import (
    OctMacularBilateralResponse,
    OctMacularResponse,
    OctMacularSingleEyeResponse,
)
from oculointelligence.validation.shapes.oct_nerve import (
    OctNerveBilateralResponse,
    OctNerveResponse,
    OctNerveSingleEyeResponse,
)
from oculointelligence.validation.shapes.retinography import (
    RetinographyBilateralResponse,
    RetinographyResponse,
    RetinographySingleEyeResponse,
)

__all__ = [
    "QUALITY_ORDER",
    "AiAnalysisRecordShape",
    "AiShape",
    "BiomarkerPresence",
    "Comparison",
    "Diagnosis",
    "LayerAnalysis",
    "LocationPresence",
    "MeasurementValue",
    "OctMacularBilateralResponse",
    "OctMacularResponse",
    "OctMacularSingleEyeResponse",
    "OctNerveBilateralResponse",
    "OctNerveResponse",
    "OctNerveSingleEyeResponse",
    "QualityAssessment",
    "RetinographyBilateralResponse",
    "RetinographyResponse",
    "RetinographySingleEyeResponse",
]
