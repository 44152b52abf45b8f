# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Optic nerve OCT response shapes (single-eye and bilateral)."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import Field

from oculointelligence.validation.shapes.common import (
    AiShape,
    LocationPresence,
    MeasurementValue,
    QualityAssessment,
    Symmetry,
)

RiskLevel = Literal["baixo", "moderado", "alto"]


class RnflSector(AiShape):
    value: float | None
    unit: str = "μm"
    classification: Literal["normal", "borderline", "anormal"] | None = None


class RnflSymmetry(AiShape):
    value: float | None = None
    unit: str = "%"
    classification: Literal["normal", "assimetrico"] | None = None


class RnflAnalysis(AiShape):
    average: RnflSector | None = None
    superior: RnflSector | None = None
    inferior: RnflSector | None = None
    nasal: RnflSector | None = None
    temporal: RnflSector | None = None
    symmetry: RnflSymmetry | None = None
    thinning_location: list[str] = Field(default_factory=list)
    defect_pattern: Literal["difuso", "localizado", "cunha", "nenhum"] | None = None


class DiscArea(AiShape):
    value: float | None
    unit: str = "mm²"
    classification: Literal["pequeno", "normal", "grande"] | None = None


class CupArea(AiShape):
    value: float | None
    unit: str = "mm²"


class RimArea(AiShape):
    value: float | None
    unit: str = "mm²"
    classification: Literal["normal", "reduzida"] | None = None


class CdRatio(AiShape):
    value: float | None
    classification: Literal["normal", "suspeita", "glaucomatosa"] | None = None


class IsntRule(AiShape):
    preserved: bool
    violated_sectors: list[str] = Field(default_factory=list)


class PeripapillaryAtrophy(AiShape):
    present: bool
    type: Literal["alfa", "beta"] | None = None
    extent: str = ""


class OpticDiscAnalysis(AiShape):
    disc_area: DiscArea | None = None
    cup_area: CupArea | None = None
    rim_area: RimArea | None = None
    cd_ratio_average: CdRatio | None = None
    cd_ratio_vertical: CdRatio | None = None
    isnt_rule: IsntRule | None = None
    notch: LocationPresence | None = None
    disc_hemorrhage: LocationPresence | None = None
    peripapillary_atrophy: PeripapillaryAtrophy | None = None


class GlaucomaBiomarkers(AiShape):
    rnfl_wedge_defect: LocationPresence | None = None
    rnfl_focal_thinning: LocationPresence | None = None
    rim_thinning: LocationPresence | None = None
    rim_notch: LocationPresence | None = None
    disc_hemorrhage: LocationPresence | None = None


class GanglionCellAsymmetry(AiShape):
    present: bool
    description: str = ""


class GanglionCellAnalysis(AiShape):
    average: MeasurementValue | None = None
    minimum: MeasurementValue | None = None
    sectors: dict[str, MeasurementValue] | None = None
    asymmetry: GanglionCellAsymmetry | None = None


class RiskClassification(AiShape):
    glaucoma_risk: RiskLevel | None = None
    progression_risk: RiskLevel | None = None
    justification: str = ""


class OctNerveDiagnosis(AiShape):
    primary: str
    staging: Literal["suspeito", "inicial", "moderado", "avancado"] | None = None
    secondary: list[str] = Field(default_factory=list)
    differential: list[str] = Field(default_factory=list)


class PreviousExam(AiShape):
    date: str | None = None
    progression: str | None = None


class PreviousExamComparison(AiShape):
    previous_exam: PreviousExam | None = None


class EyeAsymmetry(AiShape):
    significant: bool
    description: str = ""


class OctNerveComparison(AiShape):
    od_oe_asymmetry: EyeAsymmetry | None = None
    rnfl_asymmetry_percentage: float | None = None
    symmetry: Symmetry | None = None


class OctNerveSingleEyeResponse(AiShape):
    quality: QualityAssessment
    rnfl: RnflAnalysis | None = None
    optic_disc: OpticDiscAnalysis | None = None
    ganglion_cell_analysis: GanglionCellAnalysis | None = None
    biomarkers_glaucoma: GlaucomaBiomarkers | None = None
    comparison: PreviousExamComparison | None = None
    risk_classification: RiskClassification | None = None
    diagnosis: OctNerveDiagnosis | None = None
    recommendations: list[str] = Field(default_factory=list)
    clinical_notes: str = ""


class OctNerveEyeData(AiShape):
    quality: QualityAssessment | None = None
    rnfl: RnflAnalysis | None = None
    optic_disc: OpticDiscAnalysis | None = None
    biomarkers_glaucoma: GlaucomaBiomarkers | None = None
    clinical_notes: str = ""


class OctNerveBilateralResponse(AiShape):
    bilateral: Literal[True]
    od: OctNerveEyeData
    oe: OctNerveEyeData
    comparison: OctNerveComparison | None = None
    risk_classification: RiskClassification | None = None
    diagnosis: OctNerveDiagnosis | None = None
    recommendations: list[str] = Field(default_factory=list)
    overall_clinical_notes: str = ""


OctNerveResponse = Union[OctNerveBilateralResponse, OctNerveSingleEyeResponse]  # noqa: UP007


__all__ = [
    "GlaucomaBiomarkers",
    "OctNerveBilateralResponse",
    "OctNerveDiagnosis",
    "OctNerveEyeData",
    "OctNerveResponse",
    "OctNerveSingleEyeResponse",
    "OpticDiscAnalysis",
    "RiskClassification",
    "RiskLevel",
    "RnflAnalysis",
]
