# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Retinography (fundus photo) response shapes (single-eye and bilateral)."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import Field

from oculointelligence.validation.shapes.common import (
    AiShape,
    Diagnosis,
    QualityAssessment,
    Symmetry,
)

Quantity = Literal["poucos", "moderados", "muitos"]


class RetinographyOpticDisc(AiShape):
    appearance: Literal["normal", "alterado"] | None = None
    color: str = ""
    margins: Literal["nítidas", "borradas", "elevadas"] | None = None
    cd_ratio: float | None = None
    neuroretinal_rim: str = ""
    excavation: str = ""
    peripapillary_changes: str = ""
    description: str = ""


class RetinographyMacula(AiShape):
    appearance: Literal["normal", "alterada"] | None = None
    foveal_reflex: Literal["presente", "ausente", "diminuído"] | None = None
    pigment_changes: bool | None = None
    exudates: bool | None = None
    hemorrhages: bool | None = None
    edema_signs: bool | None = None
    drusen: bool | None = None
    description: str = ""


class RetinalArteries(AiShape):
    caliber: Literal["normal", "afinadas", "dilatadas"] | None = None
    tortuosity: Literal["normal", "aumentada"] | None = None
    description: str = ""


class RetinalVeins(AiShape):
    caliber: Literal["normal", "dilatadas", "tortuosas"] | None = None
    description: str = ""


class RetinographyVessels(AiShape):
    arteries: RetinalArteries | None = None
    veins: RetinalVeins | None = None
    av_ratio: str = ""
    av_crossing: Literal["normal", "alterado"] | None = None
    neovasos: bool | None = None
    description: str = ""


class RetinalHemorrhages(AiShape):
    present: bool
    type: Literal["puntiformes", "em_chama", "prerretinianas", "subretinianas"] | None = None
    location: str = ""
    quadrants: list[str] = Field(default_factory=list)


class RetinalExudates(AiShape):
    present: bool
    type: Literal["duros", "algodonosos"] | None = None
    location: str = ""


class Microaneurysms(AiShape):
    present: bool
    quantity: Quantity | None = None


class CottonWoolSpots(AiShape):
    present: bool
    quantity: float | None = None
    location: str = ""


class TypedLocationPresence(AiShape):
    present: bool
    type: str = ""
    location: str = ""


class RetinalAtrophy(AiShape):
    present: bool
    location: str = ""


class DetachmentSigns(AiShape):
    present: bool
    type: str = ""


class RetinographyRetinaGeneral(AiShape):
    hemorrhages: RetinalHemorrhages | None = None
    exudates: RetinalExudates | None = None
    microaneurysms: Microaneurysms | None = None
    cotton_wool_spots: CottonWoolSpots | None = None
    pigment_changes: TypedLocationPresence | None = None
    atrophy: RetinalAtrophy | None = None
    detachment_signs: DetachmentSigns | None = None
    description: str = ""


class DiabeticRetinopathyFinding(AiShape):
    present: bool
    stage: Literal["leve", "moderada", "severa", "proliferativa"] | None = None
    edema_macular: bool | None = None


class HypertensiveRetinopathyFinding(AiShape):
    present: bool
    grade: Literal["1", "2", "3", "4"] | None = None


class AmdFinding(AiShape):
    present: bool
    type: Literal["seca", "úmida"] | None = None
    stage: str = ""


class VascularOcclusionFinding(AiShape):
    present: bool
    type: Literal["arterial", "venosa"] | None = None
    location: str = ""


class PapilledemaFinding(AiShape):
    present: bool
    grade: str = ""


class NevusFinding(AiShape):
    present: bool
    characteristics: str = ""


class RetinographyBiomarkers(AiShape):
    retinopatia_diabetica: DiabeticRetinopathyFinding | None = None
    retinopatia_hipertensiva: HypertensiveRetinopathyFinding | None = None
    dmri: AmdFinding | None = None
    oclusao_vascular: VascularOcclusionFinding | None = None
    papiledema: PapilledemaFinding | None = None
    nevus: NevusFinding | None = None


class DiabeticRetinopathyClassification(AiShape):
    stage: Literal["ausente", "leve", "moderada", "severa", "proliferativa"] | None = None
    macular_edema: bool | None = None


class HypertensiveRetinopathyClassification(AiShape):
    grade: Literal["0", "1", "2", "3", "4"] | None = None


class AmdClassification(AiShape):
    present: bool
    type: Literal["seca", "úmida"] | None = None


class RetinographyClassifications(AiShape):
    diabetic_retinopathy: DiabeticRetinopathyClassification | None = None
    hypertensive_retinopathy: HypertensiveRetinopathyClassification | None = None
    amd: AmdClassification | None = None


class RetinographyUrgency(AiShape):
    level: Literal["rotina", "prioritário", "urgente"] | None = None
    reason: str = ""
    recommended_timeframe: str = ""


class RetinographySingleEyeResponse(AiShape):
    quality: QualityAssessment
    optic_disc: RetinographyOpticDisc | None = None
    macula: RetinographyMacula | None = None
    vessels: RetinographyVessels | None = None
    retina_general: RetinographyRetinaGeneral | None = None
    biomarkers: RetinographyBiomarkers | None = None
    classifications: RetinographyClassifications | None = None
    urgency: RetinographyUrgency | None = None
    diagnosis: Diagnosis | None = None
    recommendations: list[str] = Field(default_factory=list)
    clinical_notes: str = ""


class RetinographyEyeData(AiShape):
    quality: QualityAssessment | None = None
    optic_disc: RetinographyOpticDisc | None = None
    macula: RetinographyMacula | None = None
    vessels: RetinographyVessels | None = None
    retina_general: RetinographyRetinaGeneral | None = None
    clinical_notes: str = ""


class RetinographyComparison(AiShape):
    symmetry: Symmetry | None = None
    asymmetry_details: str = ""
    significant_differences: list[str] = Field(default_factory=list)
    notes: str = ""


class RetinographyBilateralResponse(AiShape):
    bilateral: Literal[True]
    od: RetinographyEyeData
    oe: RetinographyEyeData
    comparison: RetinographyComparison | None = None
    classifications: RetinographyClassifications | None = None
    urgency: RetinographyUrgency | None = None
    diagnosis: Diagnosis | None = None
    recommendations: list[str] = Field(default_factory=list)
    overall_clinical_notes: str = ""


RetinographyResponse = Union[  # noqa: UP007
    RetinographyBilateralResponse,
    RetinographySingleEyeResponse,
]


__all__ = [
    "RetinographyBilateralResponse",
    "RetinographyBiomarkers",
    "RetinographyClassifications",
    "RetinographyEyeData",
    "RetinographyResponse",
    "RetinographySingleEyeResponse",
    "RetinographyUrgency",
]
