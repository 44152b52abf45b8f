# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Macular OCT response shapes (single-eye and bilateral)."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import Field

from oculointelligence.validation.shapes.common import (
    AiShape,
    BiomarkerPresence,
    Comparison,
    Diagnosis,
    LayerAnalysis,
    MeasurementValue,
    QualityAssessment,
    Severity,
)


class OctMacularLayers(AiShape):
    vitreoretinal_interface: LayerAnalysis | None = None
    mli: LayerAnalysis | None = None
    cfnr: LayerAnalysis | None = None
    ccg: LayerAnalysis | None = None
    cpi: LayerAnalysis | None = None
    cni: LayerAnalysis | None = None
    cpe: LayerAnalysis | None = None
    cne: LayerAnalysis | None = None
    zona_elipsoide: LayerAnalysis | None = None
    epr: LayerAnalysis | None = None
    membrana_bruch: LayerAnalysis | None = None
    coroide: LayerAnalysis | None = None


class FluidPresence(AiShape):
    present: bool
    location: str = ""
    severity: Severity | None = None


class DepPresence(AiShape):
    present: bool
    type: Literal["seroso", "fibrovascular", "drusenoide"] | None = None
    height: str = ""


class DrusenPresence(AiShape):
    present: bool
    size: Literal["pequenas", "medias", "grandes"] | None = None
    type: Literal["duras", "moles"] | None = None
    location: str = ""


class EpiretinalMembrane(AiShape):
    present: bool
    severity: Severity | None = None
    traction: bool | None = None


class VitreomacularTraction(AiShape):
    present: bool
    type: Literal["adesao", "tracao"] | None = None
    width: str = ""


class MacularHole(AiShape):
    present: bool
    stage: Literal["1", "2", "3", "4"] | None = None
    size: str = ""


class MacularEdema(AiShape):
    present: bool
    type: Literal["cistoide", "difuso"] | None = None
    severity: Severity | None = None


class HyperreflectiveMaterial(AiShape):
    present: bool
    location: Literal["sub_epr", "subretiniano", "intraretiniano"] | None = None


class HyperreflectiveDots(AiShape):
    present: bool
    quantity: Literal["poucos", "moderados", "muitos"] | None = None


class OctMacularBiomarkers(AiShape):
    fluido_intraretiniano: FluidPresence | None = None
    fluido_subretiniano: FluidPresence | None = None
    dep: DepPresence | None = None
    drusas: DrusenPresence | None = None
    atrofia_epr: BiomarkerPresence | None = None
    membrana_epirretiniana: EpiretinalMembrane | None = None
    tracao_vitreomacular: VitreomacularTraction | None = None
    buraco_macular: MacularHole | None = None
    edema_macular: MacularEdema | None = None
    material_hiperreflectivo: HyperreflectiveMaterial | None = None
    pontos_hiperreflectivos: HyperreflectiveDots | None = None
    atrofia_externa: BiomarkerPresence | None = None
    desorganizacao_camadas: BiomarkerPresence | None = None


class OctMacularMeasurements(AiShape):
    central_foveal_thickness: MeasurementValue | None = None
    subfoveal_choroidal_thickness: MeasurementValue | None = None
    subretinal_fluid_height: MeasurementValue | None = None
    dep_height: MeasurementValue | None = None


class OctMacularSingleEyeResponse(AiShape):
    quality: QualityAssessment
    layers: OctMacularLayers | None = None
    foveal_depression: LayerAnalysis | None = None
    retinal_surface: LayerAnalysis | None = None
    inner_layers: LayerAnalysis | None = None
    outer_layers: LayerAnalysis | None = None
    rpe_choroid_complex: LayerAnalysis | None = None
    biomarkers: OctMacularBiomarkers | None = None
    measurements: OctMacularMeasurements | None = None
    diagnosis: Diagnosis | None = None
    recommendations: list[str] = Field(default_factory=list)
    clinical_notes: str = ""


class OctMacularEyeData(AiShape):
    quality: QualityAssessment | None = None
    layers: OctMacularLayers | None = None
    foveal_depression: LayerAnalysis | None = None
    biomarkers: OctMacularBiomarkers | None = None
    measurements: OctMacularMeasurements | None = None
    clinical_notes: str = ""


class OctMacularBilateralResponse(AiShape):
    bilateral: Literal[True]
    od: OctMacularEyeData
    oe: OctMacularEyeData
    comparison: Comparison | None = None
    diagnosis: Diagnosis | None = None
    recommendations: list[str] = Field(default_factory=list)
    overall_clinical_notes: str = ""


OctMacularResponse = Union[OctMacularBilateralResponse, OctMacularSingleEyeResponse]  # noqa: UP007


__all__ = [
    "OctMacularBilateralResponse",
    "OctMacularBiomarkers",
    "OctMacularEyeData",
    "OctMacularLayers",
    "OctMacularMeasurements",
    "OctMacularResponse",
    "OctMacularSingleEyeResponse",
]
