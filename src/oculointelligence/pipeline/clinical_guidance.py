# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Clinical guidance bullets attached to synthesized corrections.

Lookups match approximately: a table key matches when it is a substring of
the normalized label (or, for per-exam suggestions and biomarkers, the other
way round). Keys are normalized labels, so Portuguese and English spellings
of the same condition are listed side by side. Unknown labels get a generic
bullet rather than nothing.
"""

from __future__ import annotations

from oculointelligence.enums import EnumExamType
from oculointelligence.pipeline.tally import normalize_label

_AMD_DRY = [
    "Look for drusen of any size in the macular region",
    "Check for RPE irregularities",
    "Look for geographic atrophy or pigmentary changes",
]
_AMD_WET = [
    "Identify subretinal or intraretinal fluid",
    "Look for pigment epithelial detachment (PED)",
    "Check for sub-RPE hyperreflective material",
]
_DME = [
    "Measure central foveal thickness",
    "Identify intraretinal cysts",
    "Look for perifoveal hard exudates",
]
_ERM = [
    "Look for a hyperreflective line on the retinal surface",
    "Check for distortion of the foveal contour",
    "Identify retinal folds",
]
_MACULAR_HOLE = [
    "Assess the foveal depression",
    "Identify full-thickness defects",
    "Classify the stage (1-4)",
]
_GLAUCOMA = [
    "Assess RNFL thickness in every quadrant",
    "Apply the ISNT rule",
    "Look for wedge-shaped RNFL defects",
    "Check for asymmetry between the eyes",
]
_OPTIC_NEUROPATHY = [
    "Look for optic disc edema",
    "Check for nerve pallor",
    "Assess the cup-to-disc ratio",
]
_DIABETIC_RETINOPATHY = [
    "Look for microaneurysms",
    "Identify retinal hemorrhages",
    "Check for hard exudates and cotton wool spots",
    "Assess neovascularization",
]
_HYPERTENSIVE_RETINOPATHY = [
    "Look for arteriolar narrowing",
    "Identify pathological AV crossings",
    "Look for flame-shaped hemorrhages",
]

MISSED_DIAGNOSIS_SUGGESTIONS: dict[str, dict[str, list[str]]] = {
    EnumExamType.OCT_MACULAR.value: {
        "dmri seca": _AMD_DRY,
        "dry amd": _AMD_DRY,
        "dmri exsudativa": _AMD_WET,
        "wet amd": _AMD_WET,
        "edema macular diabetico": _DME,
        "diabetic macular edema": _DME,
        "membrana epirretiniana": _ERM,
        "epiretinal membrane": _ERM,
        "buraco macular": _MACULAR_HOLE,
        "macular hole": _MACULAR_HOLE,
    },
    EnumExamType.OCT_NERVE.value: {
        "glaucoma": _GLAUCOMA,
        "neuropatia optica": _OPTIC_NEUROPATHY,
        "optic neuropathy": _OPTIC_NEUROPATHY,
    },
    EnumExamType.RETINOGRAPHY.value: {
        "retinopatia diabetica": _DIABETIC_RETINOPATHY,
        "diabetic retinopathy": _DIABETIC_RETINOPATHY,
        "retinopatia hipertensiva": _HYPERTENSIVE_RETINOPATHY,
        "hypertensive retinopathy": _HYPERTENSIVE_RETINOPATHY,
    },
}

_AMD_CRITERIA = [
    "Confirm drusen or RPE changes",
    "Rule out other causes of macular change",
    "Consider patient age (typically over 50)",
]
_EDEMA_CRITERIA = [
    "Confirm a measurable increase in thickness",
    "Identify the underlying cause",
    "Rule out imaging artifacts",
]

FALSE_POSITIVE_CRITERIA: dict[str, list[str]] = {
    "dmri": _AMD_CRITERIA,
    "amd": _AMD_CRITERIA,
    "glaucoma": [
        "Confirm an RNFL defect consistent with the picture",
        "Check correlation with the visual field when available",
        "Assess for an enlarged C/D ratio",
    ],
    "edema": _EDEMA_CRITERIA,
}

QUALITY_CRITERIA: dict[str, list[str]] = {
    EnumExamType.OCT_MACULAR.value: [
        "Good: all layers visible, adequate centering, no artifacts",
        "Moderate: most layers visible, small tolerable artifacts",
        "Poor: layers indistinguishable, significant artifacts, decentered",
    ],
    EnumExamType.OCT_NERVE.value: [
        "Good: well-defined RNFL, centered disc, complete scan",
        "Moderate: partially visible RNFL, slight decentering",
        "Poor: RNFL not measurable, incomplete scan",
    ],
    EnumExamType.RETINOGRAPHY.value: [
        "Good: sharp focus, even illumination, disc and macula visible",
        "Moderate: acceptable focus, mild media opacity",
        "Poor: out of focus, reflections, significant opacity",
    ],
}

_DRUSEN = [
    "RPE elevations with variable content",
    "Hard: small, well-defined, hyperreflective",
    "Soft: larger, less defined borders",
]

BIOMARKER_CHARACTERISTICS: dict[str, list[str]] = {
    "fluido intraretiniano": [
        "Hyporeflective spaces within the retinal layers",
        "Well-defined borders (cysts) or ill-defined (diffuse)",
        "Location: outer nuclear, outer plexiform, others",
    ],
    "fluido subretiniano": [
        "Hyporeflective space between neuroretina and RPE",
        "Elevation of the neurosensory retina",
        "May contain hyperreflective material (blood, fibrin)",
    ],
    "drusas": _DRUSEN,
    "drusen": _DRUSEN,
    "membrana epirretiniana": [
        "Hyperreflective line on the inner retinal surface",
        "May distort the underlying layers",
        "Assess the degree of traction and foveal distortion",
    ],
    "atrofia epr": [
        "Increased transmission into the choroid",
        "Loss of the RPE line",
        "Often associated with photoreceptor loss",
    ],
}

GENERIC_SUGGESTION = ["Review the standard diagnostic criteria for this condition"]
GENERIC_CRITERIA = ["Apply strict diagnostic criteria", "Confirm with multiple findings"]
GENERIC_CHARACTERISTICS = ["Check the standard criteria for identifying this finding"]


def suggestions_for_diagnosis(diagnosis: str, exam_type: str) -> list[str]:
    """Signs to look for when ``diagnosis`` keeps being missed."""
    label = normalize_label(diagnosis)
    for key, bullets in MISSED_DIAGNOSIS_SUGGESTIONS.get(exam_type, {}).items():
        if key in label or label in key:
            return list(bullets)
    return list(GENERIC_SUGGESTION)


def criteria_for_diagnosis(diagnosis: str) -> list[str]:
    """Criteria to demand before reporting an over-called ``diagnosis``."""
    label = normalize_label(diagnosis)
    for key, bullets in FALSE_POSITIVE_CRITERIA.items():
        if key in label:
            return list(bullets)
    return list(GENERIC_CRITERIA)


def quality_criteria(exam_type: str) -> list[str]:
    """Image-quality grading criteria; macular OCT's for unknown exam types."""
    return list(QUALITY_CRITERIA.get(exam_type, QUALITY_CRITERIA[EnumExamType.OCT_MACULAR.value]))


def biomarker_characteristics(biomarker: str) -> list[str]:
    """Imaging characteristics of a biomarker key such as ``drusas``."""
    label = normalize_label(biomarker.replace("_", " "))
    for key, bullets in BIOMARKER_CHARACTERISTICS.items():
        if key in label or label in key:
            return list(bullets)
    return list(GENERIC_CHARACTERISTICS)


__all__ = [
    "BIOMARKER_CHARACTERISTICS",
    "FALSE_POSITIVE_CRITERIA",
    "MISSED_DIAGNOSIS_SUGGESTIONS",
    "QUALITY_CRITERIA",
    "biomarker_characteristics",
    "criteria_for_diagnosis",
    "quality_criteria",
    "suggestions_for_diagnosis",
]
