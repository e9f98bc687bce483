"""
Reference lists shown alongside the record forms
"""

from typing import Dict, List

from .entities import SeizureType

SEIZURE_TYPES: List[Dict[str, str]] = [
    {
        "value": SeizureType.TONIC_CLONIC.value,
        "label": "Tonic-Clonic",
        "description": "Full body convulsions",
    },
    {
        "value": SeizureType.ABSENCE.value,
        "label": "Absence",
        "description": "Brief loss of awareness",
    },
    {
        "value": SeizureType.FOCAL.value,
        "label": "Focal",
        "description": "Affects one area of the brain",
    },
    {
        "value": SeizureType.MYOCLONIC.value,
        "label": "Myoclonic",
        "description": "Quick jerking movements",
    },
    {
        "value": SeizureType.ATONIC.value,
        "label": "Atonic",
        "description": "Sudden loss of muscle tone",
    },
    {
        "value": SeizureType.OTHER.value,
        "label": "Other",
        "description": "Other type of seizure",
    },
]

COMMON_TRIGGERS: List[str] = [
    "Stress",
    "Lack of sleep",
    "Missed medication",
    "Alcohol",
    "Flashing lights",
    "Illness/Fever",
    "Hormonal changes",
    "Skipped meals",
    "Exercise",
    "Unknown",
]

RELATIONSHIP_TYPES: List[str] = [
    "Spouse/Partner",
    "Parent",
    "Sibling",
    "Child",
    "Friend",
    "Caregiver",
    "Doctor",
    "Other",
]

MEDICATION_FREQUENCIES: List[str] = [
    "Once daily",
    "Twice daily",
    "Three times daily",
    "Four times daily",
    "Every other day",
    "Weekly",
    "As needed",
]


def seizure_type_label(value: str) -> str:
    """Display label for a seizure type value, the raw value when unknown"""
    for item in SEIZURE_TYPES:
        if item["value"] == value:
            return item["label"]
    return value
