"""
System module command handlers
"""

from typing import Any, Dict

from fastapi import Request

from seizuretrack.models.reference import (
    COMMON_TRIGGERS,
    MEDICATION_FREQUENCIES,
    RELATIONSHIP_TYPES,
    SEIZURE_TYPES,
)
from seizuretrack.system.runtime import get_runtime_stats

from . import api_handler, get_runtime, success_response


@api_handler(method="GET", path="/system/stats", tags=["system"])
async def get_system_stats(request: Request) -> Dict[str, Any]:
    """Get record counts, storage usage and reminder scheduler status

    @returns Statistics with timestamp
    """
    runtime = get_runtime(request)
    return success_response(runtime, get_runtime_stats(runtime))


@api_handler(method="GET", path="/reference", tags=["system"])
async def get_reference_lists(request: Request) -> Dict[str, Any]:
    """Seizure types, common triggers, relationships and medication frequencies"""
    runtime = get_runtime(request)
    return success_response(
        runtime,
        {
            "seizureTypes": SEIZURE_TYPES,
            "commonTriggers": COMMON_TRIGGERS,
            "relationshipTypes": RELATIONSHIP_TYPES,
            "medicationFrequencies": MEDICATION_FREQUENCIES,
        },
    )
