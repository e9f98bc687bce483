"""
Medication command handlers
Medication list maintenance and daily dose tracking
"""

from typing import Any, Dict, Optional

from fastapi import Request
from pydantic import ValidationError

from seizuretrack.core.logger import get_logger
from seizuretrack.models.entities import MedicationCreate
from seizuretrack.models.requests import (
    DeleteRecordRequest,
    MarkMedicationTakenRequest,
    UpdateMedicationRequest,
)

from . import api_handler, error_response, get_runtime, success_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/medications",
    tags=["medications"],
    summary="List medications",
)
async def list_medications(request: Request) -> Dict[str, Any]:
    runtime = get_runtime(request)
    return success_response(
        runtime, [m.model_dump() for m in runtime.store.medications]
    )


@api_handler(
    body=MedicationCreate,
    method="POST",
    path="/medications",
    tags=["medications"],
    summary="Add a medication",
)
async def add_medication(body: MedicationCreate, request: Request) -> Dict[str, Any]:
    """Add a medication to the end of the list

    @param body - Name, dosage, frequency and daily times
    @returns The created record with its id
    """
    runtime = get_runtime(request)
    try:
        medication = runtime.store.medications.add(body)
        logger.info(f"Medication added: {medication.name} ({medication.id})")
        return success_response(runtime, medication.model_dump(), "Medication added")
    except Exception as e:
        logger.error(f"Failed to add medication: {e}", exc_info=True)
        return error_response(f"Failed to add medication: {str(e)}")


@api_handler(
    body=UpdateMedicationRequest,
    method="POST",
    path="/medications/update",
    tags=["medications"],
    summary="Update a medication",
)
async def update_medication(
    body: UpdateMedicationRequest, request: Request
) -> Dict[str, Any]:
    """Merge changes into a medication, e.g. toggle its reminder"""
    runtime = get_runtime(request)
    try:
        medication = runtime.store.medications.update(body.id, body.changes)
    except ValidationError as e:
        return error_response(f"Invalid medication update: {e}")

    if medication is None:
        return error_response(f"Medication not found: {body.id}")
    return success_response(runtime, medication.model_dump(), "Medication updated")


@api_handler(
    body=DeleteRecordRequest,
    method="POST",
    path="/medications/delete",
    tags=["medications"],
    summary="Delete a medication",
)
async def delete_medication(
    body: DeleteRecordRequest, request: Request
) -> Dict[str, Any]:
    """Delete a medication

    Its dose records are removed too unless store.cascade_medication_reminders
    is disabled.
    """
    runtime = get_runtime(request)
    if not runtime.store.medications.delete(body.id):
        return error_response(f"Medication not found: {body.id}")
    return success_response(runtime, message="Medication deleted")


@api_handler(
    body=MarkMedicationTakenRequest,
    method="POST",
    path="/medications/mark-taken",
    tags=["medications"],
    summary="Mark a dose as taken",
)
async def mark_medication_taken(
    body: MarkMedicationTakenRequest, request: Request
) -> Dict[str, Any]:
    """Record whether a scheduled dose was taken

    There is at most one dose record per medication, date and time; marking
    again updates it.
    """
    runtime = get_runtime(request)
    try:
        reminder = runtime.store.mark_medication_taken(
            body.medication_id, body.date, body.time, body.taken
        )
        return success_response(runtime, reminder.model_dump())
    except Exception as e:
        logger.error(f"Failed to mark medication taken: {e}", exc_info=True)
        return error_response(f"Failed to mark medication taken: {str(e)}")


@api_handler(
    method="GET",
    path="/medications/doses",
    tags=["medications"],
    summary="List dose records",
)
async def list_dose_records(
    request: Request, medication_id: Optional[str] = None
) -> Dict[str, Any]:
    """List dose records, optionally for one medication"""
    runtime = get_runtime(request)
    reminders = [
        r.model_dump()
        for r in runtime.store.reminders
        if medication_id is None or r.medication_id == medication_id
    ]
    return success_response(runtime, reminders)
