"""
Seizure log command handlers
"""

from typing import Any, Dict, Optional

from fastapi import Request
from pydantic import ValidationError

from seizuretrack.core.analytics import search_seizures
from seizuretrack.core.logger import get_logger
from seizuretrack.models.entities import SeizureLogCreate
from seizuretrack.models.requests import DeleteRecordRequest, UpdateSeizureRequest

from . import api_handler, error_response, get_runtime, success_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/seizures",
    tags=["seizures"],
    summary="List seizure logs",
)
async def list_seizures(request: Request, q: Optional[str] = None) -> Dict[str, Any]:
    """List seizure logs, newest first

    @param q - Optional search over type, notes and triggers
    @returns Seizure log list
    """
    runtime = get_runtime(request)
    seizures = search_seizures(runtime.store.seizures, q)
    return success_response(runtime, [s.model_dump() for s in seizures])


@api_handler(
    body=SeizureLogCreate,
    method="POST",
    path="/seizures",
    tags=["seizures"],
    summary="Log a seizure",
)
async def add_seizure(body: SeizureLogCreate, request: Request) -> Dict[str, Any]:
    """Add a seizure log, it becomes the first entry of the list

    @param body - Seizure details
    @returns The created record with its id
    """
    runtime = get_runtime(request)
    try:
        seizure = runtime.store.seizures.add(body)
        logger.info(f"Seizure logged: {seizure.id} ({seizure.date} {seizure.time})")
        return success_response(runtime, seizure.model_dump(), "Seizure logged")
    except Exception as e:
        logger.error(f"Failed to log seizure: {e}", exc_info=True)
        return error_response(f"Failed to log seizure: {str(e)}")


@api_handler(
    body=UpdateSeizureRequest,
    method="POST",
    path="/seizures/update",
    tags=["seizures"],
    summary="Update a seizure log",
)
async def update_seizure(body: UpdateSeizureRequest, request: Request) -> Dict[str, Any]:
    """Merge changes into a seizure log

    Unknown ids are ignored and reported as not found.
    """
    runtime = get_runtime(request)
    try:
        seizure = runtime.store.seizures.update(body.id, body.changes)
    except ValidationError as e:
        return error_response(f"Invalid seizure update: {e}")

    if seizure is None:
        return error_response(f"Seizure not found: {body.id}")
    return success_response(runtime, seizure.model_dump(), "Seizure updated")


@api_handler(
    body=DeleteRecordRequest,
    method="POST",
    path="/seizures/delete",
    tags=["seizures"],
    summary="Delete a seizure log",
)
async def delete_seizure(body: DeleteRecordRequest, request: Request) -> Dict[str, Any]:
    runtime = get_runtime(request)
    if not runtime.store.seizures.delete(body.id):
        return error_response(f"Seizure not found: {body.id}")
    return success_response(runtime, message="Seizure deleted")
