"""
Emergency contact command handlers
"""

from typing import Any, Dict

from fastapi import Request
from pydantic import ValidationError

from seizuretrack.core.logger import get_logger
from seizuretrack.models.entities import EmergencyContactCreate
from seizuretrack.models.requests import (
    DeleteRecordRequest,
    UpdateEmergencyContactRequest,
)

from . import api_handler, error_response, get_runtime, success_response

logger = get_logger(__name__)


@api_handler(method="GET", path="/contacts", tags=["contacts"])
async def list_contacts(request: Request) -> Dict[str, Any]:
    """List emergency contacts in insertion order"""
    runtime = get_runtime(request)
    return success_response(
        runtime, [c.model_dump() for c in runtime.store.emergency_contacts]
    )


@api_handler(body=EmergencyContactCreate, method="POST", path="/contacts", tags=["contacts"])
async def add_contact(body: EmergencyContactCreate, request: Request) -> Dict[str, Any]:
    """Add an emergency contact

    Several contacts may be primary at once.
    """
    runtime = get_runtime(request)
    try:
        contact = runtime.store.emergency_contacts.add(body)
        logger.info(f"Emergency contact added: {contact.id}")
        return success_response(runtime, contact.model_dump(), "Contact added")
    except Exception as e:
        logger.error(f"Failed to add emergency contact: {e}", exc_info=True)
        return error_response(f"Failed to add emergency contact: {str(e)}")


@api_handler(
    body=UpdateEmergencyContactRequest,
    method="POST",
    path="/contacts/update",
    tags=["contacts"],
)
async def update_contact(
    body: UpdateEmergencyContactRequest, request: Request
) -> Dict[str, Any]:
    runtime = get_runtime(request)
    try:
        contact = runtime.store.emergency_contacts.update(body.id, body.changes)
    except ValidationError as e:
        return error_response(f"Invalid contact update: {e}")

    if contact is None:
        return error_response(f"Contact not found: {body.id}")
    return success_response(runtime, contact.model_dump(), "Contact updated")


@api_handler(
    body=DeleteRecordRequest,
    method="POST",
    path="/contacts/delete",
    tags=["contacts"],
)
async def delete_contact(body: DeleteRecordRequest, request: Request) -> Dict[str, Any]:
    runtime = get_runtime(request)
    if not runtime.store.emergency_contacts.delete(body.id):
        return error_response(f"Contact not found: {body.id}")
    return success_response(runtime, message="Contact deleted")
