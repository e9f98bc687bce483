"""
Appointment command handlers
"""

from typing import Any, Dict

from fastapi import Request
from pydantic import ValidationError

from seizuretrack.core.logger import get_logger
from seizuretrack.models.entities import AppointmentCreate
from seizuretrack.models.requests import DeleteRecordRequest, UpdateAppointmentRequest

from . import api_handler, error_response, get_runtime, success_response

logger = get_logger(__name__)


@api_handler(method="GET", path="/appointments", tags=["appointments"])
async def list_appointments(request: Request) -> Dict[str, Any]:
    """List appointments in insertion order"""
    runtime = get_runtime(request)
    return success_response(
        runtime, [a.model_dump() for a in runtime.store.appointments]
    )


@api_handler(body=AppointmentCreate, method="POST", path="/appointments", tags=["appointments"])
async def add_appointment(body: AppointmentCreate, request: Request) -> Dict[str, Any]:
    """Add an appointment"""
    runtime = get_runtime(request)
    try:
        appointment = runtime.store.appointments.add(body)
        logger.info(f"Appointment added: {appointment.id} on {appointment.date}")
        return success_response(runtime, appointment.model_dump(), "Appointment added")
    except Exception as e:
        logger.error(f"Failed to add appointment: {e}", exc_info=True)
        return error_response(f"Failed to add appointment: {str(e)}")


@api_handler(
    body=UpdateAppointmentRequest,
    method="POST",
    path="/appointments/update",
    tags=["appointments"],
)
async def update_appointment(
    body: UpdateAppointmentRequest, request: Request
) -> Dict[str, Any]:
    """Merge changes into an appointment"""
    runtime = get_runtime(request)
    try:
        appointment = runtime.store.appointments.update(body.id, body.changes)
    except ValidationError as e:
        return error_response(f"Invalid appointment update: {e}")

    if appointment is None:
        return error_response(f"Appointment not found: {body.id}")
    return success_response(runtime, appointment.model_dump(), "Appointment updated")


@api_handler(
    body=DeleteRecordRequest,
    method="POST",
    path="/appointments/delete",
    tags=["appointments"],
)
async def delete_appointment(
    body: DeleteRecordRequest, request: Request
) -> Dict[str, Any]:
    """Delete an appointment"""
    runtime = get_runtime(request)
    if not runtime.store.appointments.delete(body.id):
        return error_response(f"Appointment not found: {body.id}")
    return success_response(runtime, message="Appointment deleted")
