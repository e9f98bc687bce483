"""
Symptom journal command handlers
"""

from typing import Any, Dict

from fastapi import Request
from pydantic import ValidationError

from seizuretrack.core.logger import get_logger
from seizuretrack.models.entities import SymptomJournalEntryCreate
from seizuretrack.models.requests import DeleteRecordRequest, UpdateJournalEntryRequest

from . import api_handler, error_response, get_runtime, success_response

logger = get_logger(__name__)


@api_handler(method="GET", path="/journal", tags=["journal"])
async def list_journal_entries(request: Request) -> Dict[str, Any]:
    """List journal entries, newest first"""
    runtime = get_runtime(request)
    return success_response(
        runtime, [e.model_dump() for e in runtime.store.symptom_journal]
    )


@api_handler(
    body=SymptomJournalEntryCreate,
    method="POST",
    path="/journal",
    tags=["journal"],
    summary="Add a journal entry",
)
async def add_journal_entry(
    body: SymptomJournalEntryCreate, request: Request
) -> Dict[str, Any]:
    """Add a daily journal entry

    A second entry for the same date is accepted; lookups by date return the
    newest one.
    """
    runtime = get_runtime(request)
    try:
        entry = runtime.store.symptom_journal.add(body)
        logger.info(f"Journal entry added for {entry.date}: {entry.id}")
        return success_response(runtime, entry.model_dump(), "Journal entry added")
    except Exception as e:
        logger.error(f"Failed to add journal entry: {e}", exc_info=True)
        return error_response(f"Failed to add journal entry: {str(e)}")


@api_handler(
    body=UpdateJournalEntryRequest,
    method="POST",
    path="/journal/update",
    tags=["journal"],
)
async def update_journal_entry(
    body: UpdateJournalEntryRequest, request: Request
) -> Dict[str, Any]:
    runtime = get_runtime(request)
    try:
        entry = runtime.store.symptom_journal.update(body.id, body.changes)
    except ValidationError as e:
        return error_response(f"Invalid journal update: {e}")

    if entry is None:
        return error_response(f"Journal entry not found: {body.id}")
    return success_response(runtime, entry.model_dump(), "Journal entry updated")


@api_handler(
    body=DeleteRecordRequest,
    method="POST",
    path="/journal/delete",
    tags=["journal"],
)
async def delete_journal_entry(
    body: DeleteRecordRequest, request: Request
) -> Dict[str, Any]:
    runtime = get_runtime(request)
    if not runtime.store.symptom_journal.delete(body.id):
        return error_response(f"Journal entry not found: {body.id}")
    return success_response(runtime, message="Journal entry deleted")
