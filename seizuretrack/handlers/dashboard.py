"""
Dashboard module command handlers
Every view accepts an optional ?date=YYYY-MM-DD, defaulting to today
"""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import Query, Request

from seizuretrack.core.analytics import parse_date
from seizuretrack.core.logger import get_logger

from . import api_handler, error_response, get_runtime, success_response

logger = get_logger(__name__)


def resolve_day(value: Optional[str]) -> date:
    """Parse ?date=, or today when omitted"""
    return parse_date(value) if value else date.today()


@api_handler(
    method="GET",
    path="/dashboard/overview",
    tags=["dashboard"],
    summary="Get dashboard overview",
    description="Seizure counts for the last 7 and 30 days, week-over-week trend, upcoming appointments and the month heat map",
)
async def get_dashboard_overview(
    request: Request, day: Optional[str] = Query(None, alias="date")
) -> Dict[str, Any]:
    """Get dashboard overview

    @returns Overview counts and recent records
    """
    runtime = get_runtime(request)
    try:
        overview = runtime.dashboard.get_overview(resolve_day(day))
        return success_response(runtime, overview)
    except ValueError as e:
        return error_response(f"Invalid date: {e}")
    except Exception as e:
        logger.error(f"Failed to get dashboard overview: {e}", exc_info=True)
        return error_response(f"Failed to get dashboard overview: {str(e)}")


@api_handler(
    method="GET",
    path="/dashboard/medication-schedule",
    tags=["dashboard"],
    summary="Get today's medication schedule",
)
async def get_medication_schedule(
    request: Request, day: Optional[str] = Query(None, alias="date")
) -> Dict[str, Any]:
    """Every scheduled dose of the day with its taken state, sorted by time"""
    runtime = get_runtime(request)
    try:
        return success_response(
            runtime, runtime.dashboard.get_medication_schedule(resolve_day(day))
        )
    except ValueError as e:
        return error_response(f"Invalid date: {e}")


@api_handler(
    method="GET",
    path="/dashboard/appointments",
    tags=["dashboard"],
    summary="Get upcoming and past appointments",
)
async def get_appointment_overview(
    request: Request, day: Optional[str] = Query(None, alias="date")
) -> Dict[str, Any]:
    runtime = get_runtime(request)
    try:
        return success_response(
            runtime, runtime.dashboard.get_appointments(resolve_day(day))
        )
    except ValueError as e:
        return error_response(f"Invalid date: {e}")


@api_handler(
    method="GET",
    path="/dashboard/contacts",
    tags=["dashboard"],
    summary="Get emergency contacts split into primary and others",
)
async def get_contact_overview(request: Request) -> Dict[str, Any]:
    runtime = get_runtime(request)
    return success_response(runtime, runtime.dashboard.get_contacts())


@api_handler(
    method="GET",
    path="/dashboard/journal-entry",
    tags=["dashboard"],
    summary="Get the journal entry of a day",
)
async def get_journal_entry(
    request: Request, day: Optional[str] = Query(None, alias="date")
) -> Dict[str, Any]:
    """Newest journal entry recorded for the day

    @returns The entry, or success with no data when the day has none
    """
    runtime = get_runtime(request)
    try:
        entry = runtime.dashboard.get_journal_entry(resolve_day(day))
    except ValueError as e:
        return error_response(f"Invalid date: {e}")
    return success_response(runtime, entry)
