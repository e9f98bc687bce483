"""
Reminder module command handlers
Notification permission reported by the client, scheduler status and
notification polling
"""

from typing import Any, Dict

from fastapi import Request

from seizuretrack.core.logger import get_logger
from seizuretrack.models.permissions import UpdatePermissionRequest

from . import api_handler, error_response, get_runtime, success_response

logger = get_logger(__name__)


@api_handler(
    method="GET",
    path="/reminders/status",
    tags=["reminders"],
    summary="Get reminder scheduler status",
)
async def get_reminder_status(request: Request) -> Dict[str, Any]:
    """Scheduler state, permission and check counters"""
    runtime = get_runtime(request)
    return success_response(runtime, runtime.scheduler.get_status())


@api_handler(
    body=UpdatePermissionRequest,
    method="POST",
    path="/reminders/permission",
    tags=["reminders"],
    summary="Update notification permission",
)
async def update_notification_permission(
    body: UpdatePermissionRequest, request: Request
) -> Dict[str, Any]:
    """Arm the scheduler when permission is granted, disarm otherwise

    @param body - Permission status obtained by the client
    @returns Scheduler status after the change
    """
    runtime = get_runtime(request)
    try:
        state = await runtime.scheduler.update_permission(body.status)
        return success_response(
            runtime,
            runtime.scheduler.get_status(),
            f"Reminder scheduler {state.value}",
        )
    except Exception as e:
        logger.error(f"Failed to update notification permission: {e}", exc_info=True)
        return error_response(f"Failed to update notification permission: {str(e)}")


@api_handler(
    method="POST",
    path="/reminders/check",
    tags=["reminders"],
    summary="Run a reminder check now",
)
async def check_reminders_now(request: Request) -> Dict[str, Any]:
    """Check the current minute immediately

    A medication already notified this minute is not notified again.
    """
    runtime = get_runtime(request)
    fired = runtime.scheduler.check_reminders()
    return success_response(runtime, [n.model_dump(mode="json") for n in fired])


@api_handler(
    method="GET",
    path="/reminders/notifications",
    tags=["reminders"],
    summary="Poll pending notifications",
)
async def poll_notifications(request: Request) -> Dict[str, Any]:
    """Notifications fired since the last poll, each returned once"""
    runtime = get_runtime(request)
    pending = runtime.notifications.drain()
    return success_response(runtime, [n.model_dump(mode="json") for n in pending])


@api_handler(
    method="GET",
    path="/reminders/history",
    tags=["reminders"],
    summary="Get recent notifications",
)
async def get_notification_history(request: Request) -> Dict[str, Any]:
    runtime = get_runtime(request)
    history = runtime.notifications.history
    return success_response(runtime, [n.model_dump(mode="json") for n in history])
