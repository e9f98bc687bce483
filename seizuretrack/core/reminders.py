"""
Medication reminder scheduler
Checks the medication list once per interval while notification permission
is granted, and notifies for every medication due at the current minute
"""

import asyncio
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Union

from seizuretrack.core.logger import get_logger
from seizuretrack.core.protocols import NotifierProtocol
from seizuretrack.core.store import RecordStore
from seizuretrack.models.entities import Medication, ReminderNotification
from seizuretrack.models.permissions import NotificationPermission

logger = get_logger(__name__)

REMINDER_TITLE = "💊 Medication Reminder"


class SchedulerState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"


def reminder_body(medication: Medication) -> str:
    return f"Time to take {medication.name} ({medication.dosage})"


class ReminderScheduler:
    """Reminder scheduler

    A medication fires at most once per matching minute, however often the
    check runs. Nothing is persisted: after a restart the schedule is rebuilt
    from the medication list.
    """

    def __init__(
        self,
        store: RecordStore,
        notifier: NotifierProtocol,
        *,
        check_interval: float = 60.0,
        clock: Callable[[], datetime] = datetime.now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.store = store
        self.notifier = notifier
        self.check_interval = check_interval
        self.clock = clock
        self.sleep = sleep

        self.permission = NotificationPermission.DEFAULT
        self.state = SchedulerState.IDLE
        self.check_task: Optional[asyncio.Task] = None

        # Medication ids already notified during _fired_minute
        self._fired_minute: Optional[str] = None
        self._fired: Set[str] = set()

        self.stats: Dict[str, Any] = {
            "armed_at": None,
            "total_checks": 0,
            "total_notifications": 0,
            "last_check_time": None,
        }

    @property
    def is_armed(self) -> bool:
        return self.state is SchedulerState.ARMED

    def _set_state(self, state: SchedulerState) -> None:
        self.state = state
        logger.debug("Reminder scheduler state updated: %s", state.value)

    async def update_permission(
        self, status: Union[NotificationPermission, str]
    ) -> SchedulerState:
        """Arm on granted, disarm on anything else"""
        self.permission = NotificationPermission(status)
        logger.info(f"Notification permission: {self.permission.value}")

        if self.permission is NotificationPermission.GRANTED:
            await self.arm()
        else:
            await self.disarm()
        return self.state

    async def arm(self) -> bool:
        """Start the check loop, requires granted permission"""
        if self.permission is not NotificationPermission.GRANTED:
            logger.warning("Reminder scheduler not armed: notification permission not granted")
            return False

        if self.is_armed:
            return True

        self._set_state(SchedulerState.ARMED)
        self.stats["armed_at"] = self.clock()
        self.check_task = asyncio.create_task(self._check_loop())
        logger.info(f"Reminder scheduler armed, check interval: {self.check_interval} seconds")
        return True

    async def disarm(self, *, quiet: bool = False) -> None:
        """Cancel the check loop

        Args:
            quiet: When True, only log debug messages
        """
        if not self.is_armed and self.check_task is None:
            return

        log = logger.debug if quiet else logger.info
        self._set_state(SchedulerState.IDLE)

        if self.check_task and not self.check_task.done():
            self.check_task.cancel()
            try:
                await self.check_task
            except asyncio.CancelledError:
                pass
        self.check_task = None
        self.stats["armed_at"] = None
        log("Reminder scheduler disarmed")

    async def stop(self, *, quiet: bool = False) -> None:
        await self.disarm(quiet=quiet)

    def next_delay(self, now: datetime) -> float:
        """Seconds until the next check

        Never past the start of the next minute, so no minute goes unchecked
        however the sleeps drift.
        """
        until_next_minute = 60 - now.second - now.microsecond / 1_000_000
        return min(self.check_interval, until_next_minute)

    async def _check_loop(self) -> None:
        """Check immediately, then at least once per minute, never overlapping"""
        try:
            while self.is_armed:
                try:
                    self.check_reminders()
                except Exception as e:
                    logger.error(f"Reminder check failed: {e}", exc_info=True)
                await self.sleep(self.next_delay(self.clock()))
        except asyncio.CancelledError:
            logger.debug("Reminder check loop cancelled")

    def check_reminders(self, now: Optional[datetime] = None) -> List[ReminderNotification]:
        """Notify for medications due at now's HH:MM

        Returns the notifications fired by this check.
        """
        if self.permission is not NotificationPermission.GRANTED:
            return []

        now = now or self.clock()
        minute_key = now.strftime("%Y-%m-%d %H:%M")
        current_time = now.strftime("%H:%M")

        if minute_key != self._fired_minute:
            self._fired_minute = minute_key
            self._fired.clear()

        fired: List[ReminderNotification] = []
        for medication in self.store.medications:
            if not medication.reminder_enabled or current_time not in medication.times:
                continue
            if medication.id in self._fired:
                continue

            self._fired.add(medication.id)
            notification = ReminderNotification(
                medication_id=medication.id,
                title=REMINDER_TITLE,
                body=reminder_body(medication),
                scheduled_time=current_time,
                fired_at=now,
            )
            self.notifier.notify(notification)
            fired.append(notification)

        self.stats["total_checks"] += 1
        self.stats["total_notifications"] += len(fired)
        self.stats["last_check_time"] = now
        return fired

    def get_status(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "permission": self.permission.value,
            "checkInterval": self.check_interval,
            "armedAt": self.stats["armed_at"].isoformat() if self.stats["armed_at"] else None,
            "totalChecks": self.stats["total_checks"],
            "totalNotifications": self.stats["total_notifications"],
            "lastCheckTime": self.stats["last_check_time"].isoformat()
            if self.stats["last_check_time"]
            else None,
        }
