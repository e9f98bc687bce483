import asyncio
from datetime import timedelta

import pytest

from conftest import at, make_medication
from seizuretrack.core.reminders import REMINDER_TITLE, ReminderScheduler, SchedulerState
from seizuretrack.models.permissions import NotificationPermission


@pytest.fixture
def scheduler(store, notifications, today):
    return ReminderScheduler(
        store, notifications, check_interval=0.01, clock=lambda: at(today, "08:00")
    )


def grant(scheduler):
    scheduler.permission = NotificationPermission.GRANTED


def test_no_notifications_without_permission(scheduler, store, today):
    store.medications.add(make_medication())

    assert scheduler.check_reminders(at(today, "08:00")) == []


def test_fires_once_per_medication_per_minute(scheduler, store, notifications, today):
    grant(scheduler)
    medication = store.medications.add(make_medication(times=["08:00"]))

    first = scheduler.check_reminders(at(today, "08:00"))
    second = scheduler.check_reminders(at(today, "08:00").replace(second=30))

    assert len(first) == 1
    assert second == []
    notification = first[0]
    assert notification.medication_id == medication.id
    assert notification.title == REMINDER_TITLE
    assert notification.body == "Time to take Levetiracetam (500mg)"
    assert len(notifications.history) == 1


def test_fires_again_at_the_next_scheduled_time(scheduler, store, today):
    grant(scheduler)
    store.medications.add(make_medication(times=["08:00", "08:01"]))

    assert len(scheduler.check_reminders(at(today, "08:00"))) == 1
    assert len(scheduler.check_reminders(at(today, "08:01"))) == 1
    assert scheduler.check_reminders(at(today, "08:02")) == []


def test_only_medications_with_reminders_enabled(scheduler, store, today):
    grant(scheduler)
    store.medications.add(make_medication("On", reminder_enabled=True))
    store.medications.add(make_medication("Off", reminder_enabled=False))

    fired = scheduler.check_reminders(at(today, "20:00"))

    assert [n.body for n in fired] == ["Time to take On (500mg)"]


def test_each_due_medication_notifies(scheduler, store, today):
    grant(scheduler)
    store.medications.add(make_medication("A"))
    store.medications.add(make_medication("B"))

    assert len(scheduler.check_reminders(at(today, "08:00"))) == 2


def test_notification_center_drains_pending(scheduler, store, notifications, today):
    grant(scheduler)
    store.medications.add(make_medication())
    received = []
    unsubscribe = notifications.subscribe(received.append)

    scheduler.check_reminders(at(today, "08:00"))
    unsubscribe()
    scheduler.check_reminders(at(today, "20:00"))

    assert len(received) == 1
    assert len(notifications.drain()) == 2
    assert notifications.drain() == []
    assert len(notifications.history) == 2


async def test_granting_permission_arms_and_checks_immediately(scheduler, store, notifications):
    store.medications.add(make_medication())

    state = await scheduler.update_permission("granted")
    await asyncio.sleep(0.1)

    assert state is SchedulerState.ARMED
    assert scheduler.is_armed
    # Clock is frozen at 08:00, repeated checks do not notify again
    assert len(notifications.history) == 1
    assert scheduler.stats["total_checks"] >= 2

    await scheduler.stop()
    assert not scheduler.is_armed
    assert scheduler.check_task is None


async def test_revoking_permission_disarms(scheduler):
    await scheduler.update_permission(NotificationPermission.GRANTED)

    state = await scheduler.update_permission(NotificationPermission.DENIED)

    assert state is SchedulerState.IDLE
    assert scheduler.check_task is None


async def test_arm_requires_permission(scheduler):
    assert await scheduler.arm() is False
    assert scheduler.state is SchedulerState.IDLE


def test_status_payload(scheduler):
    status = scheduler.get_status()

    assert status["state"] == "idle"
    assert status["permission"] == "default"
    assert status["armedAt"] is None


def test_next_delay_stops_at_the_minute_boundary(store, notifications, today):
    scheduler = ReminderScheduler(store, notifications, check_interval=60)

    assert scheduler.next_delay(at(today, "08:00").replace(second=59, microsecond=500000)) == 0.5
    assert scheduler.next_delay(at(today, "08:00")) == 60

    scheduler.check_interval = 30
    assert scheduler.next_delay(at(today, "08:00").replace(second=10)) == 30


class DriftingTime:
    """Simulated clock whose sleeps always overrun a little"""

    def __init__(self, start, drift=0.15, max_sleeps=3):
        self.now = start
        self.drift = drift
        self.max_sleeps = max_sleeps
        self.scheduler = None

    def clock(self):
        return self.now

    async def sleep(self, seconds):
        self.now += timedelta(seconds=seconds + self.drift)
        self.max_sleeps -= 1
        if self.max_sleeps <= 0:
            self.scheduler.state = SchedulerState.IDLE
        await asyncio.sleep(0)


async def test_every_minute_is_checked_despite_drift(store, notifications, today):
    time = DriftingTime(at(today, "08:00").replace(second=59, microsecond=900000))
    scheduler = ReminderScheduler(
        store, notifications, check_interval=60, clock=time.clock, sleep=time.sleep
    )
    time.scheduler = scheduler
    store.medications.add(make_medication("Early", times=["08:01"]))
    store.medications.add(make_medication("Late", times=["08:02"]))

    await scheduler.update_permission("granted")
    await scheduler.check_task

    assert [n.scheduled_time for n in notifications.history] == ["08:01", "08:02"]
    assert scheduler.stats["total_checks"] == 3
    await scheduler.stop()
