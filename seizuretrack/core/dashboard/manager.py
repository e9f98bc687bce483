"""
Dashboard Manager

Builds the read models behind the dashboard screens:
- Overview counts, trend and month heat map
- Today's medication schedule and low stock warnings
- Appointment, contact and journal views
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Union

from dateutil.relativedelta import relativedelta

from seizuretrack.core import analytics
from seizuretrack.core.logger import get_logger
from seizuretrack.core.store import RecordStore

logger = get_logger(__name__)

RECENT_SEIZURE_LIMIT = 5
UPCOMING_APPOINTMENT_LIMIT = 3


@dataclass
class OverviewSummary:
    """Dashboard overview data structure"""

    seizures_last_7_days: int
    seizures_last_30_days: int
    trend: analytics.Trend
    active_medications: int
    upcoming_appointments: int


class DashboardManager:
    """Dashboard manager

    Reads a fresh snapshot of the record store for every call
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def get_overview(self, today: date) -> Dict[str, Any]:
        snapshot = self.store.snapshot()
        upcoming = analytics.upcoming_appointments(
            snapshot.appointments, today, limit=UPCOMING_APPOINTMENT_LIMIT
        )
        summary = OverviewSummary(
            seizures_last_7_days=analytics.count_since(
                snapshot.seizures, today - relativedelta(days=7), today
            ),
            seizures_last_30_days=analytics.count_since(
                snapshot.seizures, today - relativedelta(days=30), today
            ),
            trend=analytics.compute_trend(snapshot.seizures, today),
            active_medications=len(snapshot.medications),
            upcoming_appointments=len(upcoming),
        )

        month_start = today.replace(day=1)
        month_end = month_start + relativedelta(months=1, days=-1)

        logger.debug(
            f"Dashboard overview computed: {summary.seizures_last_7_days} seizures in 7 days, trend {summary.trend.delta}"
        )
        return {
            "date": today.isoformat(),
            "seizuresLast7Days": summary.seizures_last_7_days,
            "seizuresLast30Days": summary.seizures_last_30_days,
            "trend": {
                "current": summary.trend.current,
                "previous": summary.trend.previous,
                "delta": summary.trend.delta,
                "direction": summary.trend.direction.value,
            },
            "activeMedications": summary.active_medications,
            "upcomingAppointments": [a.model_dump() for a in upcoming],
            "recentSeizures": [
                s.model_dump() for s in snapshot.seizures[:RECENT_SEIZURE_LIMIT]
            ],
            "seizuresByDay": analytics.seizures_by_day(
                snapshot.seizures, month_start, month_end
            ),
        }

    def get_medication_schedule(self, today: date) -> Dict[str, Any]:
        snapshot = self.store.snapshot()
        doses = analytics.daily_medication_schedule(
            snapshot.medications, snapshot.reminders, today
        )
        low_stock = analytics.low_stock_medications(snapshot.medications)

        return {
            "date": today.isoformat(),
            "doses": [
                {
                    "medicationId": dose.medication.id,
                    "name": dose.medication.name,
                    "dosage": dose.medication.dosage,
                    "time": dose.time,
                    "taken": dose.taken,
                }
                for dose in doses
            ],
            "takenCount": sum(1 for dose in doses if dose.taken),
            "lowStock": [m.model_dump() for m in low_stock],
        }

    def get_appointments(self, today: date) -> Dict[str, List[Dict[str, Any]]]:
        appointments = self.store.appointments.items
        return {
            "upcoming": [
                a.model_dump() for a in analytics.upcoming_appointments(appointments, today)
            ],
            "past": [a.model_dump() for a in analytics.past_appointments(appointments, today)],
        }

    def get_contacts(self) -> Dict[str, List[Dict[str, Any]]]:
        primary, others = analytics.split_contacts(self.store.emergency_contacts.items)
        return {
            "primary": [c.model_dump() for c in primary],
            "others": [c.model_dump() for c in others],
        }

    def get_journal_entry(self, day: Union[date, str]) -> Optional[Dict[str, Any]]:
        entry = analytics.entry_for_date(
            self.store.symptom_journal.items, analytics.parse_date(day)
        )
        return entry.model_dump() if entry else None
