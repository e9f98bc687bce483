"""
Aggregations over a record store snapshot

Every function here is pure: the reference day ("today") and the range are
always passed in, so the same snapshot, range and day give the same result.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from dateutil.relativedelta import relativedelta

from seizuretrack.models.entities import (
    Appointment,
    EmergencyContact,
    Medication,
    MedicationReminder,
    SeizureLog,
    SymptomJournalEntry,
)
from seizuretrack.models.reference import seizure_type_label

DatedT = TypeVar("DatedT", SeizureLog, Appointment, SymptomJournalEntry, MedicationReminder)

DAILY_BUCKET_LIMIT_DAYS = 30
TOP_TRIGGER_LIMIT = 5
LOW_STOCK_THRESHOLD = 7

WEEKDAYS = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


class ReportRange(str, Enum):
    """Report period presets"""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_6_MONTHS = "6m"
    LAST_YEAR = "1y"

    @property
    def description(self) -> str:
        return {
            "7d": "7 days",
            "30d": "30 days",
            "90d": "90 days",
            "6m": "6 months",
            "1y": "1 year",
        }[self.value]


@dataclass(frozen=True)
class LabeledCount:
    """(label, count) pair shared by series, distributions and rankings"""

    label: str
    count: int


@dataclass(frozen=True)
class SeriesPoint(LabeledCount):
    start: Optional[date] = None


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Trend:
    current: int
    previous: int

    @property
    def delta(self) -> int:
        return self.current - self.previous

    @property
    def direction(self) -> TrendDirection:
        if self.delta > 0:
            return TrendDirection.UP
        if self.delta < 0:
            return TrendDirection.DOWN
        return TrendDirection.NEUTRAL


@dataclass(frozen=True)
class ReportSummary:
    """Everything the report exporter consumes"""

    range: ReportRange
    start: date
    end: date
    total: int
    average_duration: int
    average_severity: float
    frequency: List[SeriesPoint] = field(default_factory=list)
    type_distribution: List[LabeledCount] = field(default_factory=list)
    top_triggers: List[LabeledCount] = field(default_factory=list)
    active_medications: int = 0


def parse_date(value: Union[str, date]) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def parse_weekday(value: Union[str, int]) -> int:
    """Accept a weekday name or a 0 (Monday) .. 6 (Sunday) index"""
    if isinstance(value, int):
        if not 0 <= value <= 6:
            raise ValueError(f"weekday index out of range: {value}")
        return value
    try:
        return WEEKDAYS[value.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown weekday: {value}") from None


def range_start(report_range: Union[ReportRange, str], today: date) -> date:
    report_range = ReportRange(report_range)
    if report_range is ReportRange.LAST_7_DAYS:
        return today - timedelta(days=7)
    if report_range is ReportRange.LAST_30_DAYS:
        return today - timedelta(days=30)
    if report_range is ReportRange.LAST_90_DAYS:
        return today - timedelta(days=90)
    if report_range is ReportRange.LAST_6_MONTHS:
        return today - relativedelta(months=6)
    return today - relativedelta(months=12)


def filter_by_range(records: Iterable[DatedT], start: date, end: date) -> List[DatedT]:
    """Records whose date falls within [start, end], inclusive"""
    return [r for r in records if start <= parse_date(r.date) <= end]


def search_seizures(seizures: Iterable[SeizureLog], query: Optional[str]) -> List[SeizureLog]:
    """Case-insensitive substring match on type, notes or any trigger

    A blank query matches everything.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(seizures)
    return [
        s
        for s in seizures
        if needle in s.type.lower()
        or (s.notes and needle in s.notes.lower())
        or any(needle in trigger.lower() for trigger in s.triggers or [])
    ]


def count_since(records: Iterable[DatedT], start: date, end: date) -> int:
    return len(filter_by_range(records, start, end))


def compute_trend(seizures: Sequence[SeizureLog], today: date) -> Trend:
    """Trailing 7 days against the 7 days before them

    A negative delta means fewer events, i.e. an improvement.
    """
    week_ago = today - timedelta(days=7)
    two_weeks_ago = today - timedelta(days=14)
    current = count_since(seizures, week_ago, today)
    previous = sum(1 for s in seizures if two_weeks_ago <= parse_date(s.date) < week_ago)
    return Trend(current=current, previous=previous)


def week_start(day: date, week_starts_on: int = WEEKDAYS["sunday"]) -> date:
    """First day of the week containing day"""
    return day - timedelta(days=(day.weekday() - week_starts_on) % 7)


def _day_label(day: date, short: bool) -> str:
    if short:
        return day.strftime("%a")
    return f"{day.strftime('%b')} {day.day}"


def frequency_series(
    seizures: Sequence[SeizureLog],
    start: date,
    end: date,
    week_starts_on: int = WEEKDAYS["sunday"],
) -> List[SeriesPoint]:
    """Events per calendar day (ranges up to 30 days) or per week"""
    per_day = Counter(parse_date(s.date) for s in seizures)
    span = (end - start).days

    if span <= DAILY_BUCKET_LIMIT_DAYS:
        short = span <= 7
        points = []
        day = start
        while day <= end:
            points.append(SeriesPoint(_day_label(day, short), per_day.get(day, 0), day))
            day += timedelta(days=1)
        return points

    per_week: Counter = Counter()
    for day, count in per_day.items():
        per_week[week_start(day, week_starts_on)] += count

    points = []
    bucket = week_start(start, week_starts_on)
    while bucket <= end:
        points.append(SeriesPoint(_day_label(bucket, False), per_week.get(bucket, 0), bucket))
        bucket += timedelta(days=7)
    return points


def type_distribution(seizures: Iterable[SeizureLog]) -> List[LabeledCount]:
    """Count per seizure type, in first-encountered order"""
    counts: Dict[str, int] = {}
    for seizure in seizures:
        counts[seizure.type] = counts.get(seizure.type, 0) + 1
    return [LabeledCount(seizure_type_label(t), c) for t, c in counts.items()]


def trigger_ranking(
    seizures: Iterable[SeizureLog], limit: int = TOP_TRIGGER_LIMIT
) -> List[LabeledCount]:
    """Most frequent triggers; one seizure may count toward several

    Ties keep first-encountered order.
    """
    counts: Dict[str, int] = {}
    for seizure in seizures:
        for trigger in seizure.triggers or []:
            counts[trigger] = counts.get(trigger, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [LabeledCount(t, c) for t, c in ranked[:limit]]


def _round_half_up(value: float, places: int = 0) -> Decimal:
    quantum = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def average_duration(seizures: Sequence[SeizureLog]) -> int:
    if not seizures:
        return 0
    return int(_round_half_up(sum(s.duration for s in seizures) / len(seizures)))


def average_severity(seizures: Sequence[SeizureLog]) -> float:
    if not seizures:
        return 0.0
    return float(_round_half_up(sum(s.severity for s in seizures) / len(seizures), 1))


def build_report(
    seizures: Sequence[SeizureLog],
    medications: Sequence[Medication],
    report_range: Union[ReportRange, str],
    today: date,
    week_starts_on: int = WEEKDAYS["sunday"],
) -> ReportSummary:
    report_range = ReportRange(report_range)
    start = range_start(report_range, today)
    in_range = filter_by_range(seizures, start, today)

    return ReportSummary(
        range=report_range,
        start=start,
        end=today,
        total=len(in_range),
        average_duration=average_duration(in_range),
        average_severity=average_severity(in_range),
        frequency=frequency_series(in_range, start, today, week_starts_on),
        type_distribution=type_distribution(in_range),
        top_triggers=trigger_ranking(in_range),
        active_medications=len(medications),
    )


# ============ Dashboard helpers ============


def _appointment_key(appointment: Appointment) -> Tuple[date, str]:
    return parse_date(appointment.date), appointment.time


def upcoming_appointments(
    appointments: Iterable[Appointment], today: date, limit: Optional[int] = None
) -> List[Appointment]:
    """Appointments today or later, soonest first"""
    upcoming = sorted(
        (a for a in appointments if parse_date(a.date) >= today), key=_appointment_key
    )
    return upcoming[:limit] if limit is not None else upcoming


def past_appointments(appointments: Iterable[Appointment], today: date) -> List[Appointment]:
    """Appointments before today, most recent first"""
    return sorted(
        (a for a in appointments if parse_date(a.date) < today),
        key=_appointment_key,
        reverse=True,
    )


def seizures_by_day(seizures: Iterable[SeizureLog], start: date, end: date) -> Dict[str, int]:
    """Heat map counts for every day in [start, end]"""
    counts = Counter(s.date for s in seizures)
    result = {}
    day = start
    while day <= end:
        result[day.isoformat()] = counts.get(day.isoformat(), 0)
        day += timedelta(days=1)
    return result


def low_stock_medications(
    medications: Iterable[Medication], threshold: int = LOW_STOCK_THRESHOLD
) -> List[Medication]:
    return [
        m for m in medications if m.pills_remaining is not None and m.pills_remaining <= threshold
    ]


def is_dose_taken(
    reminders: Iterable[MedicationReminder], medication_id: str, day: date, time: str
) -> bool:
    day_str = day.isoformat()
    return any(
        r.medication_id == medication_id and r.date == day_str and r.time == time and r.taken
        for r in reminders
    )


@dataclass(frozen=True)
class ScheduledDose:
    medication: Medication
    time: str
    taken: bool


def daily_medication_schedule(
    medications: Iterable[Medication],
    reminders: Sequence[MedicationReminder],
    day: date,
) -> List[ScheduledDose]:
    """Every (medication, time) pair for the day, ordered by time"""
    doses = [
        ScheduledDose(m, t, is_dose_taken(reminders, m.id, day, t))
        for m in medications
        for t in m.times
    ]
    return sorted(doses, key=lambda dose: dose.time)


def split_contacts(
    contacts: Iterable[EmergencyContact],
) -> Tuple[List[EmergencyContact], List[EmergencyContact]]:
    """(primary, others)"""
    contacts = list(contacts)
    return [c for c in contacts if c.is_primary], [c for c in contacts if not c.is_primary]


def entry_for_date(
    entries: Iterable[SymptomJournalEntry], day: date
) -> Optional[SymptomJournalEntry]:
    """First matching entry; the journal is newest-first so this is the latest one"""
    day_str = day.isoformat()
    return next((e for e in entries if e.date == day_str), None)
