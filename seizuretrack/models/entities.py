"""
Data entity model definitions
Define the health records kept by the record store
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import AfterValidator, ConfigDict, Field

from .base import BaseModel


def _validate_date(value: str) -> str:
    """Require a YYYY-MM-DD calendar date"""
    value = value.strip()
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValueError(f"invalid date '{value}', expected YYYY-MM-DD")
    return value


def _validate_time(value: str) -> str:
    """Require a 24-hour HH:MM time"""
    value = value.strip()
    try:
        parsed = datetime.strptime(value, "%H:%M")
    except ValueError:
        raise ValueError(f"invalid time '{value}', expected HH:MM")
    return parsed.strftime("%H:%M")


def _clean_times(values: List[str]) -> List[str]:
    """Drop blank entries and require at least one valid time"""
    cleaned = [_validate_time(v) for v in values if v and v.strip()]
    if not cleaned:
        raise ValueError("at least one reminder time is required")
    return cleaned


def _clean_triggers(values: List[str]) -> List[str]:
    """Strip, drop blanks and duplicates, keep first-seen order"""
    seen: List[str] = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


DateStr = Annotated[str, AfterValidator(_validate_date)]
TimeStr = Annotated[str, AfterValidator(_validate_time)]
TimeList = Annotated[List[str], AfterValidator(_clean_times)]
TriggerList = Annotated[List[str], AfterValidator(_clean_triggers)]
Text = Annotated[str, AfterValidator(_require_text)]
Level = Annotated[int, Field(ge=1, le=5)]
SleepHours = Annotated[float, Field(ge=0, le=24)]


class SeizureType(str, Enum):
    """Seizure type enumeration"""

    TONIC_CLONIC = "tonic-clonic"
    ABSENCE = "absence"
    FOCAL = "focal"
    MYOCLONIC = "myoclonic"
    ATONIC = "atonic"
    OTHER = "other"


# ============ Seizures ============


class SeizureLogCreate(BaseModel):
    """Seizure event payload

    @property duration - Duration in seconds.
    @property severity - 1 (mild) to 5 (severe).
    """

    model_config = ConfigDict(**BaseModel.model_config, use_enum_values=True)

    date: DateStr
    time: TimeStr
    type: SeizureType
    duration: int = Field(ge=0)
    severity: Level
    triggers: Optional[TriggerList] = None
    notes: Optional[str] = None


class SeizureLog(SeizureLogCreate):
    id: str


class SeizureLogUpdate(BaseModel):
    model_config = ConfigDict(**BaseModel.model_config, use_enum_values=True)

    date: Optional[DateStr] = None
    time: Optional[TimeStr] = None
    type: Optional[SeizureType] = None
    duration: Optional[int] = Field(default=None, ge=0)
    severity: Optional[Level] = None
    triggers: Optional[TriggerList] = None
    notes: Optional[str] = None


# ============ Medications ============


class MedicationCreate(BaseModel):
    """Medication payload

    @property frequency - Free-form label such as "Twice daily".
    @property times - Ordered HH:MM reminder times, blanks are dropped.
    """

    name: Text
    dosage: Text
    frequency: str
    times: TimeList
    refill_date: Optional[DateStr] = None
    pills_remaining: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    reminder_enabled: bool = False


class Medication(MedicationCreate):
    id: str


class MedicationUpdate(BaseModel):
    name: Optional[Text] = None
    dosage: Optional[Text] = None
    frequency: Optional[str] = None
    times: Optional[TimeList] = None
    refill_date: Optional[DateStr] = None
    pills_remaining: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    reminder_enabled: Optional[bool] = None


# ============ Appointments ============


class AppointmentCreate(BaseModel):
    title: Text
    doctor: str
    location: Optional[str] = None
    date: DateStr
    time: TimeStr
    notes: Optional[str] = None


class Appointment(AppointmentCreate):
    id: str


class AppointmentUpdate(BaseModel):
    title: Optional[Text] = None
    doctor: Optional[str] = None
    location: Optional[str] = None
    date: Optional[DateStr] = None
    time: Optional[TimeStr] = None
    notes: Optional[str] = None


# ============ Emergency contacts ============


class EmergencyContactCreate(BaseModel):
    name: Text
    relationship: str
    phone: Text
    email: Optional[str] = None
    is_primary: bool = False
    notify_on_severe_seizure: bool = False


class EmergencyContact(EmergencyContactCreate):
    id: str


class EmergencyContactUpdate(BaseModel):
    name: Optional[Text] = None
    relationship: Optional[str] = None
    phone: Optional[Text] = None
    email: Optional[str] = None
    is_primary: Optional[bool] = None
    notify_on_severe_seizure: Optional[bool] = None


# ============ Symptom journal ============


class SymptomJournalEntryCreate(BaseModel):
    """Daily symptom journal payload, all levels range 1-5"""

    date: DateStr
    mood: Level
    sleep_quality: Level
    sleep_hours: SleepHours
    stress_level: Level
    energy_level: Level
    exercised: bool = False
    alcohol_consumed: bool = False
    missed_medication: bool = False
    notes: Optional[str] = None


class SymptomJournalEntry(SymptomJournalEntryCreate):
    id: str


class SymptomJournalEntryUpdate(BaseModel):
    date: Optional[DateStr] = None
    mood: Optional[Level] = None
    sleep_quality: Optional[Level] = None
    sleep_hours: Optional[SleepHours] = None
    stress_level: Optional[Level] = None
    energy_level: Optional[Level] = None
    exercised: Optional[bool] = None
    alcohol_consumed: Optional[bool] = None
    missed_medication: Optional[bool] = None
    notes: Optional[str] = None


# ============ Medication reminders ============


class MedicationReminderCreate(BaseModel):
    """Dose record, unique on (medication_id, date, time)

    @property medicationId - Non-owning reference to a Medication.
    """

    medication_id: str
    date: DateStr
    time: TimeStr
    taken: bool = False


class MedicationReminder(MedicationReminderCreate):
    id: str


class MedicationReminderUpdate(BaseModel):
    medication_id: Optional[str] = None
    date: Optional[DateStr] = None
    time: Optional[TimeStr] = None
    taken: Optional[bool] = None


# ============ Notifications ============


class ReminderNotification(BaseModel):
    """Notification fired by the reminder scheduler"""

    medication_id: str
    title: str
    body: str
    scheduled_time: str  # HH:MM
    fired_at: datetime
