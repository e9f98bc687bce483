"""
Data models for records, requests and API payloads
"""

from .base import BaseModel
from .entities import (
    Appointment,
    AppointmentCreate,
    AppointmentUpdate,
    EmergencyContact,
    EmergencyContactCreate,
    EmergencyContactUpdate,
    Medication,
    MedicationCreate,
    MedicationReminder,
    MedicationReminderCreate,
    MedicationUpdate,
    ReminderNotification,
    SeizureLog,
    SeizureLogCreate,
    SeizureLogUpdate,
    SeizureType,
    SymptomJournalEntry,
    SymptomJournalEntryCreate,
    SymptomJournalEntryUpdate,
)
from .permissions import NotificationPermission, UpdatePermissionRequest
from .requests import (
    DeleteRecordRequest,
    MarkMedicationTakenRequest,
    UpdateAppointmentRequest,
    UpdateEmergencyContactRequest,
    UpdateJournalEntryRequest,
    UpdateMedicationRequest,
    UpdateSeizureRequest,
)

__all__ = [
    # Base
    "BaseModel",
    # Entities
    "SeizureType",
    "SeizureLog",
    "SeizureLogCreate",
    "SeizureLogUpdate",
    "Medication",
    "MedicationCreate",
    "MedicationUpdate",
    "Appointment",
    "AppointmentCreate",
    "AppointmentUpdate",
    "EmergencyContact",
    "EmergencyContactCreate",
    "EmergencyContactUpdate",
    "SymptomJournalEntry",
    "SymptomJournalEntryCreate",
    "SymptomJournalEntryUpdate",
    "MedicationReminder",
    "MedicationReminderCreate",
    "ReminderNotification",
    # Permissions
    "NotificationPermission",
    "UpdatePermissionRequest",
    # Requests
    "DeleteRecordRequest",
    "UpdateSeizureRequest",
    "UpdateMedicationRequest",
    "UpdateAppointmentRequest",
    "UpdateEmergencyContactRequest",
    "UpdateJournalEntryRequest",
    "MarkMedicationTakenRequest",
]
