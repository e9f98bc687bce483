"""
Request models for API handlers
"""

from .base import BaseModel
from .entities import (
    AppointmentUpdate,
    DateStr,
    EmergencyContactUpdate,
    MedicationUpdate,
    SeizureLogUpdate,
    SymptomJournalEntryUpdate,
    TimeStr,
)

# ============================================================================
# Shared Request Models
# ============================================================================


class DeleteRecordRequest(BaseModel):
    """Request parameters for deleting a record of any collection.

    @property id - The record ID to delete.
    """

    id: str


# ============================================================================
# Update Request Models
# ============================================================================


class UpdateSeizureRequest(BaseModel):
    """Request parameters for updating a seizure log.

    @property id - The seizure ID.
    @property changes - Fields to merge, omitted fields are kept.
    """

    id: str
    changes: SeizureLogUpdate


class UpdateMedicationRequest(BaseModel):
    """Request parameters for updating a medication.

    @property id - The medication ID.
    @property changes - Fields to merge, omitted fields are kept.
    """

    id: str
    changes: MedicationUpdate


class UpdateAppointmentRequest(BaseModel):
    id: str
    changes: AppointmentUpdate


class UpdateEmergencyContactRequest(BaseModel):
    id: str
    changes: EmergencyContactUpdate


class UpdateJournalEntryRequest(BaseModel):
    id: str
    changes: SymptomJournalEntryUpdate


# ============================================================================
# Medication Module Request Models
# ============================================================================


class MarkMedicationTakenRequest(BaseModel):
    """Request parameters for marking a dose as taken or not taken.

    @property medicationId - The medication ID.
    @property date - Day of the dose (YYYY-MM-DD).
    @property time - Scheduled time of the dose (HH:MM).
    @property taken - New taken state.
    """

    medication_id: str
    date: DateStr
    time: TimeStr
    taken: bool
