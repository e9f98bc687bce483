"""
Type protocols for storage and notification collaborators

Using Protocols keeps the record store and the reminder scheduler independent
of the concrete SQLite medium and notification sink.
"""

from typing import List, Optional, Protocol

from seizuretrack.models.entities import ReminderNotification


class KeyValueStorage(Protocol):
    """Protocol for the durable key-value medium"""

    def get_item(self, key: str) -> Optional[str]:
        """Get the raw value stored under key"""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Replace the value stored under key"""
        ...

    def remove_item(self, key: str) -> bool:
        """Delete key"""
        ...

    def keys(self) -> List[str]:
        """List stored keys"""
        ...


class NotifierProtocol(Protocol):
    """Protocol for the notification side effect"""

    def notify(self, notification: ReminderNotification) -> None:
        """Deliver a notification"""
        ...
