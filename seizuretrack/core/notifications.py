"""
Notification center
Delivers reminder notifications to in-process listeners and keeps a short
history that clients poll through the API
"""

from collections import deque
from typing import Callable, Deque, List

from seizuretrack.core.logger import get_logger
from seizuretrack.models.entities import ReminderNotification

logger = get_logger(__name__)

Listener = Callable[[ReminderNotification], None]


class NotificationCenter:
    """Fan-out for notifications fired by the reminder scheduler"""

    def __init__(self, history_size: int = 50):
        self._pending: Deque[ReminderNotification] = deque(maxlen=history_size)
        self._history: Deque[ReminderNotification] = deque(maxlen=history_size)
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener, returns a function that removes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, notification: ReminderNotification) -> None:
        self._pending.append(notification)
        self._history.append(notification)
        logger.info(f"🔔 {notification.title}: {notification.body}")

        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:
                logger.error("Notification listener failed", exc_info=True)

    def drain(self) -> List[ReminderNotification]:
        """Return and clear notifications not yet delivered to a client"""
        pending = list(self._pending)
        self._pending.clear()
        return pending

    @property
    def history(self) -> List[ReminderNotification]:
        return list(self._history)
