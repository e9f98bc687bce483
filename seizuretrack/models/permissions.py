"""
Notification permission models
"""

from enum import Enum

from pydantic import ConfigDict

from .base import BaseModel


class NotificationPermission(str, Enum):
    """Notification permission status, granted out-of-band by the client"""

    DEFAULT = "default"  # Not requested yet
    GRANTED = "granted"
    DENIED = "denied"


class UpdatePermissionRequest(BaseModel):
    """Report the notification permission obtained by the client

    @property status - default | granted | denied
    """

    model_config = ConfigDict(**BaseModel.model_config, use_enum_values=True)

    status: NotificationPermission
