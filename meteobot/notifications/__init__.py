"""Notification module for the Weather Bot."""

from .notifier import Notifier, TICK_SECONDS
from .templates import MessageTemplates

__all__ = ["Notifier", "MessageTemplates", "TICK_SECONDS"]
