"""Notifier implementations."""

from .base import Notifier, LoggingNotifier
from .webhook import WebhookNotifier

__all__ = ["Notifier", "LoggingNotifier", "WebhookNotifier"]
