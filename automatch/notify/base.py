"""
Notifier interface and a logging implementation.
"""
import logging
from abc import ABC, abstractmethod

from ..models.matching import MatchNotification


logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Delivers match summaries to buyers. Fire-and-forget."""

    @abstractmethod
    def notify_matches(self, buyer_id: str, notification: MatchNotification) -> None:
        """Send a match summary to a buyer."""


class LoggingNotifier(Notifier):
    """Writes notifications to the log instead of delivering them."""

    def notify_matches(self, buyer_id: str, notification: MatchNotification) -> None:
        logger.info(
            f"Notify {buyer_id}: {notification.title} {notification.message} "
            f"(top match {notification.top_match_id})"
        )
