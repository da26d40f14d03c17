"""
Webhook notifier - posts match summaries to an HTTP endpoint.
"""
import logging
from typing import Optional

import requests

from ..config import NotifierConfig, get_config
from ..models.matching import MatchNotification

from .base import Notifier


logger = logging.getLogger(__name__)


class WebhookNotifier(Notifier):
    """
    POSTs each notification as JSON to a configured URL.
    Delivery is not retried; failures are logged and dropped.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        config: Optional[NotifierConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        config = config or get_config().notifier
        self.url = url or config.webhook_url
        if not self.url:
            raise ValueError("WebhookNotifier requires a URL (set AUTOMATCH_WEBHOOK_URL)")
        self.timeout = config.timeout_seconds
        self.session = session or requests.Session()

    def notify_matches(self, buyer_id: str, notification: MatchNotification) -> None:
        payload = {
            "userId": buyer_id,
            "type": "AUTOMATCH_FOUND",
            "title": notification.title,
            "message": notification.message,
            "data": {
                "matchCount": notification.match_count,
                "topMatchId": notification.top_match_id,
                "matches": [m.model_dump(mode="json") for m in notification.matches],
            },
        }

        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Match notification for {buyer_id} not delivered: {e}")
            return

        logger.info(f"Match notification delivered to {buyer_id}")
