"""Over-assignment alerts posted to an external listener.

Deciding whether to alert is a pure function of the assignee's current
computer count. Delivery is a single best-effort POST: no retry, no queue.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from domain.errors import NotificationError
from domain.models import Notification

logger = logging.getLogger(__name__)

NOTIFY_THRESHOLD = 3
NOTIFY_LEVEL = "Warning"
DEFAULT_NOTIFY_URL = "http://localhost:8080/api/notify"
DEFAULT_NOTIFY_TIMEOUT = 5.0


def should_notify(count: int) -> bool:
    """True once an assignee holds more than NOTIFY_THRESHOLD computers."""
    return count > NOTIFY_THRESHOLD


def build_notification(assignee: str, count: int) -> Notification:
    return Notification(
        level=NOTIFY_LEVEL,
        who=assignee,
        message=f"{assignee} is now assigned {count} items",
    )


class NotificationSender:
    """POSTs notifications as JSON and expects 201 Created back."""

    def __init__(
        self,
        url: str = DEFAULT_NOTIFY_URL,
        timeout: float = DEFAULT_NOTIFY_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def send(self, notification: Notification) -> None:
        logger.warning(
            "Employee [%s]: %s", notification.who, notification.message
        )
        try:
            resp = self._session.post(
                self.url, json=notification.to_payload(), timeout=self.timeout
            )
        except requests.RequestException as exc:
            logger.error("Notification service: error sending to %s (is the listener running?): %s", self.url, exc)
            raise NotificationError(f"Could not reach notification listener at {self.url}") from exc

        if resp.status_code != 201:
            logger.error("Notification service: listener returned %d", resp.status_code)
            raise NotificationError(f"Notification listener returned {resp.status_code}")

    def close(self) -> None:
        self._session.close()
