"""
Notification Sink

``send(user_id, type, title, body)`` is the only way the rest of the system
talks to users. It runs after commit and never raises: a failed delivery is
logged and dropped.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .models import Notification

logger = logging.getLogger(__name__)


class DatabaseNotificationSink:
    """Stores notifications for the in-app inbox."""

    def send(self, user_id: int, type: str, title: str, body: str) -> Notification | None:
        try:
            notification = Notification.objects.create(
                user_id=user_id,
                type=type,
                title=title,
                body=body,
                channel=Notification.Channel.APP,
            )
        except Exception as e:
            logger.error(f"Failed to notify user {user_id} ({title}): {e}", exc_info=True)
            return None
        logger.info(f"Notified user {user_id}: {title}")
        return notification

    def send_many(self, user_ids: Iterable[int], type: str, title: str, body: str) -> int:
        return sum(1 for user_id in user_ids if self.send(user_id, type, title, body) is not None)


notification_sink = DatabaseNotificationSink()
