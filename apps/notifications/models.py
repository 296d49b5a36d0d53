"""Notification model.

A message delivered to one user in the app. Notifications are created
by event handlers once a booking or payment change has committed, and
are consumed by their recipient, who can mark each one as read.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Notification(models.Model):
    """A message sent to a user about some event."""

    class Type(models.TextChoices):
        BOOKING = "BOOKING", _("Booking")
        PAYMENT = "PAYMENT", _("Payment")

    class Channel(models.TextChoices):
        APP = "APP", _("In-app")

    user = models.ForeignKey(
        'users.CustomUser', on_delete=models.CASCADE, related_name='notifications'
    )
    type = models.CharField(max_length=10, choices=Type.choices)
    title = models.CharField(max_length=255)
    body = models.TextField()
    channel = models.CharField(max_length=10, choices=Channel.choices, default=Channel.APP)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [models.Index(fields=['user', 'is_read'], name='notification_user_read_idx')]

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"
