"""Payment models for SewaHub."""

from __future__ import annotations

import uuid

from django.db import models  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.payments.domain.entities import PaymentMethod, PaymentStatus
from apps.payments.domain.reconciliation import ReconcileOutcome


class Payment(models.Model):
    """One gateway payment attempt for a booking."""

    class Status(models.TextChoices):
        PENDING = PaymentStatus.PENDING.value, _("Waiting for payment")
        PAID = PaymentStatus.PAID.value, _("Paid")
        FAILED = PaymentStatus.FAILED.value, _("Failed")

    class Method(models.TextChoices):
        QRIS = PaymentMethod.QRIS.value, _("QRIS")
        TRANSFER = PaymentMethod.TRANSFER.value, _("Bank transfer")
        CASH = PaymentMethod.CASH.value, _("Cash")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.PROTECT,
        related_name="payments",
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    method = models.CharField(max_length=10, choices=Method.choices, default=Method.QRIS)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    reference = models.CharField(
        max_length=50,
        unique=True,
        help_text=_("Order id known to the payment gateway."),
    )
    redirect_url = models.URLField(max_length=500, blank=True)
    token = models.CharField(max_length=255, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(condition=Q(amount__gt=0), name="payment_amount_positive"),
            # at most one open attempt per booking
            models.UniqueConstraint(
                fields=["booking"],
                condition=Q(status="PENDING"),
                name="payment_single_pending_per_booking",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "created_at"], name="payment_status_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Payment {self.reference} ({self.status})"


class PaymentTransaction(models.Model):
    """Append-only record of every gateway notification received."""

    class Outcome(models.TextChoices):
        APPLIED = ReconcileOutcome.APPLIED.value, _("Applied")
        ALREADY_CONVERGED = ReconcileOutcome.ALREADY_CONVERGED.value, _("Already converged")
        IGNORED = ReconcileOutcome.IGNORED.value, _("Ignored")
        UNMATCHED = ReconcileOutcome.UNMATCHED.value, _("Unmatched reference")

    class Source(models.TextChoices):
        WEBHOOK = "WEBHOOK", _("Gateway notification")
        SWEEP = "SWEEP", _("Pending payment sweep")

    payment = models.ForeignKey(
        Payment,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="transactions",
    )
    reference = models.CharField(max_length=100, db_index=True)
    source = models.CharField(max_length=10, choices=Source.choices, default=Source.WEBHOOK)
    transaction_status = models.CharField(max_length=32, blank=True)
    fraud_status = models.CharField(max_length=32, blank=True)
    mapped_status = models.CharField(max_length=10, choices=Payment.Status.choices, blank=True)
    outcome = models.CharField(max_length=20, choices=Outcome.choices)
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Payment transaction")
        verbose_name_plural = _("Payment transactions")
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.reference}: {self.transaction_status or '-'} ({self.outcome})"
