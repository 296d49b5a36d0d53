import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "method",
                    models.CharField(
                        choices=[("QRIS", "QRIS"), ("TRANSFER", "Bank transfer"), ("CASH", "Cash")],
                        default="QRIS",
                        max_length=10,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Waiting for payment"), ("PAID", "Paid"), ("FAILED", "Failed")],
                        default="PENDING",
                        max_length=10,
                    ),
                ),
                (
                    "reference",
                    models.CharField(
                        help_text="Order id known to the payment gateway.", max_length=50, unique=True
                    ),
                ),
                ("redirect_url", models.URLField(blank=True, max_length=500)),
                ("token", models.CharField(blank=True, max_length=255)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "booking",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="bookings.booking",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="payment_status_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(amount__gt=0), name="payment_amount_positive"),
                    models.UniqueConstraint(
                        condition=models.Q(status="PENDING"),
                        fields=("booking",),
                        name="payment_single_pending_per_booking",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("reference", models.CharField(db_index=True, max_length=100)),
                (
                    "source",
                    models.CharField(
                        choices=[("WEBHOOK", "Gateway notification"), ("SWEEP", "Pending payment sweep")],
                        default="WEBHOOK",
                        max_length=10,
                    ),
                ),
                ("transaction_status", models.CharField(blank=True, max_length=32)),
                ("fraud_status", models.CharField(blank=True, max_length=32)),
                (
                    "mapped_status",
                    models.CharField(
                        blank=True,
                        choices=[("PENDING", "Waiting for payment"), ("PAID", "Paid"), ("FAILED", "Failed")],
                        max_length=10,
                    ),
                ),
                (
                    "outcome",
                    models.CharField(
                        choices=[
                            ("APPLIED", "Applied"),
                            ("ALREADY_CONVERGED", "Already converged"),
                            ("IGNORED", "Ignored"),
                            ("UNMATCHED", "Unmatched reference"),
                        ],
                        max_length=20,
                    ),
                ),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "payment",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transactions",
                        to="payments.payment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment transaction",
                "verbose_name_plural": "Payment transactions",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
