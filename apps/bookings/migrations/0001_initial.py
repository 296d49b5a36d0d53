import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("ASSET", "Assets only"),
                            ("SERVICE", "Services only"),
                            ("MIXED", "Assets and services"),
                        ],
                        max_length=10,
                    ),
                ),
                ("start_datetime", models.DateTimeField()),
                ("end_datetime", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Waiting for approval"),
                            ("CONFIRMED", "Confirmed"),
                            ("REJECTED", "Rejected"),
                            ("CANCELLED", "Cancelled"),
                            ("PAID", "Paid"),
                        ],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="approved_bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(end_datetime__gt=models.F("start_datetime")),
                        name="booking_valid_window",
                    ),
                ],
                "indexes": [
                    models.Index(fields=["status"], name="booking_status_idx"),
                    models.Index(fields=["start_datetime", "end_datetime"], name="booking_window_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="BookingLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveSmallIntegerField()),
                ("qty", models.PositiveIntegerField()),
                (
                    "unit_rate",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Daily rate for assets, unit rate for services, at checkout.",
                        max_digits=14,
                    ),
                ),
                ("price", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "asset",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="booking_lines",
                        to="catalog.asset",
                    ),
                ),
                (
                    "booking",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="bookings.booking",
                    ),
                ),
                (
                    "service",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="booking_lines",
                        to="catalog.service",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking line",
                "verbose_name_plural": "Booking lines",
                "ordering": ["booking", "position"],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(asset__isnull=False, service__isnull=True)
                            | models.Q(asset__isnull=True, service__isnull=False)
                        ),
                        name="booking_line_single_item",
                    ),
                    models.CheckConstraint(condition=models.Q(qty__gt=0), name="booking_line_qty_positive"),
                    models.UniqueConstraint(fields=("booking", "position"), name="booking_line_unique_position"),
                ],
            },
        ),
    ]
