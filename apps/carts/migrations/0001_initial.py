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
            name="CartLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("qty", models.PositiveIntegerField()),
                ("price", models.DecimalField(decimal_places=2, max_digits=14)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "asset",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cart_lines",
                        to="catalog.asset",
                    ),
                ),
                (
                    "service",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cart_lines",
                        to="catalog.service",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cart_lines",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Cart line",
                "verbose_name_plural": "Cart lines",
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(asset__isnull=False, service__isnull=True)
                            | models.Q(asset__isnull=True, service__isnull=False)
                        ),
                        name="cart_line_single_item",
                    ),
                    models.CheckConstraint(condition=models.Q(qty__gt=0), name="cart_line_qty_positive"),
                    models.UniqueConstraint(
                        condition=models.Q(asset__isnull=False),
                        fields=("user", "asset"),
                        name="cart_line_unique_asset",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(service__isnull=False),
                        fields=("user", "service"),
                        name="cart_line_unique_service",
                    ),
                ],
            },
        ),
    ]
