from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="booking",
            name="payment_attempts",
            field=models.PositiveIntegerField(
                default=0,
                help_text="Gateway order ids issued so far, including ones that never got a payment row.",
            ),
        ),
    ]
