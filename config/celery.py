import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("sewahub")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Re-check PENDING payments whose webhook never arrived - every 5 minutes
    "sync-pending-payments": {
        "task": "payments.sync_pending_payments",
        "schedule": crontab(minute="*/5"),
        "options": {"expires": 240},
    },
}

app.conf.timezone = "Asia/Jakarta"
