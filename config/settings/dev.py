"""Development settings for SewaHub project.

This module extends the base settings with development specific
configuration, such as enabling debug and allowing all hosts. The payment
gateway runs in emulation mode here. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Run Celery tasks inline when no broker is around
CELERY_TASK_ALWAYS_EAGER = get_env('CELERY_TASK_ALWAYS_EAGER', 'False').lower() == 'true'  # noqa: F405
