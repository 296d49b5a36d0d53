"""Test settings for SewaHub project.

Tests run against a file-backed SQLite database so that threads opened by
concurrency tests share it; immediate transactions serialise writers the
same way row locks do on PostgreSQL.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'test-db.sqlite3',  # noqa: F405
        'OPTIONS': {'timeout': 20, 'transaction_mode': 'IMMEDIATE'},
        'TEST': {'NAME': BASE_DIR / 'test-db.sqlite3'},  # noqa: F405
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

# Gateway calls are mocked in tests; the empty key keeps emulation mode available
MIDTRANS_SERVER_KEY = ''
MIDTRANS_CLIENT_KEY = ''

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'
