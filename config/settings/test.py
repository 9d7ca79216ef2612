"""Test settings for Innkeeper.

Fast, self-contained configuration for the test suite: in-memory SQLite,
local-memory cache and email, Celery tasks run inline and a cheap password
hasher.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'innkeeper-tests',
    }
}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

STRIPE_SECRET_KEY = 'sk_test_innkeeper'
STRIPE_WEBHOOK_SECRET = 'whsec_innkeeper_test'
STRIPE_SUCCESS_URL = 'http://testserver/checkout/success?session_id={CHECKOUT_SESSION_ID}'
STRIPE_CANCEL_URL = 'http://testserver/cart'
BOOKING_CURRENCY = 'USD'
TIME_ZONE = 'UTC'
