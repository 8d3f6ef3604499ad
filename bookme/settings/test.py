from .base import *
import dj_database_url
from decouple import config


DEBUG = False

# Point TEST_DATABASE_URL at PostgreSQL to run the row-locking tests.
_test_database_url = config('TEST_DATABASE_URL', default='')
if _test_database_url:
    DATABASES = {'default': dj_database_url.parse(_test_database_url)}
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

STORAGES['staticfiles'] = {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'}

AXES_ENABLED = False

TIME_ZONE = 'UTC'

# Let pytest's caplog see application records.
LOGGING['loggers']['apps']['propagate'] = True

BOOKING_SLOT_STEP_MINUTES = None
CANCELLATION_NOTICE_HOURS = 24
