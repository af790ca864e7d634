"""
Test settings: the base settings on an in-memory SQLite database.

Export DATABASE_ENGINE (and the other DATABASE_* variables) to run the
suite against PostgreSQL instead, e.g. for the concurrent booking tests.
"""
import os

from config.settings import *  # noqa: F401,F403

if not os.environ.get('DATABASE_ENGINE'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }

# Hashing cost is irrelevant in tests
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
