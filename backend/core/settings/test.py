from .base import *  # noqa: F403

TESTING = True

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

METADATA_BASE_URL = "https://metadata.test/api"
TMDB_API_KEY = None

DEFAULT_PROVIDER = "vidking"

# tests arm watchdogs explicitly
WATCHDOG_MAX_ATTEMPTS = 0
