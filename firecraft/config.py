"""
Runtime settings for firecraft.

Values are read once from the environment at import time.
"""

import logging
import os

logger = logging.getLogger("firecraft.config")

# Firestore caps a single WriteBatch at 500 operations.
# Not enforced here: going over is rejected by Firestore at commit time.
MAX_WRITE_BATCH_SIZE = 500


def _int_env(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default


# Project / database: None means "let firebase_admin decide" (ADC project, default db)
PROJECT_ID = os.environ.get("FIRECRAFT_PROJECT_ID") or None
DATABASE_ID = os.environ.get("FIRECRAFT_DATABASE_ID") or None

# Service account key file; None falls back to application default credentials
CREDENTIALS_PATH = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS") or None

DEFAULT_PAGE_SIZE = _int_env("FIRECRAFT_PAGE_SIZE", 20)
DEFAULT_BATCH_SIZE = _int_env("FIRECRAFT_BATCH_SIZE", MAX_WRITE_BATCH_SIZE)

# How often a blocked stream consumer checks whether its Firestore watch died
WATCH_POLL_SECONDS = _int_env("FIRECRAFT_WATCH_POLL_SECONDS", 1)
