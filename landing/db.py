#!/usr/bin/env python3
"""
Firestore connection for the durable archive cache.

The client is created lazily on first use and only when a Google Cloud
project is configured, so local runs and tests never touch the network.
"""

import logging
import os
import threading
from typing import Optional

# Create logger for this module
logger = logging.getLogger(__name__)

_PROJECT_ENV_VARS = ('GCP_PROJECT', 'GOOGLE_CLOUD_PROJECT', 'PROJECT_ID')

_db = None
_initialized = False
_init_lock = threading.Lock()


def get_project_id() -> Optional[str]:
    """Return the configured Google Cloud project id, if any"""
    for name in _PROJECT_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def get_db():
    """
    Get the Firestore client, initializing Firebase Admin on first call.

    Returns:
        firestore client, or None when no project is configured or
        initialization failed
    """
    global _db, _initialized

    if _initialized:
        return _db

    with _init_lock:
        if _initialized:
            return _db

        project_id = get_project_id()
        if not project_id:
            logger.info("[Firestore] No project configured, durable archive cache disabled")
            _initialized = True
            return None

        try:
            import firebase_admin
            from firebase_admin import firestore

            if not firebase_admin._apps:
                firebase_admin.initialize_app(options={'projectId': project_id})
            _db = firestore.client()
            logger.info(f"[Firestore] Connected to project {project_id}")
        except Exception as e:
            logger.error(f"[Firestore] Failed to initialize client: {e}", exc_info=True)
            _db = None

        _initialized = True
        return _db


def firestore_available() -> bool:
    return get_db() is not None


def reset_db():
    """Forget the cached client (used by tests and the maintenance script)"""
    global _db, _initialized
    with _init_lock:
        _db = None
        _initialized = False
