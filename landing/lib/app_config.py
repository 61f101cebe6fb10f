#!/usr/bin/env python3
"""
Centralized configuration management for app_config.json
Handles loading and accessing application configuration values.

Values are resolved in this order: environment variable, app_config.json,
built-in default.
"""

import json
import logging
import os
from pathlib import Path

# Create logger for this module
logger = logging.getLogger(__name__)

# Get the project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent
APP_CONFIG_PATH = PROJECT_ROOT / 'app_config.json'

ARCHIVE_URL = 'https://apod.nasa.gov/apod/archivepix.html'
ARCHIVE_BASE_URL = 'https://apod.nasa.gov/apod/'
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0
CACHE_COLLECTION = 'apod-archive'
CACHE_KEY = 'archive-entries.json'
COMIC_URL = 'https://xkcd.com/'
FALLBACK_URL = 'https://apod.nasa.gov/apod/astropix.html'

# json key -> (environment variable, default)
_SETTINGS = {
    'archive_url': ('ARCHIVE_URL', ARCHIVE_URL),
    'archive_base_url': ('ARCHIVE_BASE_URL', ARCHIVE_BASE_URL),
    'fetch_timeout_seconds': ('ARCHIVE_FETCH_TIMEOUT', DEFAULT_FETCH_TIMEOUT_SECONDS),
    'cache_collection': ('ARCHIVE_CACHE_COLLECTION', CACHE_COLLECTION),
    'cache_key': ('ARCHIVE_CACHE_KEY', CACHE_KEY),
    'comic_url': ('COMIC_URL', COMIC_URL),
    'fallback_url': ('FALLBACK_URL', FALLBACK_URL),
    'retry_empty_scrape': ('RETRY_EMPTY_SCRAPE', False),
}

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}

# Cache for the loaded config
_config_cache = None


def get_app_config(reload=False):
    """
    Load and return the application configuration from app_config.json

    Args:
        reload: If True, force reload from file (default: False, uses cache)

    Returns:
        dict: Configuration dictionary, empty dict if file doesn't exist or can't be loaded
    """
    global _config_cache

    if _config_cache is None or reload:
        try:
            if APP_CONFIG_PATH.exists():
                with open(APP_CONFIG_PATH, 'r', encoding='utf-8') as f:
                    _config_cache = json.load(f)
                    logger.debug(f"Loaded app config from {APP_CONFIG_PATH}")
            else:
                logger.warning(f"app_config.json not found at {APP_CONFIG_PATH}")
                _config_cache = {}
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse app_config.json: {e}")
            _config_cache = {}
        except OSError as e:
            logger.warning(f"Could not load app_config.json: {e}")
            _config_cache = {}

    return _config_cache.copy() if _config_cache else {}


def get_config_value(key, default=None):
    """
    Get a configuration value, letting the matching environment variable win
    over app_config.json

    Args:
        key: The configuration key to retrieve (json name, e.g. 'comic_url')
        default: Default value if key is not found anywhere

    Returns:
        The configuration value or default if not found

    Examples:
        get_config_value('comic_url')
        get_config_value('fetch_timeout_seconds')
    """
    env_name, builtin_default = _SETTINGS.get(key, (None, default))
    if default is None:
        default = builtin_default

    if env_name:
        env_value = os.environ.get(env_name)
        if env_value not in (None, ''):
            return env_value

    return get_app_config().get(key, default)


def get_fetch_timeout():
    """
    Archive fetch timeout in seconds

    Returns:
        float: Positive timeout; invalid values fall back to the default
    """
    raw = get_config_value('fetch_timeout_seconds')
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        logger.warning(f"Invalid fetch timeout {raw!r}, using {DEFAULT_FETCH_TIMEOUT_SECONDS}s")
        return DEFAULT_FETCH_TIMEOUT_SECONDS

    if timeout <= 0:
        logger.warning(f"Fetch timeout must be positive (got {timeout}), using {DEFAULT_FETCH_TIMEOUT_SECONDS}s")
        return DEFAULT_FETCH_TIMEOUT_SECONDS
    return timeout


def get_bool_value(key):
    """Read a boolean setting; accepts real booleans or strings like 'true'/'1'"""
    value = get_config_value(key)
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def reload_config():
    """
    Force reload of configuration from file (clears cache)
    """
    global _config_cache
    _config_cache = None
    return get_app_config(reload=True)
