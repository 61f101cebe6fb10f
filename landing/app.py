#!/usr/bin/env python3
"""
Flask app for the landing page redirect service
"""

import logging
from pathlib import Path
from datetime import datetime, timezone

from dotenv import load_dotenv
from flask import Flask, jsonify, redirect, url_for

from . import __version__
from .lib.logging_config import setup_logging

# Get the directory where this file is located
BASE_DIR = Path(__file__).parent
PROJECT_ROOT = BASE_DIR.parent

# Load environment variables from .env file
load_dotenv(PROJECT_ROOT / '.env')
setup_logging()

# Create logger for this module
logger = logging.getLogger(__name__)

from .cache_manager import NullArchiveCache  # noqa: E402
from .services.archive_provider import get_archive_provider  # noqa: E402
from .routes.redirect_routes import bp as redirect_bp  # noqa: E402

app = Flask(__name__)
app.register_blueprint(redirect_bp)


@app.route('/health', methods=['GET'])
def health_check():
    """
    Report whether the archive list is loaded and where it came from.
    Returns 200 when entries are available or not yet loaded, 503 when the
    loaded list is empty.
    """
    provider = get_archive_provider()
    report = provider.last_load
    durable = not isinstance(provider.cache, NullArchiveCache)

    archive = {
        'state': provider.state.value,
        'source': report.source.value if report else None,
        'entry_count': report.entry_count if report else None,
        'errors': [f"{type(e).__name__}: {e}" for e in report.errors] if report else [],
    }

    status = "healthy"
    http_status = 200
    if report is not None and report.entry_count == 0:
        status = "degraded"
        http_status = 503

    return jsonify({
        'status': status,
        'version': __version__,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'services': {
            'archive': archive,
            'durable_cache': {'configured': durable},
        }
    }), http_status


@app.route('/favicon.ico')
def favicon():
    return '', 204


@app.errorhandler(404)
def page_not_found(e):
    """Unknown paths go through the redirect as well"""
    return redirect(url_for('redirect.landing_redirect'))
