"""
Cloud Functions entry point for the landing page
Uses functions-framework to run the Flask app as a Cloud Function
"""

import os
import sys
from pathlib import Path

# Deployed from the project root; make the landing package importable
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# GCP_PROJECT is set by Cloud Functions; mirror it for the Firestore client
project_id = os.environ.get('GCP_PROJECT') or os.environ.get('GOOGLE_CLOUD_PROJECT')
if project_id:
    os.environ.setdefault('PROJECT_ID', project_id)

import functions_framework  # noqa: E402

from landing.app import app  # noqa: E402


@functions_framework.http
def landing(request):
    """HTTP entry point: hand the request to the Flask app"""
    with app.request_context(request.environ):
        response = app.full_dispatch_request()
    return response
