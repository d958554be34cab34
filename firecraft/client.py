"""
Firestore client bootstrap.

Firecraft takes an explicit client handle. This module builds one the way a
Cloud Functions deployment does: reuse the default firebase_admin app when it
is already initialized, otherwise initialize it once.
"""

import logging

import firebase_admin
from firebase_admin import credentials, firestore

from . import config

logger = logging.getLogger("firecraft.client")


def get_app(project_id=None, credentials_path=None):
    """Return the default firebase_admin app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        # get_app raises ValueError until initialize_app has run
        pass

    credentials_path = credentials_path or config.CREDENTIALS_PATH
    if credentials_path:
        cred = credentials.Certificate(credentials_path)
    else:
        cred = credentials.ApplicationDefault()

    project_id = project_id or config.PROJECT_ID
    options = {"projectId": project_id} if project_id else None

    logger.info(f"Initializing firebase app (project={project_id or 'default'})")
    return firebase_admin.initialize_app(cred, options)


def create_client(project_id=None, database_id=None, credentials_path=None):
    """
    Create a Firestore client.

    Args:
        project_id: GCP project; defaults to FIRECRAFT_PROJECT_ID or ADC.
        database_id: named Firestore database; defaults to FIRECRAFT_DATABASE_ID
            or the (default) database.
        credentials_path: service account JSON; defaults to
            GOOGLE_APPLICATION_CREDENTIALS or ADC.

    Returns:
        google.cloud.firestore.Client
    """
    app = get_app(project_id=project_id, credentials_path=credentials_path)
    database_id = database_id or config.DATABASE_ID
    if database_id:
        return firestore.client(app=app, database_id=database_id)
    return firestore.client(app=app)
