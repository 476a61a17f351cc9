# splitledger/config/firebase_config.py

import logging

import firebase_admin
from firebase_admin import credentials, firestore

from splitledger.config.settings import FIREBASE_CREDENTIALS, FIREBASE_PROJECT_ID


logger = logging.getLogger(__name__)

_db = None


def get_db():
    """
    Return a Firestore client, initialising the Firebase app on first use.

    Requires:
    - FIREBASE_CREDENTIALS pointing at a service account key file.

    Returns None when credentials are not configured or the app cannot be
    initialised, so callers can report "Firestore is not available".
    """
    global _db
    if _db is not None:
        return _db

    if not FIREBASE_CREDENTIALS:
        logger.warning("FIREBASE_CREDENTIALS is not set; Firestore disabled")
        return None

    try:
        try:
            app = firebase_admin.get_app()
        except ValueError:
            options = {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
            cred = credentials.Certificate(FIREBASE_CREDENTIALS)
            app = firebase_admin.initialize_app(cred, options)
        _db = firestore.client(app)
    except (OSError, ValueError) as e:
        logger.error("Could not initialise Firestore: %s", e)
        return None

    return _db
