# splitledger/config/settings.py

import os

# Path to the Firebase service account key (JSON). Without it the Firestore
# repository is unavailable and callers should use the in-memory one.
FIREBASE_CREDENTIALS = os.getenv("FIREBASE_CREDENTIALS", "")

# Optional explicit project id; otherwise taken from the credentials file.
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")

# Top-level collection holding one document per group
GROUPS_COLLECTION = os.getenv("SPLITLEDGER_GROUPS_COLLECTION", "groups")
