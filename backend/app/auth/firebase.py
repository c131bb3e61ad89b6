"""
Firebase Admin SDK setup for verifying listing owners' ID tokens.
Initialized once at application startup when FIREBASE_PROJECT_ID is set.
"""
import json
import logging
import os
from typing import Optional
import firebase_admin
from firebase_admin import credentials, auth
from app.config import settings

logger = logging.getLogger(__name__)


_firebase_app: Optional[firebase_admin.App] = None


def _load_credentials(value: str) -> credentials.Base:
    """Load service account credentials from a file path or a JSON string."""
    if os.path.exists(value):
        logger.info(f"Loaded Firebase credentials from file: {value}")
        return credentials.Certificate(value)

    try:
        cred_dict = json.loads(value)
    except json.JSONDecodeError:
        raise ValueError(
            "FIREBASE_CREDENTIALS_JSON must be a valid file path or JSON string"
        )
    logger.info("Loaded Firebase credentials from JSON string")
    return credentials.Certificate(cred_dict)


def initialize_firebase() -> None:
    """
    Initialize Firebase Admin SDK.

    Credentials come from FIREBASE_CREDENTIALS_JSON (file path or JSON
    string). Without it, application default credentials are used.
    """
    global _firebase_app

    if _firebase_app is not None:
        return

    if not settings.firebase_project_id:
        raise ValueError("FIREBASE_PROJECT_ID must be set")

    if settings.firebase_credentials_json:
        cred = _load_credentials(settings.firebase_credentials_json)
    else:
        cred = credentials.ApplicationDefault()

    _firebase_app = firebase_admin.initialize_app(
        cred,
        {"projectId": settings.firebase_project_id}
    )


def verify_firebase_token(token: str) -> dict:
    """
    Verify Firebase ID token and return decoded token claims.

    Args:
        token: Firebase JWT ID token string

    Returns:
        Decoded token claims dict with uid, email, etc.

    Raises:
        ValueError: If token is invalid, expired, or revoked,
            or if the SDK was never initialized
    """
    if _firebase_app is None:
        raise ValueError("Authentication is not configured on this server")

    try:
        # Checks signature, expiration, issuer and audience
        return auth.verify_id_token(token, app=_firebase_app)
    except ValueError:
        raise
    except Exception as e:
        raise ValueError(f"Token verification failed: {str(e)}")


def get_firebase_app() -> Optional[firebase_admin.App]:
    """Get the initialized Firebase app instance."""
    return _firebase_app
