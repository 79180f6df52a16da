"""Google ID token verification"""

import logging
from typing import Dict

from google.auth.transport import requests
from google.oauth2 import id_token

from ...core.config import settings
from ...domain.exceptions import ServiceUnavailableError, UnauthorizedError

logger = logging.getLogger(__name__)


class GoogleAuthService:
    """Verifies ID tokens issued to the frontend's Google sign-in"""

    def __init__(self):
        self.client_id = settings.GOOGLE_CLIENT_ID

    def verify_id_token(self, token: str) -> Dict[str, str]:
        """Return google_id, email and name from a verified token"""
        if not self.client_id:
            raise ServiceUnavailableError("Google OAuth is not configured.")
        try:
            info = id_token.verify_oauth2_token(token, requests.Request(), self.client_id)
        except ValueError as e:
            logger.warning("Rejected Google ID token: %s", e)
            raise UnauthorizedError("Invalid Google token")

        if not info.get("email"):
            raise UnauthorizedError("Google account has no email")
        return {
            "google_id": info["sub"],
            "email": info["email"].lower(),
            "name": info.get("name"),
        }
