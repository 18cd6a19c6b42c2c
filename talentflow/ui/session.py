"""
Session token handling.

Tokens are issued by the identity provider and carry the operator id and
role. This service only verifies them; it never edits roles.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from talentflow.core.config import settings


class SessionManager:
    """Signs and verifies operator session tokens."""

    def __init__(self, secret_key: str = None, max_age: int = None):
        self.serializer = URLSafeTimedSerializer(secret_key or settings.SECRET_KEY, salt="talentflow-session")
        self.max_age = max_age or settings.SESSION_MAX_AGE_SECONDS

    def create_session_token(self, operator_id: UUID, role: str) -> str:
        """
        Create a signed session token.

        Args:
            operator_id: Operator UUID
            role: Operator role ("admin" or "customer")

        Returns:
            Signed token string
        """
        return self.serializer.dumps({"operator_id": str(operator_id), "role": role})

    def verify_session_token(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Verify and decode a session token.

        Returns:
            Dict with operator_id and role if valid, None otherwise
        """
        try:
            return self.serializer.loads(token, max_age=self.max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global session manager instance
session_manager = SessionManager()
