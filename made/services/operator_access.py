"""Operator Access — the single configured operator credential.

Invariants:
    - Credentials are compared in constant time
    - Login is impossible while either setting is unset
    - A successful login upserts the operator user (admin, verified)
"""

import hmac
import logging

from made.config import Settings
from made.core.domain_types import Track
from made.core.entities import User
from made.core.errors import OperatorAuthError
from made.core.repository_protocols import LedgerRepository

logger = logging.getLogger(__name__)

OPERATOR_USER_ID = "admin-made"


class OperatorAccess:
    def __init__(self, store: LedgerRepository, settings: Settings):
        self.store = store
        self.settings = settings

    def authenticate(self, email: str, password: str) -> User:
        expected_email = self.settings.operator_email
        expected_password = self.settings.operator_password
        if not expected_email or not expected_password:
            logger.warning("Operator login attempted but no credential is configured")
            raise OperatorAuthError()
        email_ok = hmac.compare_digest(
            (email or "").strip().lower().encode(), expected_email.lower().encode(),
        )
        password_ok = hmac.compare_digest(
            (password or "").encode(), expected_password.encode(),
        )
        if not (email_ok and password_ok):
            logger.warning("Operator login rejected", extra={"error_code": "OPERATOR_AUTH_FAILED"})
            raise OperatorAuthError()

        operator = User(
            id=OPERATOR_USER_ID,
            name="Operator",
            track=Track.OTHER,
            session_price=0,
            is_verified=True,
            is_admin=True,
        )
        # Keep counters earned under the same id.
        existing = {u.id: u for u in self.store.list_users()}.get(OPERATOR_USER_ID)
        if existing is not None:
            operator = operator.model_copy(
                update={"sessions_completed": existing.sessions_completed},
            )
        self.store.upsert_user(operator)
        logger.info("Operator authenticated", extra={"user_id": OPERATOR_USER_ID})
        return operator
