"""Onboarding — invite redemption, user creation and first artifact in one cycle.

Invariants:
    - The invite code is normalized and must be in the redemption set at save time
    - User and first Project are created atomically: both saved or neither
    - session_price is one of the offered tiers (10, 25, 50)
    - New users start unverified, non-admin, with zero completed sessions,
      and record the code they redeemed
    - Redemption does not consume the code (codes are shared cohort keys)
"""

import logging

from made.core.domain_types import SESSION_PRICE_TIERS, Track
from made.core.entities import ArtifactDraft, LedgerDocument, Project, User
from made.core.errors import InvalidInviteError, LedgerValidationError
from made.core.invites import normalize_invite_code
from made.core.repository_protocols import LedgerRepository
from made.core.validation import build_record, require_links, require_text
from made.services.artifacts import new_project
from made.services.stamps import new_id

logger = logging.getLogger(__name__)


class OnboardingService:
    def __init__(self, store: LedgerRepository):
        self.store = store

    def onboard(
        self,
        invite_code: str,
        name: str,
        track: Track | str,
        session_price: float,
        artifact: ArtifactDraft,
        university: str | None = None,
        github_url: str | None = None,
        figma_url: str | None = None,
    ) -> tuple[User, Project]:
        code = normalize_invite_code(invite_code)
        if session_price not in SESSION_PRICE_TIERS:
            raise LedgerValidationError(
                f"session_price must be one of {list(SESSION_PRICE_TIERS)}",
                "session_price",
            )
        user = build_record(User, {
            "id": new_id(),
            "name": require_text(name, "name"),
            "track": track,
            "session_price": session_price,
            "sessions_completed": 0,
            "is_verified": False,
            "invite_code": code,
            "university": university,
            "github_url": github_url,
            "figma_url": figma_url,
        })
        require_text(artifact.title, "title")
        require_links(artifact.links)

        def _onboard(doc: LedgerDocument) -> tuple[User, Project]:
            if code not in doc.invites:
                raise InvalidInviteError(code)
            doc.users.append(user)
            project = doc.add_project(new_project(user, artifact))
            return user, project

        try:
            created_user, project = self.store.apply(_onboard)
        except InvalidInviteError as e:
            logger.warning("Signup rejected", extra={"error_code": e.code})
            raise
        logger.info(
            "User onboarded",
            extra={"user_id": created_user.id, "project_id": project.id},
        )
        return created_user, project
