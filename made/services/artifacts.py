"""Artifacts — transmit, remix, comment on and request review of proof projects.

Invariants:
    - A project needs a non-empty title and at least one non-empty link
    - Owner name/track are snapshots of the author at creation time
    - remix copies content, points original_project_id at an existing project,
      and starts with empty comments and review requests
    - Comments are prepended (newest first) through the store
    - Only the owner requests a peer review; the reviewer must exist and
      differ from the owner
"""

import logging

from made.core.entities import (
    ArtifactDraft,
    Comment,
    LedgerDocument,
    PeerReviewRequest,
    Project,
    User,
)
from made.core.errors import InvalidTransitionError, LedgerValidationError
from made.core.repository_protocols import LedgerRepository
from made.core.validation import build_record, require_links, require_text
from made.services.stamps import new_id, now_ms

logger = logging.getLogger(__name__)


def new_project(owner: User, draft: ArtifactDraft) -> Project:
    """Build a fresh project for owner from a validated draft."""
    return build_record(Project, {
        **draft.model_dump(),
        "id": new_id(),
        "user_id": owner.id,
        "user_name": owner.name,
        "user_track": owner.track,
        "title": require_text(draft.title, "title"),
        "links": require_links(draft.links),
        "timestamp": now_ms(),
    })


class ArtifactService:
    def __init__(self, store: LedgerRepository):
        self.store = store

    def transmit(self, user_id: str, draft: ArtifactDraft) -> Project:
        """Publish a new proof artifact for an existing user."""
        require_text(draft.title, "title")
        require_links(draft.links)

        def _transmit(doc: LedgerDocument) -> Project:
            return doc.add_project(new_project(doc.find_user(user_id), draft))

        project = self.store.apply(_transmit)
        logger.info(
            "Artifact transmitted",
            extra={"project_id": project.id, "user_id": user_id},
        )
        return project

    def remix(self, project_id: str, user_id: str, reason: str) -> Project:
        """Derive a new project from an existing one."""
        reason = require_text(reason, "remix_reason")

        def _remix(doc: LedgerDocument) -> Project:
            original = doc.find_project(project_id)
            remixer = doc.find_user(user_id)
            remixed = original.model_copy(update={
                "id": new_id(),
                "user_id": remixer.id,
                "user_name": remixer.name,
                "user_track": remixer.track,
                "original_project_id": original.id,
                "remix_reason": reason,
                "timestamp": now_ms(),
                "comments": [],
                "peer_review_requests": [],
                "is_spotlight": False,
            })
            return doc.add_project(remixed)

        project = self.store.apply(_remix)
        logger.info(
            f"Project remixed from {project_id}",
            extra={"project_id": project.id, "user_id": user_id},
        )
        return project

    def comment(self, project_id: str, author_id: str, text: str) -> Comment:
        body = require_text(text, "text")
        author = self.store.get_user(author_id)
        comment = Comment(
            id=new_id(),
            user_id=author.id,
            user_name=author.name,
            text=body,
            timestamp=now_ms(),
        )
        self.store.append_comment(project_id, comment)
        return comment

    def request_review(
        self, project_id: str, requester_id: str, reviewer_id: str,
    ) -> PeerReviewRequest:
        doc = self.store.load()
        project = doc.find_project(project_id)
        if requester_id != project.user_id:
            raise InvalidTransitionError(
                "Only the project owner can request a peer review",
                action="request_review",
            )
        if reviewer_id == project.user_id:
            raise LedgerValidationError(
                "Owner cannot review their own project", "reviewer_id",
            )
        reviewer = doc.find_user(reviewer_id)
        request = PeerReviewRequest(
            id=new_id(), reviewer_id=reviewer.id, reviewer_name=reviewer.name,
        )
        self.store.append_review_request(project_id, request)
        return request
