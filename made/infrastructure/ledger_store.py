"""Ledger Store — durable single-document storage with read-modify-write cycles.

Invariants:
    - Every mutating operation is one cycle: load full document, mutate, save
    - A cycle either saves the whole document or nothing; any error raised by
      the mutation leaves payload and version untouched
    - Saves are version-checked: a document changed by another writer since
      load raises ConcurrencyError instead of being overwritten
    - Reads return detached copies; mutating them never touches stored state
    - Entity ids are unique within their collection
    - projects and contracts are newest-first (insert prepends); conversations
      are appended; comments are newest-first; messages are oldest-first
    - Referenced ids (project, contract, owner, original project) must resolve,
      otherwise NotFoundError; nothing is ever a silent no-op

Design Decisions:
    - One row per document (models/ledger_document.py): the persisted layout
      stays the five-collection snapshot, portable to any JSON-capable backend
    - Optimistic versioning over row locks: single-writer is the normal case,
      a lost race is reported, never retried
    - apply() is public so services can change several entities in one cycle
      (completion + seller counter, user + first project)
"""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import TypeVar

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from made.core.domain_types import DEFAULT_INVITE_CODES
from made.core.enforce_exchange import check_patch
from made.core.entities import (
    Comment,
    Conversation,
    LedgerDocument,
    Message,
    MicroContract,
    PeerReviewRequest,
    Project,
    User,
)
from made.core.errors import (
    ConcurrencyError,
    LedgerValidationError,
)
from made.core.ledger_snapshot import document_from_snapshot, document_to_snapshot
from made.core.validation import build_record
from made.infrastructure.database import DatabaseSessionManager
from made.models.ledger_document import LedgerDocumentRow

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DOCUMENT_KEY = "made_vault_v1"

# Accept both python names and persisted (camelCase) names in patches.
_CONTRACT_FIELD_NAMES: dict[str, str] = {
    **{name: name for name in MicroContract.model_fields},
    **{
        info.alias: name
        for name, info in MicroContract.model_fields.items()
        if info.alias
    },
}


class LedgerStore:
    """The single source of truth for users, projects, contracts, conversations, invites."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        document_key: str = DEFAULT_DOCUMENT_KEY,
        seed_invites: Iterable[str] = DEFAULT_INVITE_CODES,
    ):
        self.db = db
        self.document_key = document_key
        self.seed_invites = tuple(seed_invites)

    # ─── Cycle primitives ───────────────────────────────────────

    def _read(self, session: Session) -> tuple[LedgerDocument, int]:
        row = session.get(LedgerDocumentRow, self.document_key)
        if row is None:
            return document_from_snapshot(None, self.seed_invites), 0
        return document_from_snapshot(row.payload, self.seed_invites), row.version

    def _write(self, session: Session, document: LedgerDocument, expected: int) -> int:
        payload = document_to_snapshot(document)
        now = datetime.now(timezone.utc)
        if expected == 0:
            session.add(LedgerDocumentRow(
                key=self.document_key, payload=payload, version=1, updated_at=now,
            ))
            try:
                session.flush()
            except IntegrityError as e:
                raise ConcurrencyError(
                    f"Ledger '{self.document_key}' was created by another writer",
                ) from e
            return 1

        result = session.execute(
            update(LedgerDocumentRow)
            .where(LedgerDocumentRow.key == self.document_key)
            .where(LedgerDocumentRow.version == expected)
            .values(payload=payload, version=expected + 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise ConcurrencyError(
                f"Ledger '{self.document_key}' changed since version {expected}",
            )
        return expected + 1

    def apply(self, mutation: Callable[[LedgerDocument], T]) -> T:
        """Run one load/mutate/save cycle and return the mutation's result."""
        with self.db.session() as session:
            document, version = self._read(session)
            result = mutation(document)
            new_version = self._write(session, document, version)
            session.commit()
        logger.debug(
            "Ledger saved", extra={"version": new_version},
        )
        return result

    def load(self) -> LedgerDocument:
        with self.db.session() as session:
            document, _ = self._read(session)
        return document

    def version(self) -> int:
        """Current version stamp; 0 when the ledger was never saved."""
        with self.db.session() as session:
            row = session.get(LedgerDocumentRow, self.document_key)
            return row.version if row else 0

    # ─── Reads ──────────────────────────────────────────────────

    def list_users(self) -> list[User]:
        return self.load().users

    def list_projects(self) -> list[Project]:
        return self.load().projects

    def list_contracts(self) -> list[MicroContract]:
        return self.load().contracts

    def list_conversations(self) -> list[Conversation]:
        return self.load().conversations

    def list_invites(self) -> list[str]:
        return self.load().invites

    def get_user(self, user_id: str) -> User:
        return self.load().find_user(user_id)

    def get_project(self, project_id: str) -> Project:
        return self.load().find_project(project_id)

    def get_contract(self, contract_id: str) -> MicroContract:
        return self.load().find_contract(contract_id)

    def get_conversation(self, conversation_id: str) -> Conversation:
        return self.load().find_conversation(conversation_id)

    # ─── Users ──────────────────────────────────────────────────

    def upsert_user(self, user: User) -> User:
        """Insert, or replace the record with the same id in place."""
        def _upsert(doc: LedgerDocument) -> User:
            idx = doc.user_index(user.id)
            if idx >= 0:
                doc.users[idx] = user
            else:
                doc.users.append(user)
            return user

        result = self.apply(_upsert)
        logger.info("User saved", extra={"user_id": user.id})
        return result

    # ─── Projects ───────────────────────────────────────────────

    def insert_project(self, project: Project) -> Project:
        result = self.apply(lambda doc: doc.add_project(project))
        logger.info(
            "Project inserted",
            extra={"project_id": project.id, "user_id": project.user_id},
        )
        return result

    def append_comment(self, project_id: str, comment: Comment) -> Project:
        """Prepend comment to the project's comments (newest first)."""
        def _comment(doc: LedgerDocument) -> Project:
            project = doc.find_project(project_id)
            updated = project.model_copy(
                update={"comments": [comment, *project.comments]},
            )
            doc.replace_project(updated)
            return updated

        result = self.apply(_comment)
        logger.info(
            "Comment appended",
            extra={"project_id": project_id, "user_id": comment.user_id},
        )
        return result

    def append_review_request(
        self, project_id: str, request: PeerReviewRequest,
    ) -> Project:
        def _request(doc: LedgerDocument) -> Project:
            project = doc.find_project(project_id)
            updated = project.model_copy(update={
                "peer_review_requests": [*project.peer_review_requests, request],
            })
            doc.replace_project(updated)
            return updated

        result = self.apply(_request)
        logger.info(
            "Peer review requested",
            extra={"project_id": project_id, "user_id": request.reviewer_id},
        )
        return result

    # ─── Contracts ──────────────────────────────────────────────

    def insert_contract(self, contract: MicroContract) -> MicroContract:
        result = self.apply(lambda doc: doc.add_contract(contract))
        logger.info(
            "Contract inserted",
            extra={"contract_id": contract.id, "user_id": contract.user_id},
        )
        return result

    def patch_contract(self, contract_id: str, fields: dict) -> MicroContract:
        """Merge fields into the contract. id and set buyer fields are immutable."""
        changes = normalize_contract_patch(fields)

        def _patch(doc: LedgerDocument) -> MicroContract:
            existing = doc.find_contract(contract_id)
            check_patch(existing, changes)
            patched = build_record(
                MicroContract, {**existing.model_dump(), **changes},
            )
            doc.replace_contract(patched)
            return patched

        result = self.apply(_patch)
        logger.info(
            "Contract patched",
            extra={"contract_id": contract_id, "status": result.status.value},
        )
        return result

    # ─── Conversations ──────────────────────────────────────────

    def append_message(
        self, conversation_id: str, participant_ids: list[str], message: Message,
    ) -> Conversation:
        """Append message, creating the conversation on first use."""
        result = self.apply(
            lambda doc: doc.add_message(conversation_id, participant_ids, message),
        )
        logger.info(
            "Message appended",
            extra={"conversation_id": conversation_id, "user_id": message.sender_id},
        )
        return result

    # ─── Invites ────────────────────────────────────────────────

    def is_valid_invite(self, code: str) -> bool:
        return code in self.load().invites

    def add_invite(self, code: str) -> None:
        def _add(doc: LedgerDocument) -> None:
            if code not in doc.invites:
                doc.invites.append(code)

        self.apply(_add)
        logger.info("Invite added", extra={"invite_code": code})

    def remove_invite(self, code: str) -> None:
        def _remove(doc: LedgerDocument) -> None:
            doc.invites = [i for i in doc.invites if i != code]

        self.apply(_remove)
        logger.info("Invite removed", extra={"invite_code": code})


# ─── Patch normalization ────────────────────────────────────────

def normalize_contract_patch(fields: dict) -> dict:
    changes: dict = {}
    for key, value in fields.items():
        name = _CONTRACT_FIELD_NAMES.get(key)
        if name is None:
            raise LedgerValidationError(f"Unknown contract field '{key}'", key)
        if name == "id":
            raise LedgerValidationError("Contract id cannot be patched", "id")
        changes[name] = value
    return changes

