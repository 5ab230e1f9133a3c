"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Services depend on LedgerRepository, not on the SQLAlchemy store
    - Every mutating method is one full load/mutate/save cycle

Design Decisions:
    - Protocol over ABC: structural subtyping, a test double or another
      backend needs no inheritance
    - Synchronous: single-writer, single-threaded execution, no suspension points
"""

from collections.abc import Callable
from typing import Protocol, TypeVar

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

T = TypeVar("T")


class LedgerRepository(Protocol):
    """Contract for the Ledger Store — implemented by infrastructure."""

    def apply(self, mutation: Callable[[LedgerDocument], T]) -> T: ...
    def load(self) -> LedgerDocument: ...
    def version(self) -> int: ...

    def list_users(self) -> list[User]: ...
    def list_projects(self) -> list[Project]: ...
    def list_contracts(self) -> list[MicroContract]: ...
    def list_conversations(self) -> list[Conversation]: ...
    def list_invites(self) -> list[str]: ...

    def get_user(self, user_id: str) -> User: ...
    def get_project(self, project_id: str) -> Project: ...
    def get_contract(self, contract_id: str) -> MicroContract: ...
    def get_conversation(self, conversation_id: str) -> Conversation: ...

    def upsert_user(self, user: User) -> User: ...
    def insert_project(self, project: Project) -> Project: ...
    def append_comment(self, project_id: str, comment: Comment) -> Project: ...
    def append_review_request(
        self, project_id: str, request: PeerReviewRequest,
    ) -> Project: ...
    def insert_contract(self, contract: MicroContract) -> MicroContract: ...
    def patch_contract(self, contract_id: str, fields: dict) -> MicroContract: ...
    def append_message(
        self, conversation_id: str, participant_ids: list[str], message: Message,
    ) -> Conversation: ...

    def is_valid_invite(self, code: str) -> bool: ...
    def add_invite(self, code: str) -> None: ...
    def remove_invite(self, code: str) -> None: ...
