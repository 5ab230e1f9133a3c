"""Entity Model — immutable-shaped records held by the Ledger Store.

Invariants:
    - Records are frozen: a change is a new record via model_copy(update=...)
    - Field names are snake_case in Python, camelCase in the persisted document
    - User owns Projects and MicroContracts by reference (user_id), never by containment
    - Project.user_name / user_track and MicroContract.user_name are snapshots
      taken at creation; they go stale when the owner is renamed and are never
      re-joined
    - LedgerDocument is the only mutable model: the working copy of one
      load/mutate/save cycle

Design Decisions:
    - pydantic over dataclasses: the persisted document is JSON and needs
      alias-aware validation on the way in
    - Unknown keys are ignored so documents written by older clients
      (which embedded projects inside users) still load
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from made.core.domain_types import ContractStatus, ReviewStatus, Track
from made.core.errors import DuplicateEntityError, NotFoundError


class LedgerRecord(BaseModel):
    """Base for persisted records — camelCase aliases, frozen."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True,
    )


# ─── People ──────────────────────────────────────────────────────

class User(LedgerRecord):
    id: str
    name: str
    track: Track
    session_price: float = Field(default=25, ge=0)
    sessions_completed: int = Field(default=0, ge=0)
    is_verified: bool = False
    is_admin: bool = False
    invite_code: str | None = None
    university: str | None = None
    github_url: str | None = None
    figma_url: str | None = None
    profile_image: str | None = None


# ─── Proof artifacts ─────────────────────────────────────────────

class FailureReport(LedgerRecord):
    """Structured post-mortem attached to every project."""
    goal: str = ""
    approach: str = ""
    wrong: str = ""
    effect: str = ""
    lessons: str = ""
    redone: str = ""


class Comment(LedgerRecord):
    id: str
    user_id: str
    user_name: str
    text: str
    timestamp: int


class PeerReviewRequest(LedgerRecord):
    id: str
    reviewer_id: str
    reviewer_name: str
    status: ReviewStatus = ReviewStatus.PENDING


class Project(LedgerRecord):
    """A proof artifact. comments are newest-first."""
    id: str
    user_id: str
    user_name: str
    user_track: Track
    title: str
    problem: str = ""
    outcome_description: str = ""
    links: list[str] = Field(default_factory=list)
    hard_part: str = ""
    what_id_redo: str = ""
    what_failed: FailureReport = Field(default_factory=FailureReport)
    image_url: str | None = None
    timestamp: int
    comments: list[Comment] = Field(default_factory=list)
    original_project_id: str | None = None
    remix_reason: str | None = None
    peer_review_requests: list[PeerReviewRequest] = Field(default_factory=list)
    is_spotlight: bool = False


class ArtifactDraft(BaseModel):
    """Caller-supplied content for a new project (onboarding or transmit)."""
    title: str
    problem: str = ""
    outcome_description: str = ""
    links: list[str] = Field(default_factory=list)
    hard_part: str = ""
    what_id_redo: str = ""
    what_failed: FailureReport = Field(default_factory=FailureReport)
    image_url: str | None = None


# ─── Exchange ────────────────────────────────────────────────────

class MicroContract(LedgerRecord):
    """A paid micro-session listing. user_id is the seller."""
    id: str
    user_id: str
    user_name: str
    title: str
    description: str = ""
    price: float = Field(ge=0)
    delivery_days: int = Field(default=2, ge=0)
    status: ContractStatus = ContractStatus.AVAILABLE
    buyer_id: str | None = None
    buyer_name: str | None = None
    delivery_note: str | None = None

    @property
    def seller_id(self) -> str:
        return self.user_id


# ─── Messaging ───────────────────────────────────────────────────

class Message(LedgerRecord):
    id: str
    sender_id: str
    text: str
    timestamp: int


class Conversation(LedgerRecord):
    """Two-party chat. messages are oldest-first, append-only."""
    id: str
    participants: list[str]
    messages: list[Message] = Field(default_factory=list)


# ─── Document ────────────────────────────────────────────────────

class LedgerDocument(BaseModel):
    """Working copy of the whole store for one load/mutate/save cycle."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    users: list[User] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    contracts: list[MicroContract] = Field(default_factory=list)
    conversations: list[Conversation] = Field(default_factory=list)
    invites: list[str] = Field(default_factory=list)

    # Finders raise NotFoundError; index helpers return -1 when absent.

    def user_index(self, user_id: str) -> int:
        return _index_of(self.users, user_id)

    def project_index(self, project_id: str) -> int:
        return _index_of(self.projects, project_id)

    def contract_index(self, contract_id: str) -> int:
        return _index_of(self.contracts, contract_id)

    def conversation_index(self, conversation_id: str) -> int:
        return _index_of(self.conversations, conversation_id)

    def find_user(self, user_id: str) -> User:
        idx = self.user_index(user_id)
        if idx < 0:
            raise NotFoundError("User", user_id)
        return self.users[idx]

    def find_project(self, project_id: str) -> Project:
        idx = self.project_index(project_id)
        if idx < 0:
            raise NotFoundError("Project", project_id)
        return self.projects[idx]

    def find_contract(self, contract_id: str) -> MicroContract:
        idx = self.contract_index(contract_id)
        if idx < 0:
            raise NotFoundError("MicroContract", contract_id)
        return self.contracts[idx]

    def find_conversation(self, conversation_id: str) -> Conversation:
        idx = self.conversation_index(conversation_id)
        if idx < 0:
            raise NotFoundError("Conversation", conversation_id)
        return self.conversations[idx]

    def replace_user(self, user: User) -> None:
        self.users[self._require(self.user_index(user.id), "User", user.id)] = user

    def replace_project(self, project: Project) -> None:
        idx = self._require(self.project_index(project.id), "Project", project.id)
        self.projects[idx] = project

    def replace_contract(self, contract: MicroContract) -> None:
        idx = self._require(
            self.contract_index(contract.id), "MicroContract", contract.id,
        )
        self.contracts[idx] = contract

    # Inserts enforce id uniqueness and referential existence.

    def add_project(self, project: Project) -> Project:
        """Prepend project (newest first)."""
        if self.project_index(project.id) >= 0:
            raise DuplicateEntityError("Project", project.id)
        self.find_user(project.user_id)
        if project.original_project_id is not None:
            self.find_project(project.original_project_id)
        self.projects.insert(0, project)
        return project

    def add_contract(self, contract: MicroContract) -> MicroContract:
        """Prepend contract (newest first)."""
        if self.contract_index(contract.id) >= 0:
            raise DuplicateEntityError("MicroContract", contract.id)
        self.find_user(contract.user_id)
        self.contracts.insert(0, contract)
        return contract

    def add_message(
        self, conversation_id: str, participant_ids: list[str], message: Message,
    ) -> Conversation:
        """Append message (oldest first), creating the conversation on first use."""
        idx = self.conversation_index(conversation_id)
        if idx < 0:
            conversation = Conversation(
                id=conversation_id,
                participants=list(participant_ids),
                messages=[message],
            )
            self.conversations.append(conversation)
            return conversation
        current = self.conversations[idx]
        updated = current.model_copy(
            update={"messages": [*current.messages, message]},
        )
        self.conversations[idx] = updated
        return updated

    @staticmethod
    def _require(idx: int, resource_type: str, resource_id: str) -> int:
        if idx < 0:
            raise NotFoundError(resource_type, resource_id)
        return idx


def _index_of(records: list, record_id: str) -> int:
    for i, record in enumerate(records):
        if record.id == record_id:
            return i
    return -1
