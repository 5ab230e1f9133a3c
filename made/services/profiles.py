"""Profiles — read-only view of a member with their live reputation score.

Invariants:
    - Never writes; the score is recomputed from the full project collection on each call
    - verified is the stored flag, or the display heuristic for members
      with enough projects
"""

from dataclasses import dataclass

from made.core.entities import MicroContract, Project, User
from made.core.reputation import ReputationBreakdown, looks_verified, reputation_breakdown
from made.core.repository_protocols import LedgerRepository


@dataclass(frozen=True)
class ProfileSummary:
    user: User
    projects: list[Project]
    contracts: list[MicroContract]
    reputation: ReputationBreakdown
    verified: bool

    @property
    def score(self) -> int:
        return self.reputation.score


class ProfileReader:
    def __init__(self, store: LedgerRepository):
        self.store = store

    def summary(self, user_id: str) -> ProfileSummary:
        doc = self.store.load()
        user = doc.find_user(user_id)
        breakdown = reputation_breakdown(
            user.id, user.sessions_completed, doc.projects,
        )
        return ProfileSummary(
            user=user,
            projects=[p for p in doc.projects if p.user_id == user.id],
            contracts=[c for c in doc.contracts if c.user_id == user.id],
            reputation=breakdown,
            verified=user.is_verified or looks_verified(user.id, doc.projects),
        )

    def directory(self) -> list[tuple[str, str]]:
        """(id, name) for every known member, first occurrence wins."""
        doc = self.store.load()
        seen: dict[str, str] = {}
        for project in doc.projects:
            seen.setdefault(project.user_id, project.user_name)
        for user in doc.users:
            seen.setdefault(user.id, user.name)
        return list(seen.items())
