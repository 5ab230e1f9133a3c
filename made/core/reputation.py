"""Reputation Scorer — bounded trust signal derived from a user's activity.

Invariants:
    - PURE: depends only on the user record and the full project collection
    - Result is an int in [0, MAX_REPUTATION]
    - Monotonically non-decreasing in each of the four inputs
    - Recomputed on every display; nothing is cached or stored

Formula:
    raw = projects*1 + sessions*3 + comments*2 + remixes_received*2
    score = min(100, raw)
"""

from dataclasses import dataclass

from made.core.domain_types import (
    COMMENT_WEIGHT,
    MAX_REPUTATION,
    PROJECT_WEIGHT,
    REMIX_WEIGHT,
    SESSION_WEIGHT,
    VERIFIED_PROJECT_THRESHOLD,
)
from made.core.entities import Project, User


@dataclass(frozen=True)
class ReputationBreakdown:
    """The four scorer inputs for one user."""
    projects: int = 0
    sessions: int = 0
    comments: int = 0
    remixes_received: int = 0

    @property
    def raw(self) -> int:
        return (
            self.projects * PROJECT_WEIGHT
            + self.sessions * SESSION_WEIGHT
            + self.comments * COMMENT_WEIGHT
            + self.remixes_received * REMIX_WEIGHT
        )

    @property
    def score(self) -> int:
        return max(0, min(MAX_REPUTATION, self.raw))


def reputation_breakdown(
    user_id: str, sessions_completed: int, all_projects: list[Project],
) -> ReputationBreakdown:
    """Count the scorer inputs across the whole project collection."""
    owner_by_project = {p.id: p.user_id for p in all_projects}
    own = sum(1 for p in all_projects if p.user_id == user_id)
    comments = sum(
        1 for p in all_projects for c in p.comments if c.user_id == user_id
    )
    # A remix of one's own project still counts as received.
    remixes = sum(
        1 for p in all_projects
        if p.original_project_id
        and owner_by_project.get(p.original_project_id) == user_id
    )
    return ReputationBreakdown(
        projects=own,
        sessions=sessions_completed or 0,
        comments=comments,
        remixes_received=remixes,
    )


def score(user: User, all_projects: list[Project]) -> int:
    """Reputation score for user, in [0, 100]."""
    return reputation_breakdown(
        user.id, user.sessions_completed, all_projects,
    ).score


def looks_verified(user_id: str, all_projects: list[Project]) -> bool:
    """Display heuristic for members whose record carries no verification flag."""
    owned = sum(1 for p in all_projects if p.user_id == user_id)
    return owned >= VERIFIED_PROJECT_THRESHOLD
