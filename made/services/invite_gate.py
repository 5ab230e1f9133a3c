"""Invite Gate — the set of codes that unlock signup.

Invariants:
    - Codes are normalized (stripped, upper-cased) before every check and write
    - add() is idempotent; remove() of an absent code changes nothing
    - Removing a code blocks future redemption only; users who already
      redeemed it keep their access and their recorded invite_code
"""

from made.core.invites import normalize_invite_code
from made.core.repository_protocols import LedgerRepository


class InviteGate:
    def __init__(self, store: LedgerRepository):
        self.store = store

    def is_valid(self, code: str | None) -> bool:
        if not code or not code.strip():
            return False
        return self.store.is_valid_invite(normalize_invite_code(code))

    def add(self, code: str) -> str:
        normalized = normalize_invite_code(code)
        self.store.add_invite(normalized)
        return normalized

    def remove(self, code: str) -> str:
        normalized = normalize_invite_code(code)
        self.store.remove_invite(normalized)
        return normalized

    def codes(self) -> list[str]:
        return self.store.list_invites()
