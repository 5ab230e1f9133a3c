"""Canonical Pairing — one Conversation per unordered pair of users.

Invariants:
    - conversation_id(a, b) == conversation_id(b, a)
    - Participants are stored sorted, the same order the id is built from
    - Participant ids never contain PAIRING_DELIMITER, so distinct pairs
      never share an id
    - has_completed_exchange is the messaging access policy: at least one
      COMPLETED contract with the two users on opposite sides
"""

from made.core.domain_types import PAIRING_DELIMITER, ContractStatus
from made.core.entities import MicroContract
from made.core.errors import LedgerValidationError


def canonical_participants(user_a: str, user_b: str) -> list[str]:
    if not user_a or not user_b:
        raise LedgerValidationError("Both participants are required", "participants")
    if user_a == user_b:
        raise LedgerValidationError(
            "A conversation needs two distinct participants", "participants",
        )
    for user_id in (user_a, user_b):
        if PAIRING_DELIMITER in user_id:
            raise LedgerValidationError(
                f"Participant id '{user_id}' contains '{PAIRING_DELIMITER}'",
                "participants",
            )
    return sorted([user_a, user_b])


def conversation_id(user_a: str, user_b: str) -> str:
    return PAIRING_DELIMITER.join(canonical_participants(user_a, user_b))


def has_completed_exchange(
    contracts: list[MicroContract], user_a: str, user_b: str,
) -> bool:
    for c in contracts:
        if c.status != ContractStatus.COMPLETED:
            continue
        if {c.user_id, c.buyer_id} == {user_a, user_b}:
            return True
    return False
