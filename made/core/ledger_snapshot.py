"""Ledger Snapshot — serialization / deserialization for LedgerDocument.

Invariants:
    - document_to_snapshot produces a JSON-safe dict with exactly the five
      collections users, projects, contracts, conversations, invites
    - Keys are camelCase; optional fields that are unset are omitted
    - document_from_snapshot accepts any earlier snapshot; missing
      collections fall back to empty lists
    - Only a missing snapshot (never saved) gets the seed invites

Design Decisions:
    - Kept apart from entities.py: entities define shape, this module
      defines the wire layout of the single persisted document
"""

from collections.abc import Iterable

from made.core.domain_types import DEFAULT_INVITE_CODES
from made.core.entities import LedgerDocument

COLLECTIONS: tuple[str, ...] = (
    "users", "projects", "contracts", "conversations", "invites",
)


def default_document(
    seed_invites: Iterable[str] = DEFAULT_INVITE_CODES,
) -> LedgerDocument:
    """Bootstrap value when no prior state exists."""
    return LedgerDocument(invites=list(dict.fromkeys(seed_invites)))


def document_to_snapshot(document: LedgerDocument) -> dict:
    """Serialize LedgerDocument to JSON-safe dict. Pure, no IO."""
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def document_from_snapshot(
    data: dict | None,
    seed_invites: Iterable[str] = DEFAULT_INVITE_CODES,
) -> LedgerDocument:
    """Reconstruct LedgerDocument from snapshot dict. Pure, no IO."""
    if data is None:
        return default_document(seed_invites)
    payload = {key: data.get(key) or [] for key in COLLECTIONS}
    return LedgerDocument.model_validate(payload)
