"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - Enum values are the persisted strings (documents written by older
      clients load unchanged)

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class Track(str, Enum):
    """Discipline a member builds in."""
    ENGINEER = "Engineer"
    DESIGNER = "Designer"
    PRODUCT = "Product"
    OTHER = "Other"


class ContractStatus(str, Enum):
    """MicroContract lifecycle. Order of declaration is the only legal path."""
    AVAILABLE = "Available"
    ESCROW = "In Escrow"
    DELIVERED = "Delivered"
    COMPLETED = "Completed"


class ReviewStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_INVITE_CODES: tuple[str, ...] = (
    "AUC-2024", "GUC-ELITE", "SHIP-FAST", "BETA-MADE",
)

# Single character that participant ids may not contain.
PAIRING_DELIMITER = ":"

SESSION_PRICE_TIERS: tuple[int, ...] = (10, 25, 50)

# Reputation weights
PROJECT_WEIGHT = 1
SESSION_WEIGHT = 3
COMMENT_WEIGHT = 2
REMIX_WEIGHT = 2
MAX_REPUTATION = 100

VERIFIED_PROJECT_THRESHOLD = 3
