"""Invite Codes — normalization shared by the gate and onboarding.

Invariants:
    - Codes are compared upper-cased and stripped
    - Empty codes are a validation error, never a membership miss
"""

from made.core.validation import require_text


def normalize_invite_code(code: str | None) -> str:
    return require_text(code, "invite_code").upper()
