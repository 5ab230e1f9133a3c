"""Boundary Validation — non-empty checks applied at point of use.

Invariants:
    - Returned text is stripped; whitespace-only input is rejected
    - Raises LedgerValidationError naming the offending field
    - pydantic ValidationError never escapes: build_record maps it to
      LedgerValidationError with the first failing field
"""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from made.core.errors import LedgerValidationError

RecordT = TypeVar("RecordT", bound=BaseModel)


def require_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise LedgerValidationError(f"{field} cannot be empty", field)
    return text


def require_links(links: list[str] | None, field: str = "links") -> list[str]:
    """At least one non-empty link; blanks dropped, order kept."""
    cleaned = [link.strip() for link in links or [] if link and link.strip()]
    if not cleaned:
        raise LedgerValidationError("At least one link is required", field)
    return cleaned


def build_record(model: type[RecordT], data: dict) -> RecordT:
    """Validate data into model, reporting failures as LedgerValidationError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"]) or model.__name__
        raise LedgerValidationError(f"{field}: {first['msg']}", field) from e
