"""Exchange Enforcement — the MicroContract state machine.

    AVAILABLE --book(buyer)--> ESCROW --deliver(seller, note)--> DELIVERED
        --complete(seller | buyer)--> COMPLETED

Invariants:
    - All functions are PURE: take a contract, return a new contract or raise
    - Every transition checks current status first, then the actor
    - No transition regresses and none is skipped
    - buyer_id / buyer_name are set exactly once, by book, and never cleared
    - deliver and complete refuse a contract with no buyer
    - Raw patches cannot reach COMPLETED; that step credits the seller
    - title, description, price and delivery_days are editable only while AVAILABLE

Design Decisions:
    - Raise typed errors rather than return error dicts: callers must not be
      able to ignore a rejected transition
    - The seller's sessions_completed side effect of complete() lives in the
      exchange service, which applies it in the same store cycle
"""

from made.core.domain_types import ContractStatus
from made.core.entities import MicroContract, User
from made.core.errors import (
    ErrorContext,
    InvalidTransitionError,
    LedgerValidationError,
)
from made.core.validation import build_record, require_text


NEXT_STATUS: dict[ContractStatus, ContractStatus] = {
    ContractStatus.AVAILABLE: ContractStatus.ESCROW,
    ContractStatus.ESCROW: ContractStatus.DELIVERED,
    ContractStatus.DELIVERED: ContractStatus.COMPLETED,
}

EDITABLE_LISTING_FIELDS: frozenset[str] = frozenset(
    {"title", "description", "price", "delivery_days"},
)

BUYER_FIELDS: tuple[str, ...] = ("buyer_id", "buyer_name")


def _reject(contract: MicroContract, action: str, reason: str, actor_id: str | None = None):
    raise InvalidTransitionError(
        f"Cannot {action} contract '{contract.id}': {reason}",
        action=action,
        current_status=contract.status.value,
        context=ErrorContext(user_id=actor_id, contract_id=contract.id),
    )


def check_status(contract: MicroContract, expected: ContractStatus, action: str) -> None:
    if contract.status != expected:
        _reject(
            contract, action,
            f"status is '{contract.status.value}', expected '{expected.value}'",
        )


def check_booked(contract: MicroContract, action: str) -> None:
    if contract.buyer_id is None:
        _reject(contract, action, "contract has no buyer")


def book(contract: MicroContract, buyer: User) -> MicroContract:
    """AVAILABLE -> ESCROW. Buyer commits to the listed price."""
    check_status(contract, ContractStatus.AVAILABLE, "book")
    if buyer.id == contract.user_id:
        _reject(contract, "book", "seller cannot book their own listing", buyer.id)
    return contract.model_copy(update={
        "status": NEXT_STATUS[contract.status],
        "buyer_id": buyer.id,
        "buyer_name": buyer.name,
    })


def deliver(contract: MicroContract, seller_id: str, note: str) -> MicroContract:
    """ESCROW -> DELIVERED. Seller attaches a delivery note, stored verbatim."""
    check_status(contract, ContractStatus.ESCROW, "deliver")
    check_booked(contract, "deliver")
    if seller_id != contract.user_id:
        _reject(contract, "deliver", "only the seller can deliver", seller_id)
    require_text(note, "delivery_note")
    return contract.model_copy(update={
        "status": NEXT_STATUS[contract.status],
        "delivery_note": note,
    })


def complete(contract: MicroContract, actor_id: str) -> MicroContract:
    """DELIVERED -> COMPLETED. Either party confirms receipt."""
    check_status(contract, ContractStatus.DELIVERED, "complete")
    check_booked(contract, "complete")
    if actor_id not in (contract.user_id, contract.buyer_id):
        _reject(contract, "complete", "only a party to the contract can complete it", actor_id)
    return contract.model_copy(update={"status": NEXT_STATUS[contract.status]})


def revise_listing(
    contract: MicroContract, seller_id: str, updates: dict,
) -> MicroContract:
    """Edit listing terms. Frozen once the contract leaves AVAILABLE."""
    unknown = set(updates) - EDITABLE_LISTING_FIELDS
    if unknown:
        raise LedgerValidationError(
            f"Fields not editable on a listing: {', '.join(sorted(unknown))}",
            sorted(unknown)[0],
        )
    check_status(contract, ContractStatus.AVAILABLE, "revise")
    if seller_id != contract.user_id:
        _reject(contract, "revise", "only the seller can revise a listing", seller_id)
    if "title" in updates:
        updates = {**updates, "title": require_text(updates["title"], "title")}
    return build_record(MicroContract, {**contract.model_dump(), **updates})


def check_patch(contract: MicroContract, changes: dict) -> None:
    """Guard for raw field patches applied by the store.

    A patch may move status one step, to ESCROW or DELIVERED only; COMPLETED
    is reached through complete() so the seller is credited. Entering ESCROW
    needs both buyer fields (buyer distinct from seller), entering DELIVERED
    needs a delivery note. Listing terms are frozen outside AVAILABLE and
    buyer fields once set are never cleared or replaced.
    """
    new_status = contract.status
    if "status" in changes:
        new_status = _parse_status(changes["status"])
    if new_status != contract.status:
        if NEXT_STATUS.get(contract.status) != new_status:
            _reject(
                contract, "patch",
                f"'{contract.status.value}' cannot move to '{new_status.value}'",
            )
        if new_status == ContractStatus.COMPLETED:
            _reject(contract, "patch", "completion must go through complete()")

    frozen = EDITABLE_LISTING_FIELDS & {
        k for k, v in changes.items() if getattr(contract, k) != v
    }
    if frozen and contract.status != ContractStatus.AVAILABLE:
        _reject(
            contract, "patch",
            f"listing terms are frozen once booked ({', '.join(sorted(frozen))})",
        )

    for name in BUYER_FIELDS:
        current = getattr(contract, name)
        if name in changes and current is not None and changes[name] != current:
            raise LedgerValidationError(
                f"{name} is already set on contract '{contract.id}'", name,
            )
        if (
            changes.get(name) is not None
            and current is None
            and new_status != ContractStatus.ESCROW
        ):
            raise LedgerValidationError(
                f"{name} can only be set when contract '{contract.id}' is booked", name,
            )

    if new_status == ContractStatus.ESCROW and contract.status == ContractStatus.AVAILABLE:
        buyer_id = changes.get("buyer_id")
        if not buyer_id or not changes.get("buyer_name"):
            raise LedgerValidationError(
                f"Booking contract '{contract.id}' needs buyer_id and buyer_name",
                "buyer_id",
            )
        if buyer_id == contract.user_id:
            _reject(contract, "patch", "seller cannot book their own listing", buyer_id)

    if new_status == ContractStatus.DELIVERED and contract.status == ContractStatus.ESCROW:
        check_booked(contract, "patch")
        require_text(changes.get("delivery_note", contract.delivery_note), "delivery_note")


def _parse_status(value) -> ContractStatus:
    try:
        return ContractStatus(value)
    except ValueError as e:
        raise LedgerValidationError(f"Unknown contract status '{value}'", "status") from e
