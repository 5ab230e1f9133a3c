"""Exchange Engine — tests for the MicroContract lifecycle against a real store.

Tests cover:
    - List at 25, book, deliver "see attached", complete: COMPLETED and seller +1 session
    - Out-of-order actions leave the store untouched
    - Self-booking and outsider actions rejected
    - Listing revision before and after booking
    - contracts_for returns both sides of a user's exchanges
    - A raw status patch cannot stand in for booking, so no self-credited session
"""

import pytest

from made.core.domain_types import ContractStatus
from made.core.errors import InvalidTransitionError, LedgerValidationError, NotFoundError
from made.services.exchange_engine import ExchangeEngine


@pytest.fixture
def engine(populated_store):
    return ExchangeEngine(populated_store)


def test_full_exchange(engine, populated_store):
    listing = engine.list_contract("seller", "Code audit", 25)
    assert listing.status == ContractStatus.AVAILABLE
    assert listing.user_name == "Sam"
    assert listing.delivery_days == 2

    engine.book(listing.id, "buyer")
    engine.deliver(listing.id, "seller", "see attached")
    done = engine.complete(listing.id, "buyer")

    assert done.status == ContractStatus.COMPLETED
    assert done.buyer_id == "buyer"
    assert done.buyer_name == "Bea"
    assert done.delivery_note == "see attached"
    assert populated_store.get_user("seller").sessions_completed == 1
    assert populated_store.get_user("buyer").sessions_completed == 0


def test_skipping_delivery_changes_nothing(engine, populated_store):
    listing = engine.list_contract("seller", "Code audit", 25)
    engine.book(listing.id, "buyer")
    version = populated_store.version()

    with pytest.raises(InvalidTransitionError):
        engine.complete(listing.id, "buyer")

    assert populated_store.version() == version
    assert populated_store.get_contract(listing.id).status == ContractStatus.ESCROW
    assert populated_store.get_user("seller").sessions_completed == 0


def test_double_booking_rejected(engine):
    listing = engine.list_contract("seller", "Code audit", 25)
    engine.book(listing.id, "buyer")
    with pytest.raises(InvalidTransitionError):
        engine.book(listing.id, "outsider")


def test_seller_cannot_book_own_listing(engine, populated_store):
    listing = engine.list_contract("seller", "Code audit", 25)
    with pytest.raises(InvalidTransitionError):
        engine.book(listing.id, "seller")
    assert populated_store.get_contract(listing.id).buyer_id is None


def test_outsider_cannot_complete(engine):
    listing = engine.list_contract("seller", "Code audit", 25)
    engine.book(listing.id, "buyer")
    engine.deliver(listing.id, "seller", "done")
    with pytest.raises(InvalidTransitionError):
        engine.complete(listing.id, "outsider")


def test_unknown_seller_or_contract(engine):
    with pytest.raises(NotFoundError):
        engine.list_contract("ghost", "Code audit", 25)
    with pytest.raises(NotFoundError):
        engine.book("missing", "buyer")


def test_revise_listing(engine):
    listing = engine.list_contract("seller", "Code audit", 25)
    revised = engine.revise_listing(listing.id, "seller", price=40, delivery_days=1)
    assert revised.price == 40
    assert revised.delivery_days == 1

    engine.book(listing.id, "buyer")
    with pytest.raises(InvalidTransitionError):
        engine.revise_listing(listing.id, "seller", price=10)


def test_contracts_for_covers_both_sides(engine):
    sold = engine.list_contract("seller", "Code audit", 25)
    engine.list_contract("outsider", "Roadmap review", 10)
    engine.book(sold.id, "buyer")

    assert [c.id for c in engine.contracts_for("buyer")] == [sold.id]
    assert [c.id for c in engine.contracts_for("seller")] == [sold.id]
    assert len(engine.contracts_for("outsider")) == 1


def test_seller_cannot_credit_self_through_raw_patch(engine, populated_store):
    listing = engine.list_contract("seller", "Code audit", 25)
    with pytest.raises(LedgerValidationError):
        populated_store.patch_contract(listing.id, {"status": "In Escrow"})
    with pytest.raises(InvalidTransitionError):
        engine.deliver(listing.id, "seller", "x")
    with pytest.raises(InvalidTransitionError):
        engine.complete(listing.id, "seller")
    assert populated_store.get_user("seller").sessions_completed == 0
