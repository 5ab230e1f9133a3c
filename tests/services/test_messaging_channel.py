"""Messaging Channel — tests for the exchange-gated two-party chat."""

import pytest

from made.core.errors import LedgerValidationError, MessagingLockedError, NotFoundError
from made.services.exchange_engine import ExchangeEngine
from made.services.messaging_channel import MessagingChannel


@pytest.fixture
def channel(populated_store):
    return MessagingChannel(populated_store)


@pytest.fixture
def completed_exchange(populated_store):
    engine = ExchangeEngine(populated_store)
    listing = engine.list_contract("seller", "Code audit", 25)
    engine.book(listing.id, "buyer")
    engine.deliver(listing.id, "seller", "see attached")
    return engine.complete(listing.id, "buyer")


def test_locked_without_completed_exchange(channel, populated_store):
    version = populated_store.version()
    assert not channel.can_message("seller", "buyer")
    with pytest.raises(MessagingLockedError):
        channel.send("seller", "buyer", "hello")
    with pytest.raises(MessagingLockedError):
        channel.history("buyer", "seller")
    assert populated_store.version() == version
    assert populated_store.list_conversations() == []


def test_unlocked_after_completion(channel, completed_exchange, populated_store):
    assert channel.can_message("buyer", "seller")
    assert channel.history("seller", "buyer") == []

    channel.send("buyer", "seller", "thanks!")
    channel.send("seller", "buyer", "any time")

    conversations = populated_store.list_conversations()
    assert len(conversations) == 1
    assert conversations[0].id == "buyer:seller"
    assert conversations[0].participants == ["buyer", "seller"]
    assert [m.text for m in channel.history("seller", "buyer")] == ["thanks!", "any time"]


def test_other_pairs_stay_locked(channel, completed_exchange):
    with pytest.raises(MessagingLockedError):
        channel.send("outsider", "seller", "hi")


def test_send_validation(channel, completed_exchange):
    with pytest.raises(LedgerValidationError):
        channel.send("buyer", "seller", "   ")
    with pytest.raises(LedgerValidationError):
        channel.send("buyer", "buyer", "me")
    with pytest.raises(NotFoundError):
        channel.send("buyer", "ghost", "hello")
