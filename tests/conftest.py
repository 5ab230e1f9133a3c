"""Root conftest — shared test configuration and ledger fixtures.

Invariants:
    - Every test that touches storage gets a fresh file-backed SQLite ledger
      under tmp_path
    - Environment pinned so tests never read a developer .env credential
"""

import os

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_made_ledger.db")
os.environ.setdefault("LOG_FORMAT", "text")

from made.core.domain_types import Track  # noqa: E402
from made.infrastructure.database import DatabaseSessionManager  # noqa: E402
from made.infrastructure.ledger_store import LedgerStore  # noqa: E402
from tests.factories import make_user  # noqa: E402


@pytest.fixture
def db(tmp_path):
    manager = DatabaseSessionManager(f"sqlite:///{tmp_path / 'ledger.db'}")
    manager.create_schema()
    yield manager
    manager.dispose()


@pytest.fixture
def store(db):
    return LedgerStore(db)


@pytest.fixture
def seller():
    return make_user("seller", "Sam")


@pytest.fixture
def buyer():
    return make_user("buyer", "Bea", track=Track.DESIGNER)


@pytest.fixture
def outsider():
    return make_user("outsider", "Oz", track=Track.PRODUCT)


@pytest.fixture
def populated_store(store, seller, buyer, outsider):
    """Store holding three users and nothing else."""
    for user in (seller, buyer, outsider):
        store.upsert_user(user)
    return store
