"""Ledger Snapshot — tests for the persisted five-collection layout.

Tests cover:
    - A missing snapshot boots with the seed invites
    - Missing collections in a saved snapshot load as empty lists
    - Keys are camelCase and unset optionals are omitted
    - Snapshots written with camelCase keys load back into snake_case fields
    - Unknown keys from older documents are ignored
"""

from made.core.domain_types import DEFAULT_INVITE_CODES, ContractStatus
from made.core.entities import LedgerDocument
from made.core.ledger_snapshot import (
    COLLECTIONS,
    default_document,
    document_from_snapshot,
    document_to_snapshot,
)
from tests.factories import make_contract, make_project, make_user


def test_missing_snapshot_gets_seed_invites():
    doc = document_from_snapshot(None)
    assert doc.invites == list(DEFAULT_INVITE_CODES)
    assert doc.users == []


def test_custom_seed_invites_are_deduplicated():
    assert default_document(["A", "B", "A"]).invites == ["A", "B"]


def test_saved_snapshot_never_reseeded():
    doc = document_from_snapshot({"users": [], "invites": []})
    assert doc.invites == []


def test_missing_collections_load_empty():
    doc = document_from_snapshot({"invites": ["X"]})
    assert doc.projects == []
    assert doc.contracts == []
    assert doc.conversations == []
    assert doc.invites == ["X"]


def test_snapshot_uses_camel_case_and_drops_unset_optionals():
    seller = make_user("s", session_price=50)
    doc = LedgerDocument(
        users=[seller], contracts=[make_contract("c1", seller)], invites=["A"],
    )
    snapshot = document_to_snapshot(doc)

    assert set(snapshot) == set(COLLECTIONS)
    user = snapshot["users"][0]
    assert user["sessionPrice"] == 50
    assert user["sessionsCompleted"] == 0
    assert "githubUrl" not in user
    contract = snapshot["contracts"][0]
    assert contract["status"] == "Available"
    assert contract["deliveryDays"] == 2
    assert "buyerId" not in contract


def test_camel_case_snapshot_loads():
    data = {
        "users": [{
            "id": "u1", "name": "Ada", "track": "Engineer",
            "sessionPrice": 10, "sessionsCompleted": 4, "isVerified": True,
        }],
        "contracts": [{
            "id": "c1", "userId": "u1", "userName": "Ada", "title": "Audit",
            "description": "", "price": 10, "deliveryDays": 1,
            "status": "In Escrow", "buyerId": "u2", "buyerName": "Bo",
        }],
    }
    doc = document_from_snapshot(data)
    assert doc.users[0].sessions_completed == 4
    assert doc.users[0].is_verified
    assert doc.contracts[0].status == ContractStatus.ESCROW
    assert doc.contracts[0].buyer_id == "u2"


def test_unknown_keys_ignored():
    data = {"users": [{
        "id": "u1", "name": "Ada", "track": "Designer", "projects": [{"id": "legacy"}],
    }]}
    assert document_from_snapshot(data).users[0].id == "u1"


def test_project_survives_snapshot():
    owner = make_user("u1")
    project = make_project("p1", owner, problem="slow builds")
    restored = document_from_snapshot(
        document_to_snapshot(LedgerDocument(users=[owner], projects=[project])),
    )
    assert restored.projects[0] == project
