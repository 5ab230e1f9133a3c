"""Invite Gate — tests for code normalization and redemption-set edits."""

import pytest

from made.core.entities import ArtifactDraft
from made.core.errors import InvalidInviteError
from made.services.invite_gate import InviteGate
from made.services.onboarding import OnboardingService


@pytest.fixture
def gate(store):
    return InviteGate(store)


def test_seed_codes_are_valid_case_insensitively(gate):
    assert gate.is_valid("AUC-2024")
    assert gate.is_valid("  beta-made ")
    assert not gate.is_valid("NOPE")
    assert not gate.is_valid("")
    assert not gate.is_valid(None)


def test_add_normalizes_and_is_idempotent(gate):
    assert gate.add(" cohort-7 ") == "COHORT-7"
    gate.add("COHORT-7")
    assert gate.codes().count("COHORT-7") == 1
    assert gate.is_valid("cohort-7")


def test_removing_a_code_keeps_existing_members(gate, store):
    onboarding = OnboardingService(store)
    user, _ = onboarding.onboard(
        "ship-fast", "Ada", "Engineer", 25,
        ArtifactDraft(title="Compiler", links=["https://github.com/ada/c"]),
    )

    assert gate.remove("SHIP-FAST") == "SHIP-FAST"
    assert not gate.is_valid("SHIP-FAST")
    assert store.get_user(user.id).invite_code == "SHIP-FAST"

    with pytest.raises(InvalidInviteError):
        onboarding.onboard(
            "SHIP-FAST", "Bo", "Designer", 10,
            ArtifactDraft(title="Poster", links=["https://figma.com/x"]),
        )
