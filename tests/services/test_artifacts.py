"""Artifacts — tests for transmit, remix, comment and peer review requests."""

import pytest

from made.core.entities import ArtifactDraft
from made.core.errors import InvalidTransitionError, LedgerValidationError, NotFoundError
from made.core.reputation import score
from made.services.artifacts import ArtifactService


@pytest.fixture
def artifacts(populated_store):
    return ArtifactService(populated_store)


@pytest.fixture
def project(artifacts):
    return artifacts.transmit(
        "seller", ArtifactDraft(title="Edge cache", links=["https://github.com/s/cache"]),
    )


def test_transmit_snapshots_owner(project):
    assert project.user_id == "seller"
    assert project.user_name == "Sam"
    assert project.comments == []


def test_transmit_requires_title_and_link(artifacts):
    with pytest.raises(LedgerValidationError):
        artifacts.transmit("seller", ArtifactDraft(title=" ", links=["https://x"]))
    with pytest.raises(LedgerValidationError):
        artifacts.transmit("seller", ArtifactDraft(title="Cache"))
    with pytest.raises(NotFoundError):
        artifacts.transmit("ghost", ArtifactDraft(title="Cache", links=["https://x"]))


def test_remix_copies_content_and_credits_original(artifacts, populated_store, project):
    artifacts.comment(project.id, "outsider", "nice")
    remix = artifacts.remix(project.id, "buyer", "Adapted for mobile")

    assert remix.id != project.id
    assert remix.user_id == "buyer"
    assert remix.user_name == "Bea"
    assert remix.title == project.title
    assert remix.original_project_id == project.id
    assert remix.remix_reason == "Adapted for mobile"
    assert remix.comments == []
    assert [p.id for p in populated_store.list_projects()] == [remix.id, project.id]

    seller = populated_store.get_user("seller")
    assert score(seller, populated_store.list_projects()) == 1 + 2


def test_remix_of_missing_project(artifacts):
    with pytest.raises(NotFoundError):
        artifacts.remix("ghost", "buyer", "why not")


def test_comments_are_newest_first(artifacts, populated_store, project):
    artifacts.comment(project.id, "buyer", "first")
    artifacts.comment(project.id, "outsider", "second")
    comments = populated_store.get_project(project.id).comments
    assert [c.text for c in comments] == ["second", "first"]
    assert comments[0].user_name == "Oz"


def test_comment_on_missing_project(artifacts, populated_store):
    version = populated_store.version()
    with pytest.raises(NotFoundError):
        artifacts.comment("ghost", "buyer", "hello")
    assert populated_store.version() == version


def test_request_review(artifacts, populated_store, project):
    request = artifacts.request_review(project.id, "seller", "buyer")
    assert request.reviewer_name == "Bea"
    assert request.status.value == "pending"
    assert populated_store.get_project(project.id).peer_review_requests == [request]


def test_request_review_rules(artifacts, project):
    with pytest.raises(InvalidTransitionError):
        artifacts.request_review(project.id, "buyer", "outsider")
    with pytest.raises(LedgerValidationError):
        artifacts.request_review(project.id, "seller", "seller")
    with pytest.raises(NotFoundError):
        artifacts.request_review(project.id, "seller", "ghost")
