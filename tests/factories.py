"""Record factories for tests — minimal valid entities with overridable fields."""

from made.core.domain_types import ContractStatus, Track
from made.core.entities import Comment, MicroContract, Project, User


def make_user(user_id: str, name: str | None = None, **fields) -> User:
    return User(
        id=user_id,
        name=name or user_id.capitalize(),
        track=fields.pop("track", Track.ENGINEER),
        **fields,
    )


def make_project(project_id: str, owner: User, **fields) -> Project:
    return Project(
        id=project_id,
        user_id=owner.id,
        user_name=owner.name,
        user_track=owner.track,
        title=fields.pop("title", f"Project {project_id}"),
        links=fields.pop("links", ["https://example.com"]),
        timestamp=fields.pop("timestamp", 1_700_000_000_000),
        **fields,
    )


def make_comment(comment_id: str, author: User, text: str = "Solid work") -> Comment:
    return Comment(
        id=comment_id,
        user_id=author.id,
        user_name=author.name,
        text=text,
        timestamp=1_700_000_000_000,
    )


def make_contract(contract_id: str, seller: User, **fields) -> MicroContract:
    return MicroContract(
        id=contract_id,
        user_id=seller.id,
        user_name=seller.name,
        title=fields.pop("title", "30 min code audit"),
        price=fields.pop("price", 25),
        status=fields.pop("status", ContractStatus.AVAILABLE),
        **fields,
    )
