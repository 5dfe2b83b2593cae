"""Member registration and lookup.

Domain logic is pure - database operations go through repo.
"""

from __future__ import annotations

import logging

from shoplab.db import repo
from shoplab.db.repo import DbSession
from shoplab.db.session import transaction
from shoplab.errors import DuplicateNameError, NotFoundError, ValidationError
from shoplab.models.domain import Address, MemberEntity

logger = logging.getLogger(__name__)


def _require_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("Member name must not be empty")
    return name


def register(session: DbSession, name: str, address: Address | None = None) -> int:
    """Register a new member.

    The duplicate check is a read followed by an insert with no lock and
    no unique constraint behind it, so two concurrent registrations of
    the same name can both succeed.

    Args:
        session: Database session.
        name: Member name (non-empty).
        address: Optional home address.

    Returns:
        New member ID.

    Raises:
        ValidationError: If name is empty.
        DuplicateNameError: If a member with this name already exists.
    """
    name = _require_name(name)

    with transaction(session):
        if repo.find_members_by_name(session, name):
            raise DuplicateNameError(name)
        member = repo.create_member(
            session, MemberEntity(member_id=None, name=name, address=address)
        )

    logger.info(f"Registered member {member.member_id} ({name})")
    return member.member_id


def update(session: DbSession, member_id: int, name: str) -> MemberEntity:
    """Rename a member.

    Returns:
        The updated member.

    Raises:
        ValidationError: If name is empty.
        NotFoundError: If no member has this ID.
    """
    name = _require_name(name)

    with transaction(session):
        if not repo.update_member_name(session, member_id, name):
            raise NotFoundError("Member", member_id)

    logger.info(f"Renamed member {member_id} to {name}")
    return repo.get_member(session, member_id)


def list_members(session: DbSession) -> list[MemberEntity]:
    """All members in registration order."""
    return repo.get_all_members(session)


def find_member(session: DbSession, member_id: int) -> MemberEntity | None:
    """Member by ID, or None."""
    return repo.get_member(session, member_id)
