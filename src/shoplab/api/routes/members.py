"""Members API endpoints.

POST /api/members - Register member
PUT /api/members/{member_id} - Rename member
GET /api/members - List member names
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from shoplab import errors
from shoplab.api.app import get_db_session
from shoplab.db.repo import DbSession
from shoplab.members import service
from shoplab.models.types import (
    CreateMemberRequest,
    CreateMemberResponse,
    MemberListResponse,
    MemberSummary,
    UpdateMemberRequest,
    UpdateMemberResponse,
)

router = APIRouter()


@router.post("/members", response_model=CreateMemberResponse)
def create_member(
    request: CreateMemberRequest,
    session: DbSession = Depends(get_db_session),
) -> CreateMemberResponse:
    """Register a member.

    Raises:
        HTTPException: 400 if name is blank, 409 if name is taken.
    """
    try:
        member_id = service.register(session, request.name)
    except errors.ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except errors.DuplicateNameError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e

    return CreateMemberResponse(id=member_id)


@router.put("/members/{member_id}", response_model=UpdateMemberResponse)
def update_member(
    member_id: int,
    request: UpdateMemberRequest,
    session: DbSession = Depends(get_db_session),
) -> UpdateMemberResponse:
    """Rename a member.

    Raises:
        HTTPException: 400 if name is blank, 404 if member not found.
    """
    try:
        member = service.update(session, member_id, request.name)
    except errors.ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except errors.NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return UpdateMemberResponse(id=member.member_id, name=member.name)


@router.get("/members", response_model=MemberListResponse)
def list_members(session: DbSession = Depends(get_db_session)) -> MemberListResponse:
    """List member names."""
    data = [MemberSummary(name=m.name) for m in service.list_members(session)]
    return MemberListResponse(response_info="Member Name", count=len(data), data=data)
