"""
Campus Roster Backend — Teacher Route Handlers
===============================================

What:  GET /teacher (list), POST /addteacher (create), DELETE /teacher/{id}.
How:   Same shape as the student routes, backed by the teacher RosterService.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db_session
from roster.schemas.roster import (
    CreatedResponse,
    ErrorResponse,
    MessageResponse,
    TeacherCreate,
    TeacherRow,
)
from roster.services.roster_service import teacher_service

router = APIRouter(tags=["Teachers"])


@router.get(
    "/teacher",
    response_model=List[TeacherRow],
    responses={500: {"description": "Store unavailable", "model": ErrorResponse}},
    summary="List all teachers",
)
async def list_teachers(db: AsyncSession = Depends(get_db_session)) -> List[TeacherRow]:
    rows = await teacher_service.list_entities(db)
    return [TeacherRow.model_validate(row) for row in rows]


@router.post(
    "/addteacher",
    response_model=CreatedResponse,
    responses={500: {"description": "Insert failed", "model": ErrorResponse}},
    summary="Add a teacher",
)
async def add_teacher(
    body: TeacherCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CreatedResponse:
    return await teacher_service.create_entity(db, body.to_fields())


@router.delete(
    "/teacher/{teacher_id}",
    response_model=MessageResponse,
    responses={500: {"description": "Delete failed", "model": ErrorResponse}},
    summary="Delete a teacher and renumber the rest",
)
async def delete_teacher(
    teacher_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """Remove a teacher; later teachers shift down one id."""
    return await teacher_service.delete_entity(db, teacher_id)
