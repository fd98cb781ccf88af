"""
Campus Roster Backend — Student Route Handlers
===============================================

What:  GET /student (list), POST /addstudent (create), DELETE /student/{id}.
How:   Parses the request, delegates to the student RosterService, returns JSON.
Who:   Called by the frontend's student table and forms.

All three routes are mounted under API_PREFIX (see main.py).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db_session
from roster.schemas.roster import (
    CreatedResponse,
    ErrorResponse,
    MessageResponse,
    StudentCreate,
    StudentRow,
)
from roster.services.roster_service import student_service

router = APIRouter(tags=["Students"])


@router.get(
    "/student",
    response_model=List[StudentRow],
    responses={500: {"description": "Store unavailable", "model": ErrorResponse}},
    summary="List all students",
)
async def list_students(db: AsyncSession = Depends(get_db_session)) -> List[StudentRow]:
    """Return every student ordered by id."""
    rows = await student_service.list_entities(db)
    return [StudentRow.model_validate(row) for row in rows]


@router.post(
    "/addstudent",
    response_model=CreatedResponse,
    responses={500: {"description": "Insert failed", "model": ErrorResponse}},
    summary="Add a student",
    description=(
        "Stores the student under the next free id (current maximum + 1). "
        "Fields are optional and stored as sent."
    ),
)
async def add_student(
    body: StudentCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CreatedResponse:
    return await student_service.create_entity(db, body.to_fields())


@router.delete(
    "/student/{student_id}",
    response_model=MessageResponse,
    responses={500: {"description": "Delete failed", "model": ErrorResponse}},
    summary="Delete a student and renumber the rest",
    description=(
        "Removes the student, then renumbers the remaining students to 1..N "
        "in their existing order. Every student after the removed one moves "
        "down by one id. Deleting an unknown id succeeds without changes."
    ),
)
async def delete_student(
    student_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await student_service.delete_entity(db, student_id)
