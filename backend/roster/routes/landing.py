"""
Campus Roster Backend — Landing Route
======================================

What:  GET / — greeting plus the current student list.
Who:   Used by the frontend (and by humans with curl) as a quick end-to-end
       check that the backend can read from the database.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db_session
from roster.exceptions import StoreUnavailableError
from roster.schemas.roster import ErrorResponse, LandingResponse, StudentRow
from roster.services.roster_service import student_service

router = APIRouter(tags=["Landing"])


@router.get(
    "/",
    response_model=LandingResponse,
    response_model_by_alias=True,
    responses={500: {"description": "Store unavailable", "model": ErrorResponse}},
    summary="Backend greeting with student data",
)
async def landing(db: AsyncSession = Depends(get_db_session)) -> LandingResponse:
    try:
        rows = await student_service.list_entities(db)
    except StoreUnavailableError as e:
        raise StoreUnavailableError(
            message="Error fetching student data",
            collection="student",
            context=e.context,
        ) from e

    return LandingResponse(
        student_data=[StudentRow.model_validate(row) for row in rows],
    )
