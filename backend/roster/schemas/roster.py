"""
Campus Roster Backend — Pydantic Request/Response Schemas
==========================================================

What:  Pydantic models defining the API contract with the frontend.
How:   FastAPI uses these models to parse request bodies, serialize
       responses, and generate the OpenAPI document.

Wire names vs attribute names:
    The frontend sends `rollNo` and `class`, and reads rows back with the
    table's column names (`roll_number`, `class`). `class` cannot be a Python
    attribute, so schemas use `class_` internally with aliases on both sides.

Request bodies are deliberately permissive: every field is optional and
numbers are accepted where strings are expected. Missing fields are stored
as NULL.
"""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class EntityCreate(BaseModel):
    """Common base for create bodies; dumps to ORM attribute names."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    def to_fields(self) -> Dict[str, Any]:
        """Payload columns keyed by ORM attribute name."""
        return self.model_dump()


class StudentCreate(EntityCreate):
    """Body of POST /addstudent."""

    name: Optional[str] = Field(default=None, description="Student name")
    roll_number: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("rollNo", "roll_number"),
        description="Roll number (sent as `rollNo`)",
    )
    class_: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("class", "class_"),
        description="Class the student belongs to (sent as `class`)",
    )


class TeacherCreate(EntityCreate):
    """Body of POST /addteacher."""

    name: Optional[str] = Field(default=None, description="Teacher name")
    subject: Optional[str] = Field(default=None, description="Subject taught")
    class_: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("class", "class_"),
        description="Class the teacher is assigned to (sent as `class`)",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class StudentRow(BaseModel):
    """One row of GET /student, keyed by column name."""

    id: int = Field(description="Dense 1-based id; shifts down when an earlier row is deleted")
    name: Optional[str] = None
    roll_number: Optional[str] = None
    class_: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("class_", "class"),
        serialization_alias="class",
    )

    model_config = ConfigDict(from_attributes=True)


class TeacherRow(BaseModel):
    """One row of GET /teacher, keyed by column name."""

    id: int = Field(description="Dense 1-based id; shifts down when an earlier row is deleted")
    name: Optional[str] = None
    subject: Optional[str] = None
    class_: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("class_", "class"),
        serialization_alias="class",
    )

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """Human-readable outcome of a mutation."""

    message: str = Field(description="Human-readable success message")


class CreatedResponse(MessageResponse):
    """Outcome of a create, including the id the row was stored under."""

    id: int = Field(description="Id assigned to the new row")


class LandingResponse(BaseModel):
    """Body of GET / — a greeting plus the current student list."""

    message: str = Field(default="From Backend!!!")
    student_data: List[StudentRow] = Field(serialization_alias="studentData")


# ══════════════════════════════════════════════════════════════════════════
# Error & Probe Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Uniform failure body.

    Example:
        {"error": "Insert student failed", "request_id": "a1b2c3d4"}
    """

    error: str = Field(description="Human-readable description of the failed operation")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Liveness probe body; never inspects the database."""

    status: str = Field(default="ok")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since the process started")


class ReadinessResponse(BaseModel):
    """Readiness probe body: `ready` or `not ready`."""

    status: str
