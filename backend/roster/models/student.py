"""
Campus Roster Backend — Student SQLAlchemy Model
=================================================

What:  ORM model for the `student` table.
Who:   Used by the student RosterService and by the sequence registry.

Columns:
    - id: dense rank assigned by the sequence registry (see models/entity.py)
    - name, roll_number, class: free-form payload, stored as sent (nullable)

`class` is a Python keyword, so the attribute is `class_` mapped onto the
`class` column.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from roster.models.entity import Collection, SequencedEntity


class Student(SequencedEntity):
    """A student row. Payload fields are opaque to id management."""

    __tablename__ = "student"

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    roll_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    class_: Mapped[Optional[str]] = mapped_column("class", String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name='{self.name}')>"


STUDENTS = Collection(name="student", model=Student, label="Student")
