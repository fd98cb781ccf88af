"""
Campus Roster Backend — Teacher SQLAlchemy Model
=================================================

What:  ORM model for the `teacher` table.
Who:   Used by the teacher RosterService and by the sequence registry.
"""

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from roster.models.entity import Collection, SequencedEntity


class Teacher(SequencedEntity):
    """A teacher row. Payload fields are opaque to id management."""

    __tablename__ = "teacher"

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    subject: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    class_: Mapped[Optional[str]] = mapped_column("class", String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<Teacher(id={self.id}, name='{self.name}', subject='{self.subject}')>"


TEACHERS = Collection(name="teacher", model=Teacher, label="Teacher")
