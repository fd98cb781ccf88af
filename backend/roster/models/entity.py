"""
Campus Roster Backend — Sequenced Entity Base
==============================================

What:  Abstract ORM base for rows whose primary key is a dense 1..N sequence,
       plus the `Collection` descriptor the services operate on.
How:   `SequencedEntity` declares the integer `id` column with no database
       autoincrement; ids are handed out by the sequence registry instead.

Id Invariant:
    When no mutation is in flight, a collection of N rows holds exactly the
    ids {1, ..., N}. New rows take max(id) + 1; removing a row renumbers the
    rest so the invariant holds again. A client-held id can therefore point
    at a different row after any delete.
"""

from dataclasses import dataclass
from typing import Type

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from roster.database import Base

# Upper bound of the 32-bit INTEGER id column. No stored row can carry a
# larger id, and asyncpg refuses to encode one as a bind parameter.
MAX_ENTITY_ID = 2**31 - 1


class SequencedEntity(Base):
    """Abstract base: a row identified by its rank in the collection."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
        comment="Dense 1-based rank within the collection",
    )


@dataclass(frozen=True)
class Collection:
    """
    A named id namespace backed by one table.

    Attributes:
        name:   Collection name as it appears in URLs and logs ("student")
        model:  ORM class mapped to the collection's table
        label:  Capitalized name used in response messages ("Student")
    """

    name: str
    model: Type[SequencedEntity]
    label: str
