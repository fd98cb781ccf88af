"""
Campus Roster Backend — Roster Service (Collection CRUD)
=========================================================

What:  List, create and delete for one collection (students or teachers).
How:   Reads rows directly; creation and deletion go through the sequence
       registry so the collection's ids stay dense.
Who:   Called by the student and teacher route handlers.

Error Handling Strategy:
    Every method converts store failures into StoreUnavailableError carrying
    the user-facing message for that operation ("Insert student failed").
    The global handler in main.py turns it into HTTP 500 with that message.

Transaction Boundary:
    create_entity and delete_entity commit the session themselves. The
    session dependency's own commit runs after the response is on the wire,
    too late for a client that sends its next create as soon as it sees 200.
    A failed commit is reported with the same per-operation message.

    RosterService is stateless apart from its Collection; the session is
    passed into each call.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.exceptions import StoreUnavailableError
from roster.models.entity import Collection, SequencedEntity
from roster.models.student import STUDENTS
from roster.models.teacher import TEACHERS
from roster.schemas.roster import CreatedResponse, MessageResponse
from roster.services.sequence_registry import sequence_registry

logger = logging.getLogger(__name__)


class RosterService:
    """
    Business logic for a single collection.

    Responsibilities:
        - list_entities(): every row, ordered by id
        - create_entity(): next id + insert
        - delete_entity(): remove + compact
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    async def list_entities(self, db: AsyncSession) -> List[SequencedEntity]:
        """
        Fetch every row of the collection.

        Raises:
            StoreUnavailableError: "Fetch <name>s failed"
        """
        model = self.collection.model
        try:
            result = await db.execute(select(model).order_by(model.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Listing %ss failed: %s", self.collection.name, str(e))
            raise StoreUnavailableError(
                message=f"Fetch {self.collection.name}s failed",
                collection=self.collection.name,
                context={"error_type": type(e).__name__},
            ) from e

    async def create_entity(self, db: AsyncSession, fields: Dict[str, Any]) -> CreatedResponse:
        """
        Insert a new row under the next free id.

        Workflow Steps:
            1. Ask the registry for max(id) + 1
            2. Add the row with that id and the payload fields
            3. Flush so a primary key clash surfaces before the commit
            4. Commit, so the row is visible before the 200 goes out

        Args:
            db:     Async database session (injected by FastAPI)
            fields: Payload columns keyed by ORM attribute name

        Raises:
            StoreUnavailableError: "Insert <name> failed"
        """
        failure = f"Insert {self.collection.name} failed"
        try:
            next_id = await sequence_registry.assign_next_id(db, self.collection)
            entity = self.collection.model(id=next_id, **fields)
            db.add(entity)
            await db.flush()
            await db.commit()
        except StoreUnavailableError as e:
            raise StoreUnavailableError(
                message=failure, collection=self.collection.name, context=e.context
            ) from e
        except SQLAlchemyError as e:
            # Most often an IntegrityError: a concurrent insert took the same id
            logger.error("Inserting %s failed: %s", self.collection.name, str(e))
            raise StoreUnavailableError(
                message=failure,
                collection=self.collection.name,
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("%s %d created", self.collection.label, next_id)
        return CreatedResponse(
            message=f"{self.collection.label} inserted successfully",
            id=next_id,
        )

    async def delete_entity(self, db: AsyncSession, entity_id: int) -> MessageResponse:
        """
        Remove a row and compact the collection.

        Deleting an id that does not exist still succeeds. The delete and
        every renumbering UPDATE are committed together before returning.

        Raises:
            StoreUnavailableError: "Delete <name> failed"
        """
        failure = f"Delete {self.collection.name} failed"
        try:
            await sequence_registry.remove_and_compact(db, self.collection, entity_id)
            await db.commit()
        except StoreUnavailableError as e:
            raise StoreUnavailableError(
                message=failure, collection=self.collection.name, context=e.context
            ) from e
        except SQLAlchemyError as e:
            logger.error("Committing %s removal failed: %s", self.collection.name, str(e))
            raise StoreUnavailableError(
                message=failure,
                collection=self.collection.name,
                context={
                    "operation": "commit",
                    "entity_id": entity_id,
                    "error_type": type(e).__name__,
                },
            ) from e

        return MessageResponse(message=f"{self.collection.label} deleted successfully")


# ── Singleton Instances ───────────────────────────────────────────────────
student_service = RosterService(STUDENTS)
teacher_service = RosterService(TEACHERS)
