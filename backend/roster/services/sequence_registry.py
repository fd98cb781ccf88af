"""
Campus Roster Backend — Sequential ID Registry
===============================================

What:  Assigns dense integer ids to new rows and re-compacts a collection
       after a row is removed.
How:   Plain SQL against the session it is given: MAX(id) for assignment;
       DELETE, then SELECT id ORDER BY id, then one UPDATE per row for
       compaction. The registry keeps no state of its own.
Who:   Called by RosterService for every create and delete.

Operations:
    assign_next_id(db, collection)
        → max(id) + 1, or 1 for an empty collection. The caller inserts.

    remove_and_compact(db, collection, entity_id)
        1. DELETE the row (absent id: nothing deleted, no error)
        2. Read remaining ids ascending, once
        3. Renumber each row to its 1-based rank, lowest id first

    Example (ids 1..4, names A..D; remove 2):
        before:  (1,A) (2,B) (3,C) (4,D)
        delete:  (1,A)       (3,C) (4,D)
        updates: 1→1, 3→2, 4→3
        after:   (1,A) (2,C) (3,D)

Concurrency:
    Nothing here locks. Two requests can read the same MAX(id) and both try
    to insert max + 1; the primary key rejects the second insert and the
    request fails with StoreUnavailableError. Two overlapping compactions of
    one collection can likewise fail on the primary key. Both outcomes are
    surfaced as errors, never as silently duplicated ids.

    Within one call the old → new mapping is computed from a single snapshot
    before any UPDATE runs. Updates run lowest id first: a row's rank never
    exceeds its current id, and every row below it has already moved, so no
    update targets an id still held by another row.
"""

import logging
from typing import List, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.exceptions import StoreUnavailableError
from roster.models.entity import MAX_ENTITY_ID, Collection

logger = logging.getLogger(__name__)

Renumbering = List[Tuple[int, int]]


def plan_compaction(remaining_ids: List[int]) -> Renumbering:
    """
    Map each remaining id to its 1-based rank.

    `remaining_ids` must be sorted ascending; the returned pairs keep that
    order, which is also the order the updates must be applied in.
    """
    return [(old_id, rank) for rank, old_id in enumerate(remaining_ids, start=1)]


class SequenceRegistry:
    """
    Dense id assignment and compaction for any SequencedEntity collection.

    Both operations wrap driver errors in StoreUnavailableError and never
    retry. They do not commit; the caller's session decides when the work
    becomes durable.
    """

    async def assign_next_id(self, db: AsyncSession, collection: Collection) -> int:
        """
        Return the id a new row in `collection` should be inserted under.

        The value is strictly greater than every id present at the time of the
        read. It is not reserved: a concurrent caller can receive the same id.

        Raises:
            StoreUnavailableError: the MAX(id) query failed
        """
        model = collection.model
        try:
            result = await db.execute(select(func.max(model.id)))
            # MAX over an empty table is NULL, so an empty collection starts at 1
            current_max = result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Reading max id of '%s' failed: %s", collection.name, str(e))
            raise StoreUnavailableError(
                collection=collection.name,
                context={"operation": "assign_next_id", "error_type": type(e).__name__},
            ) from e

        next_id = current_max + 1
        logger.debug("Next id for '%s': %d", collection.name, next_id)
        return next_id

    async def remove_and_compact(
        self,
        db: AsyncSession,
        collection: Collection,
        entity_id: int,
    ) -> Renumbering:
        """
        Delete `entity_id` and renumber the remaining rows to 1..N.

        Returns:
            The (old_id, new_id) pairs applied, in application order.
            Pairs with old_id == new_id are included; one UPDATE is issued
            per remaining row.

        Raises:
            StoreUnavailableError: any statement failed. Earlier statements
            in the same session are rolled back with the session.
        """
        model = collection.model
        try:
            # Ids are positive 32-bit integers; anything outside that range
            # cannot match a row, so only the compaction step runs.
            if 1 <= entity_id <= MAX_ENTITY_ID:
                deleted = await db.execute(delete(model).where(model.id == entity_id))
                absent = deleted.rowcount == 0
            else:
                absent = True
            if absent:
                logger.info(
                    "No %s with id %d; compacting anyway", collection.name, entity_id
                )

            # What: One snapshot of the surviving ids, taken after the DELETE
            # How:  The whole old → new plan is fixed before the first UPDATE,
            #       so renumbered rows are never re-read mid-loop
            result = await db.execute(select(model.id).order_by(model.id))
            renumbering = plan_compaction(list(result.scalars().all()))

            # Lowest id first: each target id is already vacated when its
            # UPDATE runs, so the primary key never sees a transient duplicate.
            for old_id, new_id in renumbering:
                await db.execute(
                    update(model)
                    .where(model.id == old_id)
                    .values(id=new_id)
                    # Bulk UPDATE bypasses the identity map; any entity already
                    # loaded in this session keeps its old id until refreshed.
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError as e:
            logger.error(
                "Compacting '%s' after removing id %d failed: %s",
                collection.name,
                entity_id,
                str(e),
            )
            raise StoreUnavailableError(
                collection=collection.name,
                context={
                    "operation": "remove_and_compact",
                    "entity_id": entity_id,
                    "error_type": type(e).__name__,
                },
            ) from e

        shifted = sum(1 for old_id, new_id in renumbering if old_id != new_id)
        logger.info(
            "Removed %s %d; %d rows remain, %d renumbered",
            collection.name,
            entity_id,
            len(renumbering),
            shifted,
        )
        return renumbering


# ── Singleton Instance ────────────────────────────────────────────────────
sequence_registry = SequenceRegistry()
