"""
CatTrack Backend — Cat Service (Business Logic Orchestrator)
=============================================================

What:  Cat reads, the bounding-box search, and owner-guarded mutations.
How:   Every mutation follows the same sequence:

           fetch current ──▶ authorize against ──▶ write ──▶ return record
           record (404)      current owner (403)    (500)

Who:   Called by the cats route handlers.

Error Handling Strategy:
    NotFoundError and ForbiddenError propagate as they are. Any other
    exception raised while talking to the store is logged and replaced by
    OperationFailedError with the operation's fixed message ("Cat update
    failed", ...). The original cause is not returned to the client.

Consistency:
    Fetch and write are two separate store calls. If the cat disappears in
    between, the write finds nothing and the caller gets NotFoundError. Two
    concurrent updates resolve as last-write-wins.

Owner snapshot:
    create_cat copies the actor's {_id, user_name, email} into `owner`.
    reassign_owner writes the snapshot it is given. Nothing ever refreshes an
    existing snapshot from the users collection.
"""

import logging
from typing import Any, Dict, List, Optional

from cattrack.exceptions import CatTrackError, NotFoundError, OperationFailedError
from cattrack.models.cat import CatDocument, OwnerSnapshot, birthdate_to_storage
from cattrack.models.user import Actor
from cattrack.schemas.cat import CatCreate, CatUpdate
from cattrack.services.authorization import Action, authorize
from cattrack.services.geo import BoundingBox
from cattrack.services.store_base import DocumentStore, new_document_id

logger = logging.getLogger(__name__)

CAT_NOT_FOUND = "Cat not found"


class CatService:
    """
    Business logic layer for cat operations.

    Holds only its store; safe to share between concurrent requests.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_cat(self, cat_id: str) -> CatDocument:
        """
        Raises:
            NotFoundError: No cat with this id (→ 404)
            OperationFailedError: Store failure (→ 500)
        """
        try:
            document = await self.store.find_by_id(cat_id)
        except Exception as e:
            logger.error("Store error fetching cat %s: %s", cat_id, str(e), exc_info=True)
            raise OperationFailedError(
                message="Could not retrieve the cat",
                context={"cat_id": cat_id, "error_type": type(e).__name__},
            )
        if document is None:
            raise NotFoundError(CAT_NOT_FOUND, resource="cat", resource_id=cat_id)
        return CatDocument.model_validate(document)

    async def list_cats(self, owner_id: Optional[str] = None) -> List[CatDocument]:
        """
        All cats, or only those whose snapshot owner is `owner_id`.

        Order is store-defined and may differ between calls.
        """
        query = {"owner._id": owner_id} if owner_id is not None else None
        return await self._find(query)

    async def list_cats_in_box(
        self,
        min_lat: float,
        max_lat: float,
        min_lon: float,
        max_lon: float,
    ) -> List[CatDocument]:
        """Cats whose location lies inside the box (edges included by the store)."""
        box = BoundingBox(min_lat=min_lat, max_lat=max_lat, min_lon=min_lon, max_lon=max_lon)
        return await self._find(box.query())

    async def _find(self, query: Optional[Dict[str, Any]]) -> List[CatDocument]:
        try:
            documents = await self.store.find(query)
        except Exception as e:
            logger.error("Store error listing cats: %s", str(e), exc_info=True)
            raise OperationFailedError(
                message="Could not retrieve cats",
                context={"error_type": type(e).__name__},
            )
        return [CatDocument.model_validate(doc) for doc in documents]

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_cat(self, payload: CatCreate, actor: Actor) -> CatDocument:
        """
        Insert a new cat owned by `actor`.

        The owner snapshot is taken from the actor (token claims), never from
        the request body.
        """
        try:
            cat = CatDocument(
                id=new_document_id(),
                cat_name=payload.cat_name,
                weight=payload.weight,
                filename=payload.filename,
                birthdate=birthdate_to_storage(payload.birthdate),
                owner=actor.snapshot(),
                location=payload.location,
            )
            await self.store.insert(cat.to_document())
            logger.info("Cat %s created by %s", cat.id, actor.id)
            return cat
        except Exception as e:
            logger.error("Cat creation failed for %s: %s", actor.id, str(e), exc_info=True)
            raise OperationFailedError(
                message="Cat creation failed",
                context={"actor_id": actor.id, "error_type": type(e).__name__},
            )

    async def update_cat(self, cat_id: str, payload: CatUpdate, actor: Actor) -> CatDocument:
        """
        Owner edit of name, weight, filename, birthdate and location.

        `_id` and `owner` cannot change here; see reassign_owner.
        """
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if payload.birthdate is not None:
            changes["birthdate"] = birthdate_to_storage(payload.birthdate)

        try:
            current = await self._fetch_for_write(cat_id)
            authorize(actor, current.owner.id, Action.UPDATE_OWN, "Only owner can update cat")
            updated = await self.store.update_by_id(cat_id, changes)
            if updated is None:
                raise NotFoundError(CAT_NOT_FOUND, resource="cat", resource_id=cat_id)
            logger.info("Cat %s updated by %s (%s)", cat_id, actor.id, ", ".join(sorted(changes)))
            return CatDocument.model_validate(updated)
        except CatTrackError:
            raise
        except Exception as e:
            logger.error("Cat update failed for %s: %s", cat_id, str(e), exc_info=True)
            raise OperationFailedError(
                message="Cat update failed",
                context={"cat_id": cat_id, "error_type": type(e).__name__},
            )

    async def reassign_owner(
        self,
        cat_id: str,
        new_owner: OwnerSnapshot,
        actor: Actor,
    ) -> CatDocument:
        """
        Replace the cat's owner snapshot.

        Allowed for admins and for the cat's current owner.
        """
        try:
            current = await self._fetch_for_write(cat_id)
            authorize(
                actor, current.owner.id, Action.REASSIGN_OWNER, "Only admin can change cat owner"
            )
            updated = await self.store.update_by_id(
                cat_id, {"owner": new_owner.model_dump(by_alias=True)}
            )
            if updated is None:
                raise NotFoundError(CAT_NOT_FOUND, resource="cat", resource_id=cat_id)
            logger.info(
                "Cat %s reassigned from %s to %s by %s",
                cat_id, current.owner.id, new_owner.id, actor.id,
            )
            return CatDocument.model_validate(updated)
        except CatTrackError:
            raise
        except Exception as e:
            logger.error("Cat owner change failed for %s: %s", cat_id, str(e), exc_info=True)
            raise OperationFailedError(
                message="Cat update failed",
                context={"cat_id": cat_id, "error_type": type(e).__name__},
            )

    async def delete_cat(self, cat_id: str, actor: Actor, as_admin: bool = False) -> CatDocument:
        """
        Delete a cat.

        as_admin=False: only the owner may delete (delete-own).
        as_admin=True:  only an admin may delete, whoever owns it (delete-any).

        A second delete of the same id raises NotFoundError.
        """
        if as_admin:
            action, message = Action.DELETE_ANY, "Only admin can delete cat"
        else:
            action, message = Action.DELETE_OWN, "Only owner can delete cat"

        try:
            current = await self._fetch_for_write(cat_id)
            authorize(actor, current.owner.id, action, message)
            deleted = await self.store.delete_by_id(cat_id)
            if deleted is None:
                raise NotFoundError(CAT_NOT_FOUND, resource="cat", resource_id=cat_id)
            logger.info("Cat %s deleted by %s (%s)", cat_id, actor.id, action.value)
            return CatDocument.model_validate(deleted)
        except CatTrackError:
            raise
        except Exception as e:
            logger.error("Cat delete failed for %s: %s", cat_id, str(e), exc_info=True)
            raise OperationFailedError(
                message="Cat delete failed",
                context={"cat_id": cat_id, "error_type": type(e).__name__},
            )

    async def _fetch_for_write(self, cat_id: str) -> CatDocument:
        # Store errors propagate raw so the caller can apply its own message.
        document = await self.store.find_by_id(cat_id)
        if document is None:
            raise NotFoundError(CAT_NOT_FOUND, resource="cat", resource_id=cat_id)
        return CatDocument.model_validate(document)
