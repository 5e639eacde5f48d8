"""
CatTrack Backend — MongoDB Document Store
==========================================

What:  DocumentStore implementation over one pymongo async collection.
How:   Each interface method maps onto a single collection call, so every
       write is atomic at the document level.
Who:   Built per request by the dependency providers; used by the services.

Mapping:
    find_by_id    → find_one({"_id": id})
    find          → find(query).to_list()
    insert        → insert_one(document)
    update_by_id  → find_one_and_update({"_id": id}, {"$set": changes}, AFTER)
    delete_by_id  → find_one_and_delete({"_id": id})
    ping          → admin "ping" command

There is no version field and no compare-and-set: two concurrent updates on
the same document resolve as last-write-wins.
"""

import logging
from typing import List, Optional

from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from cattrack.services.store_base import Document, DocumentStore

logger = logging.getLogger(__name__)


class MongoDocumentStore(DocumentStore):
    """DocumentStore backed by a MongoDB collection."""

    def __init__(self, collection: AsyncCollection):
        self.collection = collection

    async def find_by_id(self, document_id: str) -> Optional[Document]:
        return await self.collection.find_one({"_id": document_id})

    async def find(self, query: Optional[Document] = None) -> List[Document]:
        cursor = self.collection.find(query or {})
        return await cursor.to_list()

    async def insert(self, document: Document) -> Document:
        await self.collection.insert_one(document)
        return document

    async def update_by_id(self, document_id: str, changes: Document) -> Optional[Document]:
        if not changes:
            # Nothing to $set; Mongo rejects an empty update document.
            return await self.find_by_id(document_id)
        return await self.collection.find_one_and_update(
            {"_id": document_id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_by_id(self, document_id: str) -> Optional[Document]:
        return await self.collection.find_one_and_delete({"_id": document_id})

    async def ping(self) -> bool:
        try:
            await self.collection.database.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("Store ping failed for '%s': %s", self.collection.name, str(e))
            return False
