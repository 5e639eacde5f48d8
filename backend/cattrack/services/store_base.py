"""
CatTrack Backend — Abstract Document Store Interface
=====================================================

What:  Abstract base class defining the contract services use for persistence.
How:   Concrete implementations inherit from DocumentStore; the Mongo one lives
       in `cattrack.services.mongo_store`. Tests plug in an in-memory store.
Who:   Called by UserService and CatService.

Contract:
    - Documents are plain dicts keyed the way they are stored (`_id`, ...).
    - Filters use MongoDB query syntax, including `$geoWithin` for location
      containment and dotted paths such as `owner._id`.
    - Missing documents are reported as None, never as an exception.
    - Every other failure (connection lost, timeout, duplicate key) is raised
      as whatever the driver raises; services translate it.
    - Each method is a single atomic store operation.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from bson import ObjectId

Document = Dict[str, Any]


class DocumentStore(ABC):
    """Abstract interface over one collection of documents."""

    @abstractmethod
    async def find_by_id(self, document_id: str) -> Optional[Document]:
        """Return the document with this `_id`, or None."""
        ...

    @abstractmethod
    async def find(self, query: Optional[Document] = None) -> List[Document]:
        """
        Return every document matching `query` (all documents when None).

        Order is whatever the store returns; callers must not rely on it.
        """
        ...

    @abstractmethod
    async def insert(self, document: Document) -> Document:
        """Insert `document` (which already carries its `_id`) and return it."""
        ...

    @abstractmethod
    async def update_by_id(self, document_id: str, changes: Document) -> Optional[Document]:
        """
        Set the given top-level fields on one document.

        Returns:
            The document as it is after the update, or None if no document
            with that `_id` exists any more.
        """
        ...

    @abstractmethod
    async def delete_by_id(self, document_id: str) -> Optional[Document]:
        """Delete one document and return it, or None if it did not exist."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Lightweight connectivity check used by the health endpoint."""
        ...


def new_document_id() -> str:
    """Fresh `_id` value: an ObjectId rendered as its 24-char hex string."""
    return str(ObjectId())
