"""
CatTrack Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── user_store / cat_store: InMemoryDocumentStore instances (no MongoDB needed)
    ├── password_hasher: bcrypt at the minimum cost factor (fast)
    ├── token_service: JWT signer with a test secret
    ├── user_service / cat_service: services wired to the in-memory stores
    ├── alice / bob / admin: Actor values
    ├── auth_headers: builds an Authorization header for an actor
    └── test_client: HTTPX AsyncClient with store/credential dependencies overridden
"""

import copy
import os
from typing import Any, Dict, List, Optional, Sequence

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pymongo.errors import DuplicateKeyError

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before any cattrack import reads settings
os.environ["MONGODB_URL"] = "mongodb://localhost:27017"
os.environ["MONGODB_DATABASE"] = "cattrack_test"
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from cattrack.models.user import Actor, Role, UserDocument  # noqa: E402
from cattrack.services.cat_service import CatService  # noqa: E402
from cattrack.services.credentials import PasswordHasher, TokenService  # noqa: E402
from cattrack.services.store_base import Document, DocumentStore  # noqa: E402
from cattrack.services.user_service import UserService  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Document Store
# ══════════════════════════════════════════════════════════════════════════

def _lookup(document: Document, dotted_key: str) -> Any:
    value: Any = document
    for part in dotted_key.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _within_ring(location: Optional[Document], ring: Sequence[Sequence[float]]) -> bool:
    """
    Inclusive containment of a GeoJSON point in a ring.

    Only handles the axis-aligned rectangles the geo builder produces, which
    is all the services ever send.
    """
    if not location or location.get("type") != "Point":
        return False
    lon, lat = location["coordinates"]
    lons = [p[0] for p in ring]
    lats = [p[1] for p in ring]
    return min(lons) <= lon <= max(lons) and min(lats) <= lat <= max(lats)


def _matches(document: Document, query: Optional[Document]) -> bool:
    for key, condition in (query or {}).items():
        value = _lookup(document, key)
        if isinstance(condition, dict) and "$geoWithin" in condition:
            ring = condition["$geoWithin"]["$geometry"]["coordinates"][0]
            if not _within_ring(value, ring):
                return False
        elif value != condition:
            return False
    return True


class InMemoryDocumentStore(DocumentStore):
    """
    DocumentStore over a dict, with optional unique fields.

    Returns copies so callers cannot mutate stored state by accident, the same
    way a real store hands back fresh documents.
    """

    def __init__(self, unique_fields: Sequence[str] = ()):
        self.documents: Dict[str, Document] = {}
        self.unique_fields = tuple(unique_fields)

    async def find_by_id(self, document_id: str) -> Optional[Document]:
        document = self.documents.get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def find(self, query: Optional[Document] = None) -> List[Document]:
        return [copy.deepcopy(d) for d in self.documents.values() if _matches(d, query)]

    async def insert(self, document: Document) -> Document:
        self._check_unique(document, exclude_id=None)
        if document["_id"] in self.documents:
            raise DuplicateKeyError(f"E11000 duplicate key _id {document['_id']}")
        self.documents[document["_id"]] = copy.deepcopy(document)
        return document

    async def update_by_id(self, document_id: str, changes: Document) -> Optional[Document]:
        if document_id not in self.documents:
            return None
        merged = {**self.documents[document_id], **copy.deepcopy(changes)}
        self._check_unique(merged, exclude_id=document_id)
        self.documents[document_id] = merged
        return copy.deepcopy(merged)

    async def delete_by_id(self, document_id: str) -> Optional[Document]:
        return self.documents.pop(document_id, None)

    async def ping(self) -> bool:
        return True

    def _check_unique(self, document: Document, exclude_id: Optional[str]) -> None:
        for field in self.unique_fields:
            for other_id, other in self.documents.items():
                if other_id != exclude_id and other.get(field) == document.get(field):
                    raise DuplicateKeyError(f"E11000 duplicate key {field}")


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def user_store():
    return InMemoryDocumentStore(unique_fields=("email",))


@pytest.fixture
def cat_store():
    return InMemoryDocumentStore(unique_fields=("filename",))


@pytest.fixture
def password_hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return TokenService(secret="test-secret-not-real", expire_minutes=5)


@pytest.fixture
def user_service(user_store, password_hasher):
    return UserService(store=user_store, hasher=password_hasher)


@pytest.fixture
def cat_service(cat_store):
    return CatService(store=cat_store)


@pytest.fixture
def alice():
    return Actor(id="aaaaaaaaaaaaaaaaaaaaaaaa", user_name="Alice", email="alice@example.com", role=Role.USER)


@pytest.fixture
def bob():
    return Actor(id="bbbbbbbbbbbbbbbbbbbbbbbb", user_name="Bob", email="bob@example.com", role=Role.USER)


@pytest.fixture
def admin():
    return Actor(id="cccccccccccccccccccccccc", user_name="Root", email="root@example.com", role=Role.ADMIN)


@pytest.fixture
def sample_cat_payload():
    return {
        "cat_name": "Miso",
        "weight": 4.2,
        "filename": "miso.jpg",
        "birthdate": "2020-01-01",
        "location": {"type": "Point", "coordinates": [35.0, 15.0]},
    }


@pytest.fixture
def auth_headers(token_service, user_store):
    """
    Returns a function building an Authorization header for an Actor.

    The actor is also stored as a user (if not there yet), since requests
    resolve the token subject against the users collection.

    Usage:
        response = await test_client.delete(url, headers=auth_headers(alice))
    """

    def _headers(actor: Actor) -> Dict[str, str]:
        user = UserDocument(
            id=actor.id,
            user_name=actor.user_name,
            email=actor.email,
            role=actor.role,
            password="unused",
        )
        user_store.documents.setdefault(user.id, user.to_document())
        return {"Authorization": f"Bearer {token_service.issue(user)}"}

    return _headers


@pytest_asyncio.fixture
async def test_client(user_store, cat_store, password_hasher, token_service):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Stores and credentials are swapped for the test fixtures; the lifespan
    does not run, so no MongoDB connection is attempted.
    """
    from cattrack import dependencies
    from cattrack.main import app

    app.dependency_overrides[dependencies.get_user_store] = lambda: user_store
    app.dependency_overrides[dependencies.get_cat_store] = lambda: cat_store
    app.dependency_overrides[dependencies.get_password_hasher] = lambda: password_hasher
    app.dependency_overrides[dependencies.get_token_service] = lambda: token_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
