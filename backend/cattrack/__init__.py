"""
CatTrack Backend — Application Package Initializer
===================================================

What: Marks the `cattrack` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is split into layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Authorization, Geo,     │  ← Ownership rules, orchestration
    │   User/Cat orchestration)           │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Stored documents + API contracts
    ├─────────────────────────────────────┤
    │     Document Store (Persistence)    │  ← MongoDB collections
    └─────────────────────────────────────┘

    Routes never talk to the store directly; every mutation passes through a
    service, and every service mutation passes through the authorization
    evaluator in `cattrack.services.authorization`.
"""

__version__ = "1.0.0"
