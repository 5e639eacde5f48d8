# Services package init
"""
CatTrack Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the document store.

Service Inventory:
    - DocumentStore (abstract): Persistence contract used by the services
    - MongoDocumentStore: Concrete store over one MongoDB collection
    - authorization: Table-driven allow/deny decisions for every mutation
    - geo: Bounding box → $geoWithin polygon query
    - credentials: bcrypt PasswordHasher, JWT TokenService
    - UserService: Registration, profile, login, token check
    - CatService: Cat reads, area search, owner-guarded mutations
"""
