# Routes package init
"""
CatTrack Backend — API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - auth.py:    POST   /api/v1/auth/login
    - users.py:   GET    /api/v1/users, /api/v1/users/token, /api/v1/users/{id}
                  POST   /api/v1/users
                  PUT    /api/v1/users            (current user)
                  DELETE /api/v1/users            (current user)
    - cats.py:    GET    /api/v1/cats, /cats/user, /cats/area, /cats/{id}
                  POST   /api/v1/cats
                  PUT    /api/v1/cats/{id}, /cats/admin/{id}
                  DELETE /api/v1/cats/{id}, /cats/admin/{id}
    - health.py:  GET    /health

Routes stay thin: pull data out of the request, resolve the actor, call a
service, wrap the result. Ownership decisions live in the services.
"""
