# Middleware package init
"""
CatTrack Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Rate Limit] → [Access Log] → [GZip] → [CORS] → Route

    - Rate Limit rejects with 429 before any route or access-log work runs.
    - Request ID sets the correlation id used by every log line and error body.
    - Access Log writes one line per request once the status is known.

Authentication is not middleware: routes that need an actor declare the
`get_current_actor` dependency, so public reads stay public.
"""
