# Middleware package init
"""
Mini Notes Backend — Middleware Package
========================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Rate Limit] → FastAPI routes / notes router

    1. Request ID: correlation ID available to everything below, 429s included
    2. Logging: sees the final status (429s too) and the request ID
    3. Rate Limit: rejects credential floods before any route work

CORS is not a middleware here: the notes router answers pre-flight requests
and stamps Access-Control-Allow-Origin on its own responses.
"""
