# Middleware package init
"""
Gmail Relay — Middleware Package
=================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    - Request ID runs first so every access log line carries the ID
    - Logging captures response status and duration on the way back out
"""
