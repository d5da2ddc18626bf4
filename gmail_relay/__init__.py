"""
Gmail Relay — Application Package Initializer
==============================================

What: Marks the `gmail_relay` directory as a Python package.
Who:  Used by uvicorn (`gmail_relay.main:app`), pytest, and the console script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Mail orchestration)   │  ← Presence checks, composition
    ├─────────────────────────────────────┤
    │   Provider (Gmail / People APIs)    │  ← Opaque upstream collaborator
    └─────────────────────────────────────┘

    Nothing is persisted. Each request builds a provider from the caller's
    bearer token, performs its upstream calls, and discards everything.
"""

__version__ = "1.0.0"
