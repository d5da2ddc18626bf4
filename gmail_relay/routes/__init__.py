# Routes package init
"""
Gmail Relay — API Routes Package
=================================

Route Inventory:
    - health.py:     GET  /health
    - messages.py:   POST /api/archive, POST /api/send
    - contacts.py:   GET  /contacts
    - signatures.py: POST /api/signatures

Routes stay thin: pull fields out of the request, call MailService, return
its response model. Errors propagate to the global handlers in main.py.
"""
