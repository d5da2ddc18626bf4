# Services package init
"""
Gmail Relay — Services Layer
=============================

What:  Operation logic sitting between routes (HTTP) and the upstream APIs.

Service Inventory:
    - MailProvider (abstract): Contract for the upstream mail/contacts collaborator
    - GmailProvider: Concrete provider over the Gmail and People APIs
    - composer: Sender resolution, header encoding, message composition
    - MailService: Presence checks and orchestration for each endpoint
"""
