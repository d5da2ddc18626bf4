"""
Gmail Relay — Abstract Mail Provider Interface
===============================================

What:  Abstract base class for the upstream mail/contacts collaborator.
How:   Concrete implementations inherit from MailProvider and implement each
       upstream call. GmailProvider talks to the Gmail and People APIs; tests
       substitute a stub that records calls.
Who:   Created per request by the provider factory handed to MailService.

The provider is scoped to one caller's credential. It never issues,
refreshes or validates tokens: whatever the caller sent is what goes
upstream.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional


class MailProvider(ABC):
    """
    Contract for the upstream mail/contacts collaborator.

    Every method performs exactly one upstream call. Failures are raised as
    ProviderError; implementations do not retry.
    """

    @abstractmethod
    async def get_own_address(self) -> str:
        """Return the authenticated account's own email address."""
        ...

    @abstractmethod
    async def list_send_as(self) -> List[Dict[str, Any]]:
        """
        List the account's send-as aliases.

        Each entry is the upstream resource as a dict, with keys such as
        `sendAsEmail`, `displayName`, `signature`, `isPrimary`, `isDefault`.
        Returns an empty list when the account has none.
        """
        ...

    @abstractmethod
    async def get_profile_names(self) -> List[Dict[str, Any]]:
        """Return the `names` entries of the caller's own profile (may be empty)."""
        ...

    @abstractmethod
    async def modify_labels(
        self,
        message_id: str,
        add: Optional[List[str]] = None,
        remove: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Add and/or remove label identifiers on a message."""
        ...

    @abstractmethod
    async def send_raw(self, raw: str) -> Dict[str, Any]:
        """
        Send a message given its URL-safe base64 encoded RFC 2822 form.

        Returns the upstream message resource; `id` holds the new message id.
        """
        ...

    @abstractmethod
    async def list_connections(self, page_size: int, person_fields: str) -> Dict[str, Any]:
        """
        List the caller's contact connections.

        Returns the raw upstream response (`connections`, `totalItems`, ...).
        """
        ...


# Builds a provider scoped to a single bearer token
ProviderFactory = Callable[[str], MailProvider]
