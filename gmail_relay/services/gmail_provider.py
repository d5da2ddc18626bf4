"""
Gmail Relay — Google Gmail / People Provider
=============================================

What:  MailProvider implementation backed by google-api-python-client.
How:   Wraps the caller's access token in OAuth2 credentials, builds the
       Gmail v1 and People v1 clients on first use, and runs each blocking
       `.execute()` in Starlette's threadpool.
Who:   Created once per request by the default provider factory in main.py.

Error translation:
    HttpError          → ProviderError(reason from the API error body, status)
    GoogleAuthError    → ProviderError(str(exc))
    OSError (network)  → ProviderError(str(exc))
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from gmail_relay.exceptions import ProviderError
from gmail_relay.services.provider_base import MailProvider

logger = logging.getLogger(__name__)

# All Gmail calls act on the account that owns the token
USER_ID = "me"
PROFILE_RESOURCE = "people/me"


class GmailProvider(MailProvider):
    """
    Gmail + People API collaborator scoped to one bearer token.

    The token is used as-is: no refresh token, no client secret, no expiry
    handling. An expired token simply produces a 401 from Google, which
    surfaces as a ProviderError.
    """

    def __init__(self, access_token: str):
        self._credentials = Credentials(token=access_token)
        self._gmail: Any = None
        self._people: Any = None

    @property
    def gmail(self) -> Any:
        """Gmail v1 service, built on first access."""
        if self._gmail is None:
            self._gmail = build("gmail", "v1", credentials=self._credentials, cache_discovery=False)
        return self._gmail

    @property
    def people(self) -> Any:
        """People v1 service, built on first access."""
        if self._people is None:
            self._people = build("people", "v1", credentials=self._credentials, cache_discovery=False)
        return self._people

    async def _execute(self, request: Any, operation: str) -> Dict[str, Any]:
        """Run a prepared API request off the event loop and translate failures."""
        try:
            response = await run_in_threadpool(request.execute)
        except HttpError as e:
            status = getattr(getattr(e, "resp", None), "status", None)
            reason = getattr(e, "reason", None) or str(e)
            logger.warning("Google API %s failed (status=%s): %s", operation, status, reason)
            raise ProviderError(
                message=reason,
                status=int(status) if status is not None else None,
                context={"operation": operation},
            ) from e
        except (GoogleAuthError, OSError) as e:
            logger.warning("Google API %s failed: %s", operation, str(e))
            raise ProviderError(message=str(e), context={"operation": operation}) from e
        return response or {}

    async def get_own_address(self) -> str:
        profile = await self._execute(
            self.gmail.users().getProfile(userId=USER_ID),
            "users.getProfile",
        )
        address = profile.get("emailAddress")
        if not address:
            raise ProviderError(
                message="Gmail profile did not include an email address",
                context={"operation": "users.getProfile"},
            )
        return address

    async def list_send_as(self) -> List[Dict[str, Any]]:
        response = await self._execute(
            self.gmail.users().settings().sendAs().list(userId=USER_ID),
            "users.settings.sendAs.list",
        )
        return response.get("sendAs") or []

    async def get_profile_names(self) -> List[Dict[str, Any]]:
        response = await self._execute(
            self.people.people().get(resourceName=PROFILE_RESOURCE, personFields="names"),
            "people.get",
        )
        return response.get("names") or []

    async def modify_labels(
        self,
        message_id: str,
        add: Optional[List[str]] = None,
        remove: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if add:
            body["addLabelIds"] = list(add)
        if remove:
            body["removeLabelIds"] = list(remove)
        return await self._execute(
            self.gmail.users().messages().modify(userId=USER_ID, id=message_id, body=body),
            "users.messages.modify",
        )

    async def send_raw(self, raw: str) -> Dict[str, Any]:
        return await self._execute(
            self.gmail.users().messages().send(userId=USER_ID, body={"raw": raw}),
            "users.messages.send",
        )

    async def list_connections(self, page_size: int, person_fields: str) -> Dict[str, Any]:
        return await self._execute(
            self.people.people().connections().list(
                resourceName=PROFILE_RESOURCE,
                pageSize=page_size,
                personFields=person_fields,
            ),
            "people.connections.list",
        )
