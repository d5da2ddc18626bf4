"""
Gmail Relay — Mail Service (Operation Orchestrator)
====================================================

What:  Implements the four relay operations: archive, contacts, send, signatures.
How:   Checks required fields, builds a provider from the caller's token via
       the injected factory, performs the upstream call(s), and shapes the
       result into a response schema.
Who:   Called by route handlers through the `get_mail_service` dependency.

Send flow (POST /api/send):
    ┌──────────┐   ┌─────────────────┐   ┌──────────┐   ┌───────────┐   ┌───────────┐
    │ Presence │──▶│ resolve_sender  │──▶│ compose  │──▶│ send_raw  │──▶│ SENT label│
    │  check   │   │ (own address +  │   │ + encode │   │           │   │ (Degraded │
    └──────────┘   │  display name)  │   └──────────┘   └───────────┘   │  allowed) │
                   └─────────────────┘                                  └───────────┘

Error policy:
    - Missing field                   → ValidationError (400), no upstream call
    - Primary upstream call fails     → UpstreamError (500) with a fixed message
    - Display-name lookup fails       → Degraded, next fallback (see composer)
    - SENT label fails after sending  → Degraded, logged, send still succeeds
"""

import logging
from typing import List, Optional, Sequence

from gmail_relay.config import settings
from gmail_relay.exceptions import UpstreamError, ValidationError
from gmail_relay.schemas.mail import (
    ArchiveResponse,
    ContactsResponse,
    SendRequest,
    SendResponse,
    Signature,
    SignaturesResponse,
)
from gmail_relay.services.composer import compose_message, encode_payload, resolve_sender
from gmail_relay.services.provider_base import MailProvider, ProviderFactory
from gmail_relay.services.results import Degraded, Ok, Outcome

logger = logging.getLogger(__name__)

INBOX_LABEL = "INBOX"
SENT_LABEL = "SENT"


def _missing(**values: Optional[str]) -> List[str]:
    return [name for name, value in values.items() if not value]


def _upstream_failure(message: str, exc: Exception, **context) -> UpstreamError:
    details = getattr(exc, "message", None) or str(exc) or type(exc).__name__
    context["error_type"] = type(exc).__name__
    return UpstreamError(message=message, details=details, context=context)


class MailService:
    """
    Stateless orchestrator over a provider factory.

    Args:
        provider_factory: Callable turning an access token into a MailProvider.
            main.py passes GmailProvider; tests pass a stub.
    """

    def __init__(self, provider_factory: ProviderFactory):
        self.provider_factory = provider_factory

    # ── Archive ───────────────────────────────────────────────────────────

    async def archive(self, gmail_id: Optional[str], access_token: Optional[str]) -> ArchiveResponse:
        """Remove the INBOX label from a message."""
        missing = _missing(gmail_id=gmail_id, access_token=access_token)
        if missing:
            raise ValidationError(
                "Missing required fields: gmail_id and access_token",
                fields=missing,
            )

        provider = self.provider_factory(access_token)
        try:
            await provider.modify_labels(gmail_id, remove=[INBOX_LABEL])
        except Exception as e:
            raise _upstream_failure("Failed to archive email", e, gmail_id=gmail_id) from e

        logger.info("Archived message %s", gmail_id)
        return ArchiveResponse(gmail_id=gmail_id)

    # ── Contacts ──────────────────────────────────────────────────────────

    async def fetch_contacts(self, access_token: Optional[str]) -> ContactsResponse:
        """List the caller's contact connections in a single page."""
        if _missing(access_token=access_token):
            raise ValidationError("Missing access_token query parameter", fields=["access_token"])

        provider = self.provider_factory(access_token)
        try:
            response = await provider.list_connections(
                page_size=settings.contacts_page_size,
                person_fields=settings.contacts_person_fields,
            )
        except Exception as e:
            raise _upstream_failure("Failed to fetch contacts", e) from e

        contacts = response.get("connections") or []
        logger.info("Fetched %d contacts", len(contacts))
        return ContactsResponse(
            contacts=contacts,
            total_results=response.get("totalItems") or 0,
        )

    # ── Send ──────────────────────────────────────────────────────────────

    async def send(self, request: SendRequest) -> SendResponse:
        """
        Compose and send an HTML message as the token's owner.

        Raises:
            ValidationError: to, subject, body or access_token missing.
            UpstreamError:   own-address lookup or the send itself failed.
        """
        logger.info(
            "Send requested: to=%s subject=%r body_length=%d has_access_token=%s has_from_name=%s",
            request.to,
            request.subject,
            len(request.body or ""),
            bool(request.access_token),
            bool(request.from_name),
        )

        missing = _missing(
            to=request.to,
            subject=request.subject,
            body=request.body,
            access_token=request.access_token,
        )
        if missing:
            raise ValidationError(
                "Missing required fields: to, subject, body, and access_token",
                fields=missing,
            )

        provider = self.provider_factory(request.access_token)
        try:
            sender = await resolve_sender(provider, request.from_name)
            message = compose_message(sender, request)
            logger.info("Final From header: %s", sender.from_header)

            result = await provider.send_raw(encode_payload(message))
            message_id = result.get("id")
        except Exception as e:
            logger.error("Send failed: %s", str(e), exc_info=True)
            raise _upstream_failure("Failed to send email", e, to=request.to) from e

        logger.info("Email sent, message id %s", message_id)

        outcome = await self.apply_labels(provider, message_id, [SENT_LABEL])
        if isinstance(outcome, Degraded):
            logger.warning(
                "Failed to add SENT label to %s (Gmail usually applies it itself): %s",
                message_id,
                outcome.reason,
            )

        return SendResponse(message_id=message_id)

    async def apply_labels(
        self,
        provider: MailProvider,
        message_id: Optional[str],
        labels: Sequence[str],
    ) -> Outcome:
        """Add labels after the primary operation already succeeded."""
        if not message_id:
            return Degraded(reason="upstream returned no message id", step="label")
        try:
            await provider.modify_labels(message_id, add=list(labels))
        except Exception as e:
            return Degraded(reason=str(e) or type(e).__name__, step="label")
        return Ok(list(labels))

    # ── Signatures ────────────────────────────────────────────────────────

    async def list_signatures(self, access_token: Optional[str]) -> SignaturesResponse:
        """Return one signature entry per send-as alias."""
        if _missing(access_token=access_token):
            raise ValidationError("Missing required field: access_token", fields=["access_token"])

        provider = self.provider_factory(access_token)
        try:
            aliases = await provider.list_send_as()
        except Exception as e:
            raise _upstream_failure("Failed to fetch signatures", e) from e

        signatures: List[Signature] = [
            Signature(
                email=alias.get("sendAsEmail"),
                display_name=alias.get("displayName") or "",
                signature=alias.get("signature") or "",
                is_default=bool(alias.get("isDefault")),
                is_primary=bool(alias.get("isPrimary")),
            )
            for alias in aliases
        ]
        return SignaturesResponse(signatures=signatures)
