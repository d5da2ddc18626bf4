"""
Gmail Relay — Message Route Handlers
=====================================

What:  Handles POST /api/archive and POST /api/send.
How:   Parses the JSON body into a request schema and delegates to MailService.

Error responses (handled by global exception handlers):
    HTTP 400: Missing required field(s) (ValidationError) or non-JSON body
    HTTP 500: Gmail call failed (UpstreamError)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from gmail_relay.routes.dependencies import get_mail_service
from gmail_relay.schemas.mail import (
    ArchiveRequest,
    ArchiveResponse,
    ErrorResponse,
    SendRequest,
    SendResponse,
)
from gmail_relay.services.mail_service import MailService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Messages"])


@router.post(
    "/archive",
    response_model=ArchiveResponse,
    responses={
        400: {"description": "Missing gmail_id or access_token", "model": ErrorResponse},
        500: {"description": "Gmail rejected the modify call", "model": ErrorResponse},
    },
    summary="Archive a message",
    description="Removes the INBOX label from the given Gmail message.",
)
async def archive_message(
    payload: Optional[ArchiveRequest] = None,
    service: MailService = Depends(get_mail_service),
) -> ArchiveResponse:
    payload = payload or ArchiveRequest()
    return await service.archive(payload.gmail_id, payload.access_token)


@router.post(
    "/send",
    response_model=SendResponse,
    responses={
        400: {"description": "Missing to, subject, body or access_token", "model": ErrorResponse},
        500: {"description": "Gmail rejected the send", "model": ErrorResponse},
    },
    summary="Send an HTML email",
    description=(
        "Sends an HTML email as the owner of the access token. Newlines in the body "
        "become <br>. The From display name comes from `from_name` when given, otherwise "
        "from the primary send-as alias or the account profile."
    ),
)
async def send_message(
    payload: Optional[SendRequest] = None,
    service: MailService = Depends(get_mail_service),
) -> SendResponse:
    """
    Send an email.

    Example request:
        {"to": "a@b.com", "subject": "Hi", "body": "line1\\nline2",
         "access_token": "ya29...", "from_name": "Jane Doe"}
    """
    return await service.send(payload or SendRequest())
