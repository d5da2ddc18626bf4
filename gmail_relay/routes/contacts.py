"""
Gmail Relay — Contacts Route Handler
=====================================

What:  Handles GET /contacts.
How:   Requires an Authorization header (presence only) and the access token
       as a query parameter, then lists People API connections.

Error responses:
    HTTP 401: Authorization header missing (checked first)
    HTTP 400: access_token query parameter missing
    HTTP 500: People API call failed
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query

from gmail_relay.exceptions import AuthenticationError
from gmail_relay.routes.dependencies import get_mail_service
from gmail_relay.schemas.mail import ContactsResponse, ErrorResponse
from gmail_relay.services.mail_service import MailService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contacts"])


@router.get(
    "/contacts",
    response_model=ContactsResponse,
    responses={
        400: {"description": "Missing access_token query parameter", "model": ErrorResponse},
        401: {"description": "Missing Authorization header", "model": ErrorResponse},
        500: {"description": "People API call failed", "model": ErrorResponse},
    },
    summary="Fetch Google contacts",
)
async def list_contacts(
    authorization: Optional[str] = Header(default=None),
    access_token: Optional[str] = Query(default=None, description="Caller's OAuth access token"),
    service: MailService = Depends(get_mail_service),
) -> ContactsResponse:
    if not authorization:
        raise AuthenticationError("Missing authorization header")
    return await service.fetch_contacts(access_token)
