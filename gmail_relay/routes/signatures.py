"""
Gmail Relay — Signatures Route Handler
=======================================

What:  Handles POST /api/signatures.
How:   Lists the caller's send-as aliases and returns the signature of each.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from gmail_relay.routes.dependencies import get_mail_service
from gmail_relay.schemas.mail import ErrorResponse, SignaturesRequest, SignaturesResponse
from gmail_relay.services.mail_service import MailService

router = APIRouter(prefix="/api", tags=["Signatures"])


@router.post(
    "/signatures",
    response_model=SignaturesResponse,
    responses={
        400: {"description": "Missing access_token", "model": ErrorResponse},
        500: {"description": "Gmail settings call failed", "model": ErrorResponse},
    },
    summary="List Gmail signatures",
)
async def list_signatures(
    payload: Optional[SignaturesRequest] = None,
    service: MailService = Depends(get_mail_service),
) -> SignaturesResponse:
    payload = payload or SignaturesRequest()
    return await service.list_signatures(payload.access_token)
