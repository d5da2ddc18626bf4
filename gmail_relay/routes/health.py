"""
Gmail Relay — Health Check Route
=================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Returns a static payload; the relay has no dependencies it could
       check without a caller's token.
"""

from fastapi import APIRouter

from gmail_relay.config import settings
from gmail_relay.schemas.mail import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", service=settings.service_name)
