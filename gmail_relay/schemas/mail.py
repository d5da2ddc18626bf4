"""
Gmail Relay — Pydantic Request/Response Schemas
================================================

What:  Pydantic models defining the JSON contract of the relay.
How:   FastAPI validates request bodies against these models and serializes
       responses through them (by alias, so wire names stay camelCase where
       the client contract uses camelCase).

Required request fields are declared Optional on purpose: a missing field
must produce a 400 with a fixed message from the mail service, not
FastAPI's generic 422.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ArchiveRequest(BaseModel):
    gmail_id: Optional[str] = Field(default=None, description="Gmail message id to archive")
    access_token: Optional[str] = Field(default=None, description="Caller's OAuth access token")


class SendRequest(BaseModel):
    """
    What:  Body of POST /api/send.

    `from_name` overrides the display name of the From header. When it is
    absent or blank the relay looks the name up upstream.
    """
    to: Optional[str] = Field(default=None, description="Recipient, copied verbatim into To")
    subject: Optional[str] = Field(default=None, description="Subject line")
    body: Optional[str] = Field(default=None, description="Plain text body; newlines become <br>")
    access_token: Optional[str] = Field(default=None, description="Caller's OAuth access token")
    from_name: Optional[str] = Field(default=None, description="Display name override")

    @field_validator("from_name", mode="before")
    @classmethod
    def ignore_non_string_name(cls, v: Any) -> Any:
        """A non-string override is treated as absent, not as a bad request."""
        return v if isinstance(v, str) else None


class SignaturesRequest(BaseModel):
    access_token: Optional[str] = Field(default=None, description="Caller's OAuth access token")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ArchiveResponse(BaseModel):
    success: bool = True
    message: str = "Email archived successfully"
    gmail_id: str


class SendResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Email sent successfully"
    message_id: Optional[str] = Field(default=None, alias="messageId")


class ContactsResponse(BaseModel):
    """
    What:  Result of GET /contacts.
    `contacts` are the upstream People API connection resources, unmodified.
    """
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    contacts: List[Dict[str, Any]] = Field(default_factory=list)
    total_results: int = Field(default=0, alias="totalResults")


class Signature(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    display_name: str = Field(default="", alias="displayName")
    signature: str = ""
    is_default: bool = Field(default=False, alias="isDefault")
    is_primary: bool = Field(default=False, alias="isPrimary")


class SignaturesResponse(BaseModel):
    success: bool = True
    signatures: List[Signature] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str = Field(default="ok", description="Always 'ok' while the process serves requests")
    service: str = Field(description="Service identifier")


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by all endpoints.

    Example:
        {"error": "Failed to send email", "details": "Invalid Credentials"}
    """
    error: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(default=None, description="Upstream error text, when any")
