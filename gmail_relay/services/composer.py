"""
Gmail Relay — Message Composer
===============================

What:  Builds the transport-ready payload for POST /api/send.
How:   Four steps, all single-pass:
       1. resolve_sender()       own address + display name via ordered strategies
       2. format_header_value()  RFC 2047 encoded word when a value needs it
       3. compose_message()      fixed header template + HTML body
       4. encode_payload()       CRLF block → URL-safe base64, padding stripped
Who:   Called by MailService.send().

Display name resolution order (first strategy yielding a value wins):
    override  →  primary/default send-as alias  →  profile name  →  bare address

Only the own-address lookup is fatal. A failing alias or profile lookup comes
back as Degraded and resolution moves on to the next strategy.
"""

import base64
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from gmail_relay.schemas.mail import SendRequest
from gmail_relay.services.provider_base import MailProvider
from gmail_relay.services.results import Degraded, Ok, Outcome

logger = logging.getLogger(__name__)

CRLF = "\r\n"

# Anything outside printable 7-bit ASCII, or a character that breaks a
# display-name phrase (quote, comma)
_NEEDS_ENCODING = re.compile(r'[^\x20-\x7E]|[",]')


# ══════════════════════════════════════════════════════════════════════════
# Data
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ResolvedSender:
    """The account address plus the display name chosen for it, if any."""
    email_address: str
    display_name: Optional[str] = None
    source: str = "address"

    @property
    def from_header(self) -> str:
        if not self.display_name:
            return self.email_address
        return f"{format_header_value(self.display_name)} <{self.email_address}>"


@dataclass
class ComposedMessage:
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body_html: str = ""

    def header(self, name: str) -> Optional[str]:
        for key, value in self.headers:
            if key.lower() == name.lower():
                return value
        return None

    def as_text(self) -> str:
        lines = [f"{name}: {value}" for name, value in self.headers]
        lines.append("")
        lines.append(self.body_html)
        return CRLF.join(lines)


# ══════════════════════════════════════════════════════════════════════════
# Display Name Strategies
# ══════════════════════════════════════════════════════════════════════════

def _clean(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class DisplayNameStrategy(ABC):
    """One step of the display-name fallback chain."""

    source: str = ""

    @abstractmethod
    async def lookup(self, provider: MailProvider) -> Outcome:
        """Return Ok(name), Ok(None) when nothing was found, or Degraded."""
        ...


class OverrideName(DisplayNameStrategy):
    """Caller-supplied `from_name`. Makes no upstream call."""

    source = "override"

    def __init__(self, override: Optional[str]):
        self.override = override

    async def lookup(self, provider: MailProvider) -> Outcome:
        return Ok(_clean(self.override))


class SendAsAliasName(DisplayNameStrategy):
    """Display name of the primary send-as alias, else the default one."""

    source = "send_as"

    @staticmethod
    def pick_alias(aliases: Sequence[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        for flag in ("isPrimary", "isDefault"):
            for alias in aliases:
                if alias.get(flag):
                    return alias
        return None

    async def lookup(self, provider: MailProvider) -> Outcome:
        try:
            alias = self.pick_alias(await provider.list_send_as())
            name = alias.get("displayName") if alias else None
        except Exception as e:
            return Degraded(reason=str(e) or type(e).__name__, step=self.source)
        return Ok(_clean(name))


class ProfileName(DisplayNameStrategy):
    """First display name on the caller's own profile."""

    source = "profile"

    async def lookup(self, provider: MailProvider) -> Outcome:
        try:
            names = await provider.get_profile_names()
            name = names[0].get("displayName") if names else None
        except Exception as e:
            return Degraded(reason=str(e) or type(e).__name__, step=self.source)
        return Ok(_clean(name))


def default_strategies(override: Optional[str]) -> List[DisplayNameStrategy]:
    return [OverrideName(override), SendAsAliasName(), ProfileName()]


# ══════════════════════════════════════════════════════════════════════════
# Operations
# ══════════════════════════════════════════════════════════════════════════

async def resolve_sender(
    provider: MailProvider,
    override: Optional[str] = None,
    strategies: Optional[Sequence[DisplayNameStrategy]] = None,
) -> ResolvedSender:
    """
    Resolve the From identity for a send.

    The own address is fetched first and any failure there propagates to
    the caller. The strategies then run in order; the first one returning a
    non-empty name wins and later strategies are never called.

    Args:
        provider:   Collaborator scoped to the caller's token.
        override:   Optional display name supplied with the request.
        strategies: Replaces the default chain (tests, future sources).
    """
    email_address = await provider.get_own_address()
    chain = strategies if strategies is not None else default_strategies(override)

    for strategy in chain:
        outcome = await strategy.lookup(provider)
        if isinstance(outcome, Degraded):
            logger.warning(
                "Display name lookup via %s failed, falling back: %s",
                outcome.step or strategy.source,
                outcome.reason,
            )
            continue
        if outcome.value:
            logger.info("Using display name from %s", strategy.source)
            return ResolvedSender(email_address, outcome.value, strategy.source)

    logger.info("No display name available, using email only")
    return ResolvedSender(email_address)


def format_header_value(raw: str) -> str:
    """
    Encode a header value as an RFC 2047 encoded word when it needs it.

    >>> format_header_value("Jane Doe")
    'Jane Doe'
    >>> format_header_value("José")
    '=?UTF-8?B?Sm9zw6k=?='
    """
    if _NEEDS_ENCODING.search(raw):
        encoded = base64.b64encode(raw.encode("utf-8")).decode("ascii")
        return f"=?UTF-8?B?{encoded}?="
    return raw


def compose_message(sender: ResolvedSender, request: SendRequest) -> ComposedMessage:
    """
    Lay out the message headers and HTML body.

    The body only gets its newlines turned into <br>; other HTML-special
    characters pass through untouched.
    """
    from_header = sender.from_header
    headers = [
        ("MIME-Version", "1.0"),
        ("Content-Type", "text/html; charset=UTF-8"),
        ("From", from_header),
        ("Reply-To", from_header),
        ("To", request.to),
        ("Subject", format_header_value(request.subject)),
    ]
    return ComposedMessage(headers=headers, body_html=request.body.replace("\n", "<br>"))


def encode_payload(message: ComposedMessage) -> str:
    """CRLF-joined message → URL-safe base64 without padding."""
    raw = message.as_text().encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")
