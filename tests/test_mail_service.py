"""
Gmail Relay — Mail Service Unit Tests
======================================

What:  Tests for MailService orchestration (archive, contacts, send, signatures).
How:   Uses the conftest StubProvider; no network, no HTTP layer.

What we test:
    ✅ Missing fields raise ValidationError before any provider is built
    ✅ Primary upstream failures become UpstreamError with fixed messages
    ✅ SENT label failure does not fail the send
    ✅ Response shaping (contacts defaults, signature defaults)
"""

import base64
from unittest.mock import MagicMock

import pytest

from gmail_relay.exceptions import ProviderError, UpstreamError, ValidationError
from gmail_relay.schemas.mail import SendRequest
from gmail_relay.services.mail_service import MailService
from gmail_relay.services.results import Degraded, Ok


def _decode(raw: str) -> str:
    return base64.urlsafe_b64decode(raw + "=" * (-len(raw) % 4)).decode("utf-8")


class TestArchive:

    @pytest.mark.asyncio
    async def test_archive_removes_inbox_label(self, stub_provider, provider_factory, provider_tokens):
        service = MailService(provider_factory)

        result = await service.archive("18c2f", "tok")

        assert result.success is True
        assert result.message == "Email archived successfully"
        assert result.gmail_id == "18c2f"
        assert stub_provider.calls_to("modify_labels") == [("18c2f", None, ["INBOX"])]
        assert provider_tokens == ["tok"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("gmail_id,token", [(None, "tok"), ("18c2f", None), ("", "tok")])
    async def test_archive_missing_fields(self, gmail_id, token):
        factory = MagicMock()
        service = MailService(factory)

        with pytest.raises(ValidationError, match="gmail_id and access_token"):
            await service.archive(gmail_id, token)

        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_archive_validation_lists_only_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            await MailService(MagicMock()).archive("18c2f", None)

        assert exc_info.value.fields == ["access_token"]
        assert exc_info.value.context["fields"] == ["access_token"]

    @pytest.mark.asyncio
    async def test_archive_upstream_failure(self, stub_provider, provider_factory):
        stub_provider.errors["modify_labels"] = ProviderError("Requested entity was not found.", status=404)
        service = MailService(provider_factory)

        with pytest.raises(UpstreamError) as exc_info:
            await service.archive("missing", "tok")

        assert exc_info.value.message == "Failed to archive email"
        assert exc_info.value.details == "Requested entity was not found."


class TestContacts:

    @pytest.mark.asyncio
    async def test_contacts_passthrough(self, make_provider):
        connection = {"resourceName": "people/c1", "names": [{"displayName": "Ann"}]}
        provider = make_provider(connections={"connections": [connection], "totalItems": 1})
        service = MailService(lambda token: provider)

        result = await service.fetch_contacts("tok")

        assert result.contacts == [connection]
        assert result.total_results == 1
        assert provider.calls_to("list_connections") == [
            (1000, "names,emailAddresses,phoneNumbers,photos"),
        ]

    @pytest.mark.asyncio
    async def test_contacts_defaults_when_upstream_is_empty(self, stub_provider, provider_factory):
        result = await MailService(provider_factory).fetch_contacts("tok")

        assert result.contacts == []
        assert result.total_results == 0

    @pytest.mark.asyncio
    async def test_contacts_missing_token(self):
        with pytest.raises(ValidationError, match="Missing access_token query parameter"):
            await MailService(MagicMock()).fetch_contacts(None)

    @pytest.mark.asyncio
    async def test_contacts_upstream_failure(self, stub_provider, provider_factory):
        stub_provider.errors["list_connections"] = ProviderError("quota exceeded")

        with pytest.raises(UpstreamError, match="Failed to fetch contacts"):
            await MailService(provider_factory).fetch_contacts("tok")


class TestSend:

    def _request(self, **overrides) -> SendRequest:
        fields = {
            "to": "a@b.com",
            "subject": "Hi",
            "body": "line1\nline2",
            "access_token": "tok",
        }
        fields.update(overrides)
        return SendRequest(**fields)

    @pytest.mark.asyncio
    async def test_send_composes_and_labels(self, stub_provider, provider_factory):
        service = MailService(provider_factory)

        result = await service.send(self._request(from_name="Jane Doe"))

        assert result.success is True
        assert result.message_id == "msg-123"

        (raw,), = stub_provider.calls_to("send_raw")
        decoded = _decode(raw)
        assert "From: Jane Doe <me@x.com>\r\n" in decoded
        assert "Reply-To: Jane Doe <me@x.com>\r\n" in decoded
        assert decoded.endswith("\r\n\r\nline1<br>line2")

        assert stub_provider.calls_to("modify_labels") == [("msg-123", ["SENT"], None)]

    @pytest.mark.asyncio
    async def test_send_succeeds_when_label_fails(self, stub_provider, provider_factory):
        stub_provider.errors["modify_labels"] = ProviderError("Invalid label: SENT")

        result = await MailService(provider_factory).send(self._request())

        assert result.success is True
        assert result.message_id == "msg-123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["to", "subject", "body", "access_token"])
    async def test_send_missing_field(self, missing):
        factory = MagicMock()

        with pytest.raises(ValidationError, match="to, subject, body, and access_token"):
            await MailService(factory).send(self._request(**{missing: None}))

        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_validation_lists_only_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            await MailService(MagicMock()).send(self._request(subject="", body=None))

        assert exc_info.value.message == "Missing required fields: to, subject, body, and access_token"
        assert exc_info.value.fields == ["subject", "body"]

    @pytest.mark.asyncio
    async def test_send_own_address_failure(self, stub_provider, provider_factory):
        stub_provider.errors["get_own_address"] = ProviderError("Invalid Credentials", status=401)

        with pytest.raises(UpstreamError) as exc_info:
            await MailService(provider_factory).send(self._request())

        assert exc_info.value.message == "Failed to send email"
        assert exc_info.value.details == "Invalid Credentials"
        assert stub_provider.call_count("send_raw") == 0

    @pytest.mark.asyncio
    async def test_send_failure(self, stub_provider, provider_factory):
        stub_provider.errors["send_raw"] = ProviderError("Daily sending quota exceeded")

        with pytest.raises(UpstreamError, match="Failed to send email"):
            await MailService(provider_factory).send(self._request())

        assert stub_provider.call_count("modify_labels") == 0


class TestApplyLabels:

    @pytest.mark.asyncio
    async def test_ok_outcome(self, stub_provider, provider_factory):
        outcome = await MailService(provider_factory).apply_labels(stub_provider, "m1", ["SENT"])
        assert outcome == Ok(["SENT"])

    @pytest.mark.asyncio
    async def test_missing_message_id_is_degraded(self, stub_provider, provider_factory):
        outcome = await MailService(provider_factory).apply_labels(stub_provider, None, ["SENT"])
        assert isinstance(outcome, Degraded)
        assert stub_provider.call_count("modify_labels") == 0


class TestSignatures:

    @pytest.mark.asyncio
    async def test_signatures_mapping(self, make_provider):
        provider = make_provider(send_as=[
            {
                "sendAsEmail": "me@x.com",
                "displayName": "Jane Doe",
                "signature": "<div>Jane</div>",
                "isPrimary": True,
                "isDefault": True,
            },
            {"sendAsEmail": "alias@x.com"},
        ])

        result = await MailService(lambda token: provider).list_signatures("tok")

        first, second = result.signatures
        assert first.email == "me@x.com"
        assert first.signature == "<div>Jane</div>"
        assert first.is_primary is True
        assert second.display_name == ""
        assert second.signature == ""
        assert second.is_default is False
        assert second.is_primary is False

    @pytest.mark.asyncio
    async def test_signatures_missing_token(self):
        with pytest.raises(ValidationError, match="Missing required field: access_token"):
            await MailService(MagicMock()).list_signatures("")

    @pytest.mark.asyncio
    async def test_signatures_upstream_failure(self, stub_provider, provider_factory):
        stub_provider.errors["list_send_as"] = ProviderError("forbidden", status=403)

        with pytest.raises(UpstreamError, match="Failed to fetch signatures"):
            await MailService(provider_factory).list_signatures("tok")
