"""Tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from src.models.config_models import AdapterConfig
from src.models.messenger import (
    AuthenticationEvent,
    MessengerWebhookPayload,
    OutboundTextMessage,
    SendMessageRequest,
)


class TestAdapterConfig:
    def test_from_settings(self, mock_settings):
        config = AdapterConfig.from_settings(mock_settings)

        assert config.app_secret == "test-app-secret"
        assert config.validation_token == "test-verify-token"
        assert config.page_access_token == "test-page-token"
        assert config.webhook_path == "/webhook"
        assert config.send_api_path == "/send"
        assert config.channel_name == "FacebookMessenger"

    def test_is_immutable(self, adapter_config):
        with pytest.raises(ValidationError):
            adapter_config.page_access_token = "other"


class TestOutboundTextMessage:
    def test_send_api_payload(self):
        message = OutboundTextMessage(recipient_id="user-1", text="hello")

        assert message.to_send_api_payload() == {
            "recipient": {"id": "user-1"},
            "message": {"text": "hello"},
        }


class TestSendMessageRequest:
    def test_parses_camel_case_body(self):
        request = SendMessageRequest.model_validate_json(
            '{"recipientId": "u", "messageText": "hi", "pageAccessToken": "t"}'
        )

        assert request.recipient_id == "u"
        assert request.message_text == "hi"
        assert request.page_access_token == "t"

    @pytest.mark.parametrize(
        "body",
        [
            '{"recipientId": "u", "messageText": "hi"}',
            '{"recipient_id": "u", "message_text": "hi", "page_access_token": "t"}',
            '{"recipientId": 1, "messageText": "hi", "pageAccessToken": "t"}',
            "[]",
            "not json",
        ],
    )
    def test_rejects_malformed_body(self, body):
        with pytest.raises(ValidationError):
            SendMessageRequest.model_validate_json(body)


class TestWebhookPayload:
    def test_defaults(self):
        payload = MessengerWebhookPayload.model_validate({})

        assert payload.object is None
        assert payload.entry == []

    def test_malformed_entries_pass_envelope_validation(self):
        payload = MessengerWebhookPayload.model_validate(
            {
                "object": "page",
                "entry": [{"id": 123, "time": "now", "messaging": None}, "oops"],
            }
        )

        assert len(payload.entry) == 2


class TestEvents:
    def test_events_are_immutable(self):
        event = AuthenticationEvent(sender_id="u")

        with pytest.raises(ValidationError):
            event.sender_id = "other"
