"""Tests for log redaction and message context."""

import io
import json
import logging

import pytest
import structlog
from qqcodec.core.decoder import decode_message
from qqcodec.core.encoder import Encoder
from qqcodec.transports.base import Transport
from qqcodec.utils.logging import (
    REDACTED,
    get_logger,
    message_context,
    redact_secrets,
    setup_logging,
)


@pytest.fixture
def log_stream():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    structlog.contextvars.clear_contextvars()
    stream = io.StringIO()
    yield stream
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def records(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def redact(**fields):
    return redact_secrets(None, "info", {"event": "e", **fields})


class TestRedactSecrets:
    def test_sensitive_keys(self):
        out = redact(Authorization="QQBot tok", secret="s", access_token="t", expires_in=7200)
        assert out["Authorization"] == REDACTED
        assert out["secret"] == REDACTED
        assert out["access_token"] == REDACTED
        assert out["expires_in"] == 7200

    def test_nested_token_request(self):
        out = redact(payload={"appId": "app", "clientSecret": "s3cret"})
        assert out["payload"] == {"appId": "app", "clientSecret": REDACTED}

    def test_auth_header_in_text(self):
        out = redact(body="sent with Authorization: QQBot abc.DEF-123 ok")
        assert out["body"] == f"sent with Authorization: QQBot {REDACTED} ok"

    def test_token_response_body(self):
        out = redact(body='{"access_token":"abc","expires_in":"7200"}')
        assert out["body"] == f'{{"access_token":"{REDACTED}","expires_in":"7200"}}'

    def test_client_secret_assignment(self):
        assert redact(body="clientSecret=xyz")["body"] == f"clientSecret={REDACTED}"

    def test_header_pairs(self):
        out = redact(headers=[("Authorization", "QQBot tok")])
        assert out["headers"] == [("Authorization", f"QQBot {REDACTED}")]

    def test_message_content_untouched(self):
        out = redact(brief="<at:id=1> token talk", elements=3)
        assert out["brief"] == "<at:id=1> token talk"
        assert out["elements"] == 3


class TestMessageContext:
    def test_binds_and_unbinds(self):
        structlog.contextvars.clear_contextvars()
        with message_context(message_id="m1", event_id=None):
            assert structlog.contextvars.get_contextvars() == {"message_id": "m1"}
        assert structlog.contextvars.get_contextvars() == {}


class TestSetupLogging:
    def test_json_lines_are_redacted(self, log_stream):
        setup_logging("INFO", json_output=True, stream=log_stream)
        get_logger("qqcodec.tests").info("token_fetched", authorization="QQBot tok")
        logging.getLogger("qqcodec.tests.stdlib").warning("Authorization: QQBot tok")

        first, second = records(log_stream)
        assert first["event"] == "token_fetched"
        assert first["authorization"] == REDACTED
        assert first["level"] == "info"
        assert second["event"] == f"Authorization: QQBot {REDACTED}"

    def test_level_filters(self, log_stream):
        setup_logging("WARNING", json_output=True, stream=log_stream)
        get_logger("qqcodec.tests").info("hidden")
        assert records(log_stream) == []

    def test_debug_warns(self, log_stream):
        setup_logging("DEBUG", json_output=True, stream=log_stream)
        assert records(log_stream)[0]["event"] == "debug_logging_enabled"

    def test_decode_logs_carry_message_id(self, log_stream):
        setup_logging("DEBUG", json_output=True, stream=log_stream)
        decode_message({"id": "m9", "content": "hi"})
        decoded = [r for r in records(log_stream) if r["event"] == "message_decoded"]
        assert decoded[0]["message_id"] == "m9"
        assert structlog.contextvars.get_contextvars() == {}

    def test_encode_logs_carry_quote_ids(self, log_stream):
        setup_logging("DEBUG", json_output=True, stream=log_stream)
        Encoder().encode("hi", {"message_id": "m1", "event_id": "e1"})
        encoded = [r for r in records(log_stream) if r["event"] == "message_encoded"]
        assert encoded[0]["quote_msg_id"] == "m1"
        assert encoded[0]["quote_event_id"] == "e1"

    async def test_send_logs_carry_scene_and_target(self, log_stream):
        class NullTransport(Transport):
            platform_name = "null"

            async def start(self):
                pass

            async def stop(self):
                pass

            async def request(self, method, path, payload=None):
                return None

        setup_logging("INFO", json_output=True, stream=log_stream)
        await NullTransport().send_group_message("g1", "hi")
        sent = [r for r in records(log_stream) if r["event"] == "message_sent"]
        assert sent[0]["scene"] == "group"
        assert sent[0]["target"] == "g1"
        assert sent[0]["platform"] == "null"
