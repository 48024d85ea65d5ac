"""Tests for the diagnostic CLI."""

import json

import pytest
from click.testing import CliRunner
from qqcodec.main import cli


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.setenv("QQCODEC_CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("QQCODEC_CONFIG", raising=False)
    return CliRunner()


class TestCli:
    def test_decode(self, runner):
        result = runner.invoke(
            cli,
            ["decode", "hi <@!1>", "--mentions", '[{"id": "1", "user_name": "X"}]'],
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["brief"] == "hi <at:id=1,user_name=X>"
        assert data["elements"][1] == {"type": "at", "id": "1", "user_name": "X"}

    def test_encode(self, runner):
        elements = json.dumps([{"type": "reply", "message_id": "A"}, "hi"])
        result = runner.invoke(cli, ["encode", elements, "--event-id", "E"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["messages"]["msg_id"] == "A"
        assert data["messages"]["content"] == "hi"
        assert data["has_messages"] is True
        assert data["has_files"] is False
        assert data["brief"] == "<$reply,message_id=A>hi"

    def test_invalid_json(self, runner):
        result = runner.invoke(cli, ["decode", "x", "--mentions", "{nope"])
        assert result.exit_code != 0
