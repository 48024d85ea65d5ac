"""Diagnostic CLI: decode templates and encode elements from the shell."""

from __future__ import annotations

import json
from typing import Any

import click

from qqcodec.config import load_settings
from qqcodec.core.decoder import decode_message
from qqcodec.core.encoder import Encoder
from qqcodec.elements import Quotable
from qqcodec.utils.logging import setup_logging


def _load_json(value: str | None, option: str) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e.msg}", param_hint=option) from e


def _echo(data: dict[str, Any]) -> None:
    click.echo(json.dumps(data, ensure_ascii=False, indent=2))


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str | None) -> None:
    """Transcode QQ bot rich messages."""
    settings = load_settings(config_path)
    if log_level:
        settings.log_level = log_level
    setup_logging(level=settings.log_level, json_output=settings.log_json)
    ctx.obj = settings


@cli.command()
@click.argument("template")
@click.option("--mentions", default=None, help="JSON list of mention records")
@click.option("--attachments", default=None, help="JSON list of attachment records")
def decode(template: str, mentions: str | None, attachments: str | None) -> None:
    """Decode TEMPLATE into elements and a brief."""
    payload: dict[str, Any] = {"content": template}
    parsed_mentions = _load_json(mentions, "--mentions")
    parsed_attachments = _load_json(attachments, "--attachments")
    if parsed_mentions is not None:
        payload["mentions"] = parsed_mentions
    if parsed_attachments is not None:
        payload["attachments"] = parsed_attachments

    result = decode_message(payload)
    _echo({
        "elements": [e.to_dict() for e in result.elements],
        "brief": result.brief,
    })


@cli.command()
@click.argument("elements")
@click.option("--message-id", default=None, help="Message id being replied to")
@click.option("--event-id", default=None, help="Event id being replied to")
@click.pass_obj
def encode(settings: Any, elements: str, message_id: str | None, event_id: str | None) -> None:
    """Encode ELEMENTS (a JSON string, element object or list) into wire payloads."""
    message = _load_json(elements, "ELEMENTS")
    source = Quotable(message_id=message_id, event_id=event_id)
    result = Encoder(settings.encoder).encode(message, source)
    _echo({
        "messages": result.messages.to_dict(),
        "files": result.files.to_dict(),
        "has_messages": result.has_messages,
        "has_files": result.has_files,
        "brief": result.brief,
    })


if __name__ == "__main__":
    cli()
