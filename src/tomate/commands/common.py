"""Helpers shared by tomate commands."""

import click

from tomate.core.config import Config, load_config
from tomate.core.errors import TomateError


def get_config(ctx: click.Context) -> Config:
    """Load the config once per invocation and cache it on the context."""
    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        try:
            obj["config"] = load_config(obj.get("config_path"))
        except TomateError as e:
            raise click.ClickException(str(e)) from e
    return obj["config"]


def parse_tags(value: str | None) -> list[str]:
    """Split a comma-separated tag option."""
    if not value:
        return []
    return [tag.strip() for tag in value.split(",") if tag.strip()]
