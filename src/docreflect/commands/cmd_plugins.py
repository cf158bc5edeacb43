"""List converter plugins and plugin discovery errors."""

from __future__ import annotations

import click

from docreflect.exit_codes import EXIT_PARTIAL
from docreflect.output.formatter import json_envelope, to_json


@click.command()
@click.pass_context
def plugins(ctx):
    """Show the converter plugins a conversion would run."""
    json_mode = ctx.obj.get("json") if ctx.obj else False
    from docreflect.converter.converter import available_plugins
    from docreflect.plugins import get_plugin_errors

    names = list(available_plugins())
    errors = get_plugin_errors()

    if json_mode:
        click.echo(to_json(json_envelope(
            "plugins",
            summary={"plugins": len(names), "errors": len(errors)},
            plugins=names,
            errors=errors,
        )))
    else:
        for name in names:
            click.echo(name)
        for error in errors:
            click.echo(f"error: {error}", err=True)

    if errors:
        ctx.exit(EXIT_PARTIAL)
