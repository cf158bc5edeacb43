"""Tokenize a single raw doc comment."""

from __future__ import annotations

import click

from docreflect.comments.parser import parse_comment
from docreflect.output.formatter import indent, json_envelope, to_json


@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_context
def parse(ctx, source):
    """Parse one /** ... */ comment from SOURCE (stdin by default)."""
    json_mode = ctx.obj.get("json") if ctx.obj else False
    comment = parse_comment(source.read())

    if json_mode:
        click.echo(to_json(json_envelope(
            "parse",
            summary={"tags": len(comment.tags)},
            comment=comment.to_dict(),
        )))
        return

    click.echo(f"short: {comment.short_text}")
    if comment.text:
        click.echo("text:")
        click.echo(indent(comment.text))
    for tag in comment.tags:
        label = f"@{tag.tag_name}" + (f" {tag.param_name}" if tag.param_name else "")
        click.echo(f"{label}: {tag.text}")
