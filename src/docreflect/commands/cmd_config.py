"""Manage per-project docreflect configuration (.docreflect/config.json)."""

from __future__ import annotations

import click

from docreflect.config import find_project_root, load_project_config, write_project_config
from docreflect.output.formatter import json_envelope, to_json


@click.command("config")
@click.option(
    "--exclude",
    "exclude_pattern",
    default=None,
    help="Add a glob pattern to the exclude list.",
)
@click.option(
    "--remove-exclude",
    "remove_pattern",
    default=None,
    help="Remove a glob pattern from the exclude list.",
)
@click.option(
    "--add-plugin",
    "plugin_module",
    default=None,
    help="Load this plugin module on every run.",
)
@click.pass_context
def config(ctx, exclude_pattern, remove_pattern, plugin_module):
    """Show or update .docreflect/config.json for the current project."""
    json_mode = ctx.obj.get("json") if ctx.obj else False
    root = find_project_root()
    current = load_project_config(root)

    updates: dict = {}
    excludes = list(current.get("exclude", []))
    if exclude_pattern and exclude_pattern not in excludes:
        excludes.append(exclude_pattern)
        updates["exclude"] = excludes
    if remove_pattern and remove_pattern in excludes:
        excludes.remove(remove_pattern)
        updates["exclude"] = excludes
    if plugin_module:
        modules = list(current.get("plugins", []))
        if plugin_module not in modules:
            modules.append(plugin_module)
            updates["plugins"] = modules

    if updates:
        write_project_config(updates, root)
        current = load_project_config(root)

    if json_mode:
        click.echo(to_json(json_envelope(
            "config",
            summary={"updated": bool(updates)},
            config=current,
        )))
    else:
        click.echo(to_json(current))
