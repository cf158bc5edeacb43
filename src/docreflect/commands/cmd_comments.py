"""Convert TypeScript sources and show the comments attached to each reflection."""

from __future__ import annotations

import click

from docreflect.config import find_project_root, get_exclude_patterns
from docreflect.exit_codes import EXIT_PARTIAL, ParseFailureError, SourceNotFoundError
from docreflect.output.formatter import bullet_list, json_envelope, to_json
from docreflect.output.reflections import collect_entries, format_entry, is_documented


@click.command()
@click.argument("paths", nargs=-1, required=True)
@click.option("--all", "include_all", is_flag=True, help="Include reflections without documentation")
@click.pass_context
def comments(ctx, paths, include_all):
    """Show parsed doc comments for every declaration in PATHS."""
    json_mode = ctx.obj.get("json") if ctx.obj else False
    from docreflect.converter.converter import Converter
    from docreflect.index.discovery import expand_paths

    exclude = get_exclude_patterns(find_project_root())
    files = expand_paths(list(paths), exclude)
    if not files:
        raise SourceNotFoundError()

    context = Converter().convert(files)
    if not context.files:
        raise ParseFailureError()

    entries = collect_entries(context.project, include_all=include_all)
    summary = {
        "files": len(context.files),
        "failed_files": len(context.failed_files),
        "reflections": len(context.project.reflections),
        "documented": sum(1 for r in context.project.iter_reflections() if is_documented(r)),
    }

    if json_mode:
        click.echo(to_json(json_envelope(
            "comments",
            summary=summary,
            entries=entries,
            failed_files=context.failed_files,
        )))
    else:
        click.echo(
            f"{summary['files']} files, {summary['reflections']} reflections, "
            f"{summary['documented']} documented\n"
        )
        for entry in entries:
            click.echo(format_entry(entry))
        if context.failed_files:
            click.echo("")
            click.echo(bullet_list("Skipped:", context.failed_files))

    if context.failed_files:
        ctx.exit(EXIT_PARTIAL)
