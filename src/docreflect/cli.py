"""Click CLI entry point with lazy-loaded subcommands."""

import logging
import os
import sys

# Fix Unicode output on Windows consoles (cp1253, cp1252, etc.)
if sys.platform == "win32" and not os.environ.get("PYTHONIOENCODING"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import click


# Lazy-loading command group: imports command modules only when invoked.
# This keeps tree-sitter grammars out of `--help` and `parse`.
_COMMANDS = {
    "comments": ("docreflect.commands.cmd_comments", "comments"),
    "parse":    ("docreflect.commands.cmd_parse",    "parse"),
    "plugins":  ("docreflect.commands.cmd_plugins",  "plugins"),
    "config":   ("docreflect.commands.cmd_config",   "config"),
}


class LazyGroup(click.Group):
    """A Click group that lazy-loads command modules on first access."""

    def list_commands(self, ctx):
        return sorted(_COMMANDS.keys())

    def get_command(self, ctx, cmd_name):
        if cmd_name not in _COMMANDS:
            return None
        module_path, attr_name = _COMMANDS[cmd_name]
        import importlib
        mod = importlib.import_module(module_path)
        return getattr(mod, attr_name)


@click.group(cls=LazyGroup)
@click.version_option(package_name="docreflect")
@click.option('--json', 'json_mode', is_flag=True, help='Output in JSON format')
@click.option('--verbose', '-v', is_flag=True, help='Log conversion details to stderr')
@click.pass_context
def cli(ctx, json_mode, verbose):
    """docreflect: doc comment extraction for TypeScript reflections."""
    ctx.ensure_object(dict)
    ctx.obj['json'] = json_mode
    ctx.obj['verbose'] = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )
