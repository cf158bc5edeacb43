from docreflect.cli import cli

cli()
