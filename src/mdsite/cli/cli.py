"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd, markdown_cmd, render_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Static site generator for markdown posts and templates")

app.command(name="build")(build_cmd)
app.command(name="markdown")(markdown_cmd)
app.command(name="render")(render_cmd)
