"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.errors import MdsiteError, SiteConfigError
from mdsite.core.markdown.blocks import convert_file
from mdsite.core.pipeline import build_site
from mdsite.core.template.environment import Variables
from mdsite.core.template.render import TemplateRenderer
from mdsite.logging import setup_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _parse_vars(pairs: list[str]) -> dict[str, str]:
    """Turn ['key=value', ...] into a dict; a pair without '=' is an error."""
    values = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            _fail(f"Invalid --var '{pair}', expected key=value")
        values[key.strip()] = value
    return values


def build_cmd(
    site_dir: Annotated[str, typer.Argument(help="Site directory containing the site variable file")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    no_assets: Annotated[bool, typer.Option("--no-assets", help="Do not copy the assets directory")] = False,
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR")] = None,
    ):
    """Render every page and post of a site into the output directory."""
    settings = _settings(overrides={
        "output_dir": out, "log_level": log_level,
        "copy_assets": False if no_assets else None,
    })
    setup_logging(settings.log_level)
    output_dir = Path(settings.output_dir)

    try:
        report = build_site(Path(site_dir), output_dir, settings)
    except SiteConfigError as e:
        _fail("Invalid site configuration", e)

    for result in report.results:
        if result.ok:
            typer.echo(f"  {result.source} -> {result.output}")
        else:
            typer.echo(f"  FAILED {result.source}: {result.error}")
    built = len(report.results) - len(report.failed)
    typer.echo(
        f"Built {built} of {len(report.results)} page(s) to {output_dir}/ "
        f"({report.warnings} file(s) skipped)"
    )
    if not report.ok:
        raise typer.Exit(1)


def markdown_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to convert")],
    ):
    """Print the HTML conversion of a markdown file."""
    try:
        doc = convert_file(Path(path))
    except MdsiteError as e:
        _fail("Conversion failed", e)
    typer.echo(doc.html)


def render_cmd(
    template: Annotated[str, typer.Argument(help="Template file to render")],
    var: Annotated[Optional[list[str]], typer.Option("--var", help="Variable as key=value (repeatable)")] = None,
    root: Annotated[Optional[str], typer.Option("--template-root", help="Directory includes resolve against")] = None,
    ):
    """Render one template with ad-hoc variables and empty collections."""
    settings = _settings()
    setup_logging(settings.log_level)
    template_path = Path(template)
    renderer = TemplateRenderer(
        Path(root) if root else template_path.parent,
        Variables(_parse_vars(var or [])),
        placeholder=settings.placeholder,
    )
    try:
        text = renderer.render_file(template_path)
    except MdsiteError as e:
        _fail("Render failed", e)
    typer.echo(text, nl=False)
