"""Build orchestration: load site variables, discover content, render pages and posts"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from mdsite.config import Settings
from mdsite.core.discover import LAYOUT_DIR, discover_pages, discover_posts, layout_file
from mdsite.core.errors import MdsiteError
from mdsite.core.markdown.blocks import convert_file
from mdsite.core.models import Page, PageResult, Post
from mdsite.core.site import load_site_variables
from mdsite.core.template.environment import Variables
from mdsite.core.template.render import TemplateRenderer
from mdsite.core.utils.fs import write_output


logger = logging.getLogger(__name__)

ASSETS_DIR = "assets"


@dataclass
class BuildReport:
    """Per-page results plus the number of skipped (warned) post files."""
    results:  list[PageResult] = field(default_factory=list)
    warnings: int = 0

    @property
    def failed(self) -> list[PageResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


def _render_to(renderer: TemplateRenderer, template: Path, output: Path, source: Path) -> PageResult:
    """Render template to output; syntax and resource errors fail this page only."""
    try:
        write_output(output, renderer.render_file(template))
    except (MdsiteError, OSError) as e:
        logger.error("Failed to process '%s': %s", source, e)
        return PageResult(source=source, output=output, error=e)
    return PageResult(source=source, output=output)


def render_page(renderer: TemplateRenderer, page: Page) -> PageResult:
    logger.info("Processing page %s", page.source_file)
    renderer.variables.update({"page.title": page.title, "page.url": page.url})
    return _render_to(renderer, page.source_file, page.output_file, page.source_file)


def post_variables(post: Post, body: str) -> dict[str, str]:
    """Global post.* keys for one post; page.* mirrors the post."""
    return {
        "post.title":      post.title,
        "post.url":        post.url,
        "post.layout":     post.layout,
        "post.body":       body,
        "post.year":       post.year,
        "post.month":      post.month,
        "post.day":        post.day,
        "post.date":       post.date,
        "post.month_name": post.month_name,
        "page.title":      post.title,
        "page.url":        post.url,
    }


def render_post(renderer: TemplateRenderer, post: Post, layout_dir: Path) -> PageResult:
    """Convert the post's markdown into post.body and render it through its layout."""
    logger.info("Processing post %s", post.source_file)
    try:
        doc = convert_file(post.source_file)
    except MdsiteError as e:
        logger.error("Failed to process '%s': %s", post.source_file, e)
        return PageResult(source=post.source_file, output=post.output_file, error=e)
    renderer.variables.update(post_variables(post, doc.html))
    return _render_to(renderer, layout_file(layout_dir, post.layout), post.output_file, post.source_file)


def copy_assets(src: Path, dest: Path) -> bool:
    """Recursively copy src over dest. Returns False when there is no assets directory."""
    if not src.is_dir():
        logger.info("No assets directory at %s", src)
        return False
    logger.info("Copying assets %s -> %s", src, dest)
    shutil.copytree(src, dest, dirs_exist_ok=True)
    return True


def build_site(site_dir: Path, output_dir: Path, settings: Optional[Settings] = None) -> BuildReport:
    """Render every page and post of the site under site_dir into output_dir.

    Raises SiteConfigError when the site file is missing or malformed; page
    level failures are reported in the returned BuildReport.
    """
    settings = settings or Settings()
    site_file = Path(site_dir) / settings.site_file
    output_dir = Path(output_dir)

    variables = Variables(load_site_variables(site_file))
    template_dir = Path(variables["site.template_dir"])
    posts_dir = Path(variables["site.posts_src_dir"])
    layout_dir = template_dir / LAYOUT_DIR

    output_dir.mkdir(parents=True, exist_ok=True)
    pages = discover_pages(template_dir, output_dir)
    posts, warnings = discover_posts(
        posts_dir, layout_dir, output_dir, variables.as_dict(), settings.extensions, exclude=[site_file],
    )
    variables.update({"site.num_pages": str(len(pages)), "site.num_posts": str(len(posts))})

    renderer = TemplateRenderer(template_dir, variables, pages, posts, settings.placeholder)
    report = BuildReport(warnings=warnings)
    # snapshots: loops may reorder the collections in place while rendering
    for page in list(pages):
        report.results.append(render_page(renderer, page))
    for post in list(posts):
        report.results.append(render_post(renderer, post, layout_dir))

    if settings.copy_assets:
        copy_assets(template_dir / ASSETS_DIR, output_dir / ASSETS_DIR)
    return report
