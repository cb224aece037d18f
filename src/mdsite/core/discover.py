"""Page and post discovery from the template and posts directories"""

import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterable, Mapping, Optional

from mdsite.core.errors import MdsiteError
from mdsite.core.markdown.blocks import read_title_override
from mdsite.core.models import Page, Post


logger = logging.getLogger(__name__)

PAGE_SUFFIX = ".html"
LAYOUT_DIR = "layout"
POST_NAME_RE = re.compile(r'^(?P<layout>[^-]+)-(?P<stamp>\d{8})-(?P<title>.+)$')


def layout_file(layout_dir: Path, layout: str) -> Path:
    """Template used to render posts of the given layout."""
    return layout_dir / f"{layout.lower()}{PAGE_SUFFIX}"


def discover_pages(template_dir: Path, output_dir: Path) -> list[Page]:
    """Every .html file directly under template_dir, sorted by name.

    Title is the file name up to its first '.', url the lower-cased file name.
    """
    if not template_dir.is_dir():
        logger.warning("Template directory '%s' not found", template_dir)
        return []
    pages = []
    for path in sorted(p for p in template_dir.iterdir() if p.is_file() and p.suffix.lower() == PAGE_SUFFIX):
        url = path.name.lower()
        pages.append(Page(
            title=path.name.split('.', 1)[0],
            url=url,
            source_file=path,
            output_file=output_dir / url,
        ))
    return pages


def parse_post_name(path: Path) -> Optional[re.Match]:
    """Match `<layout>-<YYYYMMDD>-<title>` against the file stem."""
    return POST_NAME_RE.match(path.stem)


def _valid_date(year: str, month: str, day: str) -> bool:
    try:
        date(int(year), int(month), int(day))
    except ValueError:
        return False
    return True


def discover_posts(
    posts_dir: Path,
    layout_dir: Path,
    output_dir: Path,
    variables: Mapping[str, str],
    extensions: Iterable[str] = (".txt", ".md"),
    exclude: Iterable[Path] = (),
    ) -> tuple[list[Post], int]:
    """Collect posts named `<layout>-<YYYYMMDD>-<title>.<ext>`, newest file name first.

    Files with a malformed name, an invalid date, a missing layout or a url
    already taken by another post are skipped with a warning. Returns (posts, number of skipped files).
    """
    if not posts_dir.is_dir():
        logger.warning("Posts directory '%s' not found", posts_dir)
        return [], 0

    suffixes = {e.lower() for e in extensions}
    skip = {Path(p).resolve() for p in exclude}
    files = sorted(
        (p for p in posts_dir.iterdir()
         if p.is_file() and p.suffix.lower() in suffixes and p.resolve() not in skip),
        reverse=True,
    )

    posts: list[Post] = []
    claimed: dict[str, Path] = {}
    warnings = 0
    for path in files:
        m = parse_post_name(path)
        if not m:
            logger.warning("Skipping '%s': name is not <layout>-<YYYYMMDD>-<title>", path.name)
            warnings += 1
            continue

        stamp = m.group('stamp')
        year, month, day = stamp[:4], stamp[4:6], stamp[6:]
        if not _valid_date(year, month, day):
            logger.warning("Skipping '%s': invalid date %s", path.name, stamp)
            warnings += 1
            continue

        layout = m.group('layout')
        if not layout_file(layout_dir, layout).is_file():
            logger.warning("Skipping '%s': layout '%s' not found in %s", path.name, layout, layout_dir)
            warnings += 1
            continue

        try:
            override = read_title_override(path)
        except MdsiteError as e:
            logger.warning("Skipping '%s': %s", path.name, e)
            warnings += 1
            continue

        url = f"{stamp}_{m.group('title')}".lower() + PAGE_SUFFIX
        if url in claimed:
            logger.warning("Skipping '%s': url '%s' already used by '%s'", path.name, url, claimed[url].name)
            warnings += 1
            continue
        claimed[url] = path

        posts.append(Post(
            title=override or m.group('title'),
            url=url,
            source_file=path,
            output_file=output_dir / url,
            layout=layout,
            year=year,
            month=month,
            day=day,
            month_name=variables.get(f"month_{month}", ""),
        ))
    return posts, warnings
