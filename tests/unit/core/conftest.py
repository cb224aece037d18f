"""Shared fixtures for core unit tests"""

from pathlib import Path

import pytest

from mdsite.core.models import Page, Post
from mdsite.core.template.environment import Variables


def _make_page(title: str, url: str = None) -> Page:
    url = url or f"{title.lower()}.html"
    return Page(title=title, url=url, source_file=Path(url), output_file=Path("out") / url)


def _make_post(year: str, month: str, day: str, title: str = None, layout: str = "blog") -> Post:
    title = title or f"Post {year}{month}{day}"
    url = f"{year}{month}{day}_{title.lower().replace(' ', '-')}.html"
    return Post(
        title=title, url=url, source_file=Path(f"{layout}-{year}{month}{day}-{title}.md"),
        output_file=Path("out") / url, layout=layout, year=year, month=month, day=day,
    )


@pytest.fixture(name="make_page")
def make_page_fixture():
    return _make_page


@pytest.fixture(name="make_post")
def make_post_fixture():
    return _make_post


@pytest.fixture(name="pages")
def pages_fixture():
    return [_make_page("Index"), _make_page("About"), _make_page("Contact")]


@pytest.fixture(name="posts")
def posts_fixture():
    """Three posts in neither date nor title order."""
    return [
        _make_post("2023", "06", "15", title="Summer"),
        _make_post("2022", "12", "31", title="Eve"),
        _make_post("2023", "01", "01", title="New Year"),
    ]


@pytest.fixture(name="variables")
def variables_fixture():
    return Variables({"site.name": "Example", "name": "World"})
