"""Unit tests for core/ordering.py"""

import logging

import pytest

from mdsite.core.ordering import SortKey, order_by, sort_key_func


@pytest.mark.parametrize("name,for_posts,expected", [
    ("title", False, SortKey.TITLE),
    ("url", False, SortKey.URL),
    ("title", True, SortKey.TITLE),
    ("layout", True, SortKey.LAYOUT),
    ("year", True, SortKey.YEAR),
    ("month", True, SortKey.MONTH),
    ("date", True, SortKey.DATE),
    ("day", True, SortKey.DATE),
])
def test_parse_known_fields(name, for_posts, expected):
    """Field names map to their SortKey."""
    assert SortKey.parse(name, for_posts) is expected


@pytest.mark.parametrize("name,for_posts", [
    ("date", False),
    ("layout", False),
    ("Title", False),
    ("bogus", True),
])
def test_parse_unknown_field_is_default(name, for_posts, caplog):
    """Unknown (or page-inapplicable) names yield DEFAULT with a warning."""
    with caplog.at_level(logging.WARNING):
        assert SortKey.parse(name, for_posts) is SortKey.DEFAULT
    assert f"Unknown sort field '{name}'" in caplog.text


def test_date_order_is_numeric(make_post):
    """Dates compare as integers: 2024-2-9 sorts before 2024-10-1."""
    posts = [make_post("2024", "10", "1", title="Oct"), make_post("2024", "2", "9", title="Feb")]
    order_by(posts, "date")
    assert [p.title for p in posts] == ["Feb", "Oct"]


def test_date_order_descending(posts):
    """Descending date order puts the newest post first."""
    order_by(posts, "date", ascending=False)
    assert [p.date for p in posts] == ["2023-06-15", "2023-01-01", "2022-12-31"]


def test_year_sort_is_stable(make_post):
    """Posts with equal keys keep their relative order."""
    posts = [
        make_post("2023", "05", "01", title="B"),
        make_post("2022", "01", "01", title="Old"),
        make_post("2023", "01", "01", title="A"),
    ]
    order_by(posts, "year")
    assert [p.title for p in posts] == ["Old", "B", "A"]


def test_month_sort(posts):
    """month compares the month number only."""
    order_by(posts, "month")
    assert [p.month for p in posts] == ["01", "06", "12"]


def test_layout_sort(make_post):
    """layout sorts lexically."""
    posts = [make_post("2023", "01", "01", layout="news"), make_post("2023", "01", "02", layout="blog")]
    order_by(posts, "layout")
    assert [p.layout for p in posts] == ["blog", "news"]


def test_pages_by_title_and_url(pages):
    """Pages sort by title or url."""
    order_by(pages, "title")
    assert [p.title for p in pages] == ["About", "Contact", "Index"]
    order_by(pages, "url", ascending=False)
    assert [p.url for p in pages] == ["index.html", "contact.html", "about.html"]


def test_pages_default_to_title(pages, caplog):
    """An unknown field on pages falls back to title order."""
    with caplog.at_level(logging.WARNING):
        order_by(pages, "date")
    assert [p.title for p in pages] == ["About", "Contact", "Index"]
    assert "ordering by title" in caplog.text


def test_posts_default_to_date(posts):
    """An unknown field on posts falls back to date order."""
    order_by(posts, "nope")
    assert [p.day for p in posts] == ["31", "01", "15"]


def test_empty_collection():
    """Ordering an empty collection is a no-op."""
    items = []
    order_by(items, "date", for_posts=True)
    assert items == []


def test_post_key_rejected_for_pages():
    """sort_key_func refuses post-only keys for pages."""
    with pytest.raises(ValueError):
        sort_key_func(SortKey.YEAR, for_posts=False)
