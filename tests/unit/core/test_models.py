"""Unit tests for core/models.py"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mdsite.core.models import MarkdownDoc, PageResult, Post


def _post(**kw) -> Post:
    data = dict(
        title="T", url="t.html", source_file=Path("t.md"), output_file=Path("out/t.html"),
        layout="blog", year="2024", month="02", day="09",
    )
    data.update(kw)
    return Post(**data)


def test_post_date_parts():
    """Integer parts are derived from the string fields; date joins them with '-'."""
    post = _post()
    assert (post.year_int, post.month_int, post.day_int) == (2024, 2, 9)
    assert post.date == "2024-02-09"


@pytest.mark.parametrize("field", ["year", "month", "day"])
def test_post_rejects_non_numeric_date(field):
    """Date parts must be digits."""
    with pytest.raises(ValidationError):
        _post(**{field: "x1"})


def test_post_is_frozen():
    """Records are immutable once discovered."""
    post = _post()
    with pytest.raises(ValidationError):
        post.title = "changed"


def test_markdown_doc_title_defaults_to_none():
    assert MarkdownDoc(html="<p>x</p>").title is None


def test_page_result_ok():
    """A result is ok until it carries an error."""
    assert PageResult(Path("a"), Path("b")).ok
    assert not PageResult(Path("a"), Path("b"), error=ValueError("x")).ok
