"""Collection ordering: parse a field name once into a SortKey, then sort in place"""

import logging
from enum import Enum
from typing import Callable

from mdsite.core.models import Page, Post


logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    """Sortable fields; DEFAULT means title for pages and date for posts."""
    TITLE = "title"
    URL = "url"
    LAYOUT = "layout"
    YEAR = "year"
    MONTH = "month"
    DATE = "date"
    DEFAULT = "default"

    @classmethod
    def parse(cls, name: str, for_posts: bool) -> "SortKey":
        """Map an exact field name to a SortKey; unknown names log a warning and yield DEFAULT."""
        allowed = POST_FIELDS if for_posts else PAGE_FIELDS
        key = allowed.get(name)
        if key is None:
            fallback = "date" if for_posts else "title"
            logger.warning("Unknown sort field '%s'; ordering by %s", name, fallback)
            return cls.DEFAULT
        return key


PAGE_FIELDS: dict[str, SortKey] = {
    "title": SortKey.TITLE,
    "url":   SortKey.URL,
}

POST_FIELDS: dict[str, SortKey] = {
    **PAGE_FIELDS,
    "layout": SortKey.LAYOUT,
    "year":   SortKey.YEAR,
    "month":  SortKey.MONTH,
    "day":    SortKey.DATE,
    "date":   SortKey.DATE,
}


def _date_key(post: Post) -> tuple[int, int, int]:
    """Composite (year, month, day) integer key, so 2024-2-9 sorts before 2024-10-1."""
    return post.year_int, post.month_int, post.day_int


def sort_key_func(key: SortKey, for_posts: bool) -> Callable:
    """Return the key function implementing the given SortKey."""
    if key is SortKey.DEFAULT:
        key = SortKey.DATE if for_posts else SortKey.TITLE
    if key is SortKey.TITLE:
        return lambda item: item.title
    if key is SortKey.URL:
        return lambda item: item.url
    if not for_posts:
        raise ValueError(f"Sort key {key.value!r} does not apply to pages")
    if key is SortKey.LAYOUT:
        return lambda post: post.layout
    if key is SortKey.YEAR:
        return lambda post: post.year_int
    if key is SortKey.MONTH:
        return lambda post: post.month_int
    return _date_key


def order_by(
    collection: list[Page],
    field_name: str,
    ascending: bool = True,
    for_posts: bool | None = None,
    ) -> None:
    """Reorder a page or post collection in place by the named field (stable sort).

    for_posts selects the field table; when None it is inferred from the items.
    """
    if for_posts is None:
        for_posts = bool(collection) and all(isinstance(item, Post) for item in collection)
    key = SortKey.parse(field_name, for_posts)
    collection.sort(key=sort_key_func(key, for_posts), reverse=not ascending)
