"""Site content records: pages, posts, markdown results and per-page render outcomes"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, computed_field, field_validator


class Page(BaseModel):
    """A template page rendered to a single output file."""
    model_config = ConfigDict(frozen=True)

    title:       str
    url:         str                # relative url, also the output file name
    source_file: Path
    output_file: Path


class Post(Page):
    """A dated markdown post rendered through a layout template.

    Integer date parts are derived from the string fields on access, so they
    cannot drift from them.
    """
    layout:     str
    year:       str
    month:      str
    day:        str
    month_name: str = ""

    @field_validator("year", "month", "day")
    @classmethod
    def _numeric(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError(f"date part must be numeric, got {v!r}")
        return v

    @computed_field
    @property
    def year_int(self) -> int:
        return int(self.year)

    @computed_field
    @property
    def month_int(self) -> int:
        return int(self.month)

    @computed_field
    @property
    def day_int(self) -> int:
        return int(self.day)

    @property
    def date(self) -> str:
        return f"{self.year}-{self.month}-{self.day}"


@dataclass(frozen=True)
class MarkdownDoc:
    """Markdown conversion result; title is set only when the source carries a title override."""
    html:  str
    title: Optional[str] = None


@dataclass
class PageResult:
    """Outcome of rendering one page or post."""
    source: Path
    output: Path
    error:  Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None
