"""Error taxonomy for template rendering, markdown conversion and site loading"""

from pathlib import Path


class MdsiteError(Exception):
    """Base class for errors that abort the render of a page or the build."""


class TemplateSyntaxError(MdsiteError):
    """A required token was not found where the directive grammar expects it."""

    def __init__(self, message: str, found=None, expected=None, position: int | None = None):
        details = []
        if found is not None:
            details.append(f"found {found.name}")
        if expected is not None:
            details.append(f"expected {expected.name}")
        if position is not None:
            details.append(f"at offset {position}")
        super().__init__(f"{message} ({', '.join(details)})" if details else message)
        self.found = found
        self.expected = expected
        self.position = position


class TemplateResourceError(MdsiteError):
    """An included template or a markdown source could not be read."""

    def __init__(self, path: Path, cause: Exception = None):
        super().__init__(f"Unable to read '{path}'" + (f": {cause}" if cause else ""))
        self.path = path
        self.cause = cause


class SiteConfigError(MdsiteError):
    """The site variable file is missing or malformed."""
