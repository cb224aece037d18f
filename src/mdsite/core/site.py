"""Site variable file: `key = "value"` lines parsed with the directive tokenizer"""

from pathlib import Path

from mdsite.core.errors import MdsiteError, SiteConfigError, TemplateSyntaxError
from mdsite.core.template.lexer import Cursor, TokenKind, next_token, require_token, unescape_path
from mdsite.core.utils.fs import read_source


MONTH_NAMES = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")
DIR_KEYS = ("site.template_dir", "site.posts_src_dir")


def default_site_variables() -> dict[str, str]:
    """Values used for keys the site file does not set."""
    values = {
        "site.name":          "Undefined",
        "site.url":           "http://",
        "site.template_dir":  "template",
        "site.posts_src_dir": "posts",
    }
    values.update({f"month_{i:02d}": name for i, name in enumerate(MONTH_NAMES, start=1)})
    return values


def _skip_line(cursor: Cursor) -> None:
    nl = cursor.source.find('\n', cursor.position, cursor.end)
    cursor.position = cursor.end if nl < 0 else nl


def parse_site_variables(text: str, origin: str = "<site>") -> dict[str, str]:
    """Parse `key = "value"` lines; blank lines and '#' comment lines are skipped."""
    cursor = Cursor(text)
    values: dict[str, str] = {}
    line = 1

    while True:
        key = next_token(cursor)
        if key.kind is TokenKind.EOF:
            break
        if key.kind is TokenKind.EOL:
            line += 1
            continue
        if key.kind is TokenKind.UNKNOWN and key.text == '#':
            _skip_line(cursor)
            continue
        if key.kind is not TokenKind.IDENTIFIER:
            raise SiteConfigError(f"{origin}:{line}: expected a variable name, found {key.kind.name}")

        try:
            require_token(cursor, TokenKind.ASSIGN)
            value = require_token(cursor, TokenKind.PATH)
        except TemplateSyntaxError as e:
            raise SiteConfigError(f"{origin}:{line}: {e}") from e
        values[key.text] = unescape_path(value.text)

        end = next_token(cursor)
        if end.kind is TokenKind.EOF:
            break
        if end.kind is not TokenKind.EOL:
            raise SiteConfigError(f"{origin}:{line}: unexpected {end.kind.name} after value")
        line += 1

    return values


def load_site_variables(site_file: Path) -> dict[str, str]:
    """Defaults overlaid with the site file; relative directories resolve against the file's folder."""
    site_file = Path(site_file)
    try:
        text = read_source(site_file)
    except MdsiteError as e:
        raise SiteConfigError(f"Unable to open site file '{site_file}'") from e

    values = default_site_variables()
    values.update(parse_site_variables(text, origin=str(site_file)))
    for key in DIR_KEYS:
        p = Path(values[key])
        if not p.is_absolute():
            values[key] = str(site_file.parent / p)
    return values
