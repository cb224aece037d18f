"""Template processor: literal copy plus {{ directive }} evaluation, includes and for-loops"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mdsite.core.errors import TemplateSyntaxError
from mdsite.core.models import Page, Post
from mdsite.core.ordering import order_by
from mdsite.core.template.environment import Variables
from mdsite.core.template.lexer import (
    Cursor,
    TokenKind,
    next_token,
    peek_token,
    require_token,
    unescape_path,
)
from mdsite.core.utils.fs import read_source


logger = logging.getLogger(__name__)

DIRECTIVE_START = "{{"
UNDEFINED = "UNDEFINED"


@dataclass(frozen=True)
class Advance:
    """How far a render scanned from its start offset, and whether it stopped at an {{endfor}}."""
    consumed:  int
    block_end: bool


def iteration_values(name: str, item: Page, index: int) -> dict[str, str]:
    """Build the <name>.<field> keys exposed to one loop body instance."""
    values = {"title": item.title, "url": item.url, "number": str(index)}
    if isinstance(item, Post):
        values.update({
            "layout":     item.layout,
            "year":       item.year,
            "month":      item.month,
            "day":        item.day,
            "date":       item.date,
            "month_name": item.month_name,
        })
    return {f"{name}.{k}": v for k, v in values.items()}


class TemplateRenderer:
    """Renders template sources against one shared environment and collections.

    Includes resolve against template_root, never against the including file.
    """

    def __init__(
        self,
        template_root: Path,
        variables: Variables,
        pages: Optional[list[Page]] = None,
        posts: Optional[list[Post]] = None,
        placeholder: str = UNDEFINED,
        ):
        self.template_root = Path(template_root)
        self.variables = variables
        self.pages = pages if pages is not None else []
        self.posts = posts if posts is not None else []
        self.placeholder = placeholder

    def render(self, source: str) -> str:
        """Render a whole top-level buffer and return the output text."""
        out: list[str] = []
        advance = self.process_source(source, 0, len(source), out)
        if advance.block_end:
            raise TemplateSyntaxError(
                "'endfor' without a matching 'for'", found=TokenKind.ENDFOR, position=advance.consumed,
            )
        return "".join(out)

    def render_file(self, path: Path) -> str:
        return self.render(read_source(path))

    def process_source(self, source: str, start: int, end: int, out: list[str], scan_only: bool = False) -> Advance:
        """Copy literal text to out and evaluate each directive found in source[start:end].

        Stops early, reporting block_end, when a directive makes no progress
        (an {{endfor}} closing the body this call is rendering). With scan_only
        directives are only parsed; nothing is looked up, read or reordered.
        """
        p = start
        while p < end:
            mark = source.find(DIRECTIVE_START, p, end)
            if mark < 0:
                out.append(source[p:end])
                p = end
                break
            if mark > p:
                out.append(source[p:mark])

            cursor = Cursor(source, mark, end)
            self.evaluate(cursor, out, scan_only)
            if cursor.position == mark:
                return Advance(mark - start, True)
            p = cursor.position
        return Advance(p - start, False)

    def evaluate(self, cursor: Cursor, out: list[str], scan_only: bool = False) -> None:
        """Evaluate the directive at the cursor, leaving the cursor just past it.

        An {{endfor}} is not consumed: the cursor is rewound to its '{{'.
        """
        opening = require_token(cursor, TokenKind.EXPR_START)
        token = next_token(cursor)

        if token.kind is TokenKind.IDENTIFIER:
            self._variable(cursor, token.text, out, scan_only)
        elif token.kind is TokenKind.INCLUDE:
            self._include(cursor, out, scan_only)
        elif token.kind is TokenKind.FOR:
            self._for_loop(cursor, out, scan_only)
        elif token.kind is TokenKind.ENDFOR:
            cursor.position = opening.start
        else:
            raise TemplateSyntaxError("Unexpected token at start of directive", found=token.kind, position=token.start)

    def _variable(self, cursor: Cursor, name: str, out: list[str], scan_only: bool) -> None:
        require_token(cursor, TokenKind.EXPR_END)
        if scan_only:
            return
        value = self.variables.get(name)
        if value is None:
            logger.warning("Unknown variable '%s'", name)
            value = self.placeholder
        out.append(value)

    def _include(self, cursor: Cursor, out: list[str], scan_only: bool) -> None:
        path_token = require_token(cursor, TokenKind.PATH)
        require_token(cursor, TokenKind.EXPR_END)
        if scan_only:
            return

        path = self.template_root / unescape_path(path_token.text)
        logger.debug("Including %s", path)
        source = read_source(path)
        advance = self.process_source(source, 0, len(source), out)
        if advance.block_end:
            raise TemplateSyntaxError(
                f"'endfor' without a matching 'for' in included file '{path}'",
                found=TokenKind.ENDFOR, position=advance.consumed,
            )

    def _for_loop(self, cursor: Cursor, out: list[str], scan_only: bool) -> None:
        name = require_token(cursor, TokenKind.IDENTIFIER).text
        require_token(cursor, TokenKind.IN)

        token = next_token(cursor)
        if token.kind is TokenKind.COLLECTION_PAGE:
            collection, for_posts = self.pages, False
        elif token.kind is TokenKind.COLLECTION_POST:
            collection, for_posts = self.posts, True
        else:
            raise TemplateSyntaxError(
                "Expected all_pages or all_posts after 'in'", found=token.kind, position=token.start,
            )

        order = peek_token(cursor)
        if order.kind in (TokenKind.ORDERBY_ASC, TokenKind.ORDERBY_DESC):
            next_token(cursor)
            field = require_token(cursor, TokenKind.IDENTIFIER).text
            if not scan_only:
                order_by(collection, field, ascending=order.kind is TokenKind.ORDERBY_ASC, for_posts=for_posts)

        body_start = require_token(cursor, TokenKind.EXPR_END).end

        if scan_only or not collection:
            # nothing to emit; scan once to find where the body ends
            advance = self._render_body(cursor, body_start, [], scan_only=True)
        else:
            with self.variables.scope() as frame:
                # snapshot: a nested loop may reorder the same collection
                for index, item in enumerate(list(collection)):
                    frame.update(iteration_values(name, item, index))
                    advance = self._render_body(cursor, body_start, out)

        cursor.position = body_start + advance.consumed
        require_token(cursor, TokenKind.EXPR_START)
        require_token(cursor, TokenKind.ENDFOR)
        require_token(cursor, TokenKind.EXPR_END)

    def _render_body(self, cursor: Cursor, body_start: int, out: list[str], scan_only: bool = False) -> Advance:
        advance = self.process_source(cursor.source, body_start, cursor.end, out, scan_only)
        if not advance.block_end:
            raise TemplateSyntaxError(
                "Missing 'endfor' for loop", found=TokenKind.EOF, expected=TokenKind.ENDFOR,
                position=body_start + advance.consumed,
            )
        return advance


def render_template(
    source: str,
    variables: Variables,
    template_root: Path = Path("."),
    pages: Optional[list[Page]] = None,
    posts: Optional[list[Post]] = None,
    placeholder: str = UNDEFINED,
    ) -> str:
    """Render a template string in one call."""
    return TemplateRenderer(template_root, variables, pages, posts, placeholder).render(source)
