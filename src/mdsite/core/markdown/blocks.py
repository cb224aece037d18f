"""Line-oriented markdown block converter producing an HTML string"""

import re
from pathlib import Path
from typing import Optional

from mdsite.core.markdown.inline import format_inline
from mdsite.core.models import MarkdownDoc
from mdsite.core.template.lexer import Cursor, TokenKind, next_token, unescape_path
from mdsite.core.utils.fs import read_source


MAX_HEADING_LEVEL = 6
CODE_INDENT = " " * 6
TAB_WIDTH = 4

LINE_SPLIT_RE = re.compile(r'\r?\n')
LIST_ITEM_RE = re.compile(r'^(?P<indent>[ \t]*)(?P<marker>\*|\d+\.)[ \t]+(?P<text>.*)$')
ORDERED_ITEM_RE = re.compile(r'^\d+\.[ \t]')
QUOTE_RE = re.compile(r'^(?P<marks>[ \t]*>(?:[ \t]*>)*)(?P<text>.*)$')


def _is_blank(line: str) -> bool:
    return not line.strip()


def _indent_width(indent: str) -> int:
    return sum(TAB_WIDTH if c == '\t' else 1 for c in indent)


def parse_title_directive(line: str) -> Optional[str]:
    """Return the title of a {{"Title"}} line, or None if the line has any other shape."""
    cursor = Cursor(line.strip())
    if next_token(cursor).kind is not TokenKind.EXPR_START:
        return None
    title = next_token(cursor)
    if title.kind is not TokenKind.PATH:
        return None
    if next_token(cursor).kind is not TokenKind.EXPR_END:
        return None
    if next_token(cursor).kind not in (TokenKind.EOL, TokenKind.EOF):
        return None
    return unescape_path(title.text)


def _split_title(lines: list[str]) -> tuple[Optional[str], int]:
    """Return (title, first body line index); (None, 0) when the first non-blank line is not a title."""
    for i, line in enumerate(lines):
        if _is_blank(line):
            continue
        title = parse_title_directive(line)
        return (title, i + 1) if title is not None else (None, 0)
    return None, 0


class BlockConverter:
    """Walks source lines once, emitting one HTML fragment per block."""

    def __init__(self, lines: list[str], start: int = 0):
        self.lines = lines
        self.i = start

    def _current(self) -> Optional[str]:
        return self.lines[self.i] if self.i < len(self.lines) else None

    def convert(self) -> list[str]:
        blocks = []
        while (line := self._current()) is not None:
            if _is_blank(line):
                self.i += 1
                continue
            blocks.append(self._block(line))
        return blocks

    def _block(self, line: str) -> str:
        if line.startswith('#'):
            level = len(line) - len(line.lstrip('#'))
            if level <= MAX_HEADING_LEVEL:
                return self._heading(line, level)
            # deeper than h6: kept as paragraph text, hashes included
            return self._paragraph()
        if line.startswith('*') and LIST_ITEM_RE.match(line):
            return self._list(0)
        if ORDERED_ITEM_RE.match(line):
            return self._list(0)
        if line.startswith(CODE_INDENT):
            return self._code()
        if line.startswith('>'):
            return self._quote()
        return self._paragraph()

    def _heading(self, line: str, level: int) -> str:
        self.i += 1
        return f"<h{level}>{format_inline(line[level:].strip())}</h{level}>"

    def _list(self, indent: int) -> str:
        """Consume contiguous items at this indent; deeper items nest inside the previous <li>."""
        first = LIST_ITEM_RE.match(self.lines[self.i])
        tag = 'ul' if first.group('marker') == '*' else 'ol'
        items: list[str] = []

        while (line := self._current()) is not None:
            m = LIST_ITEM_RE.match(line)
            if not m:
                break
            width = _indent_width(m.group('indent'))
            if width < indent:
                break
            if width > indent and items:
                items[-1] += self._list(width)
                continue
            items.append(format_inline(m.group('text').strip()))
            self.i += 1

        body = "\n".join(f"<li>{item}</li>" for item in items)
        return f"<{tag}>\n{body}\n</{tag}>"

    def _code(self) -> str:
        code = []
        while (line := self._current()) is not None and not _is_blank(line):
            code.append(line[len(CODE_INDENT):] if line.startswith(CODE_INDENT) else line)
            self.i += 1
        return "<pre><code>" + "".join(f"{c}\n" for c in code) + "</code></pre>"

    def _quote(self) -> str:
        parts: list[str] = []
        depth = 0
        while (line := self._current()) is not None and not _is_blank(line):
            m = QUOTE_RE.match(line)
            if m:
                new_depth = m.group('marks').count('>')
                text = m.group('text')
            else:
                new_depth, text = depth, line   # lazy continuation line

            if new_depth > depth:
                parts.append("<blockquote><p>" * (new_depth - depth))
            elif new_depth < depth:
                parts.append("</p></blockquote>" * (depth - new_depth))
            elif parts:
                parts.append("<br>")
            parts.append(format_inline(text.strip()))
            depth = new_depth
            self.i += 1

        parts.append("</p></blockquote>" * depth)
        return "".join(parts)

    def _paragraph(self) -> str:
        text = []
        while (line := self._current()) is not None and not _is_blank(line):
            text.append(format_inline(line.strip()))
            self.i += 1
        return "<p>" + "<br>".join(text) + "</p>"


def markdown_to_html(text: str) -> MarkdownDoc:
    """Convert markdown source to HTML, honouring a leading {{"Title"}} override."""
    lines = LINE_SPLIT_RE.split(text)
    title, start = _split_title(lines)
    blocks = BlockConverter(lines, start).convert()
    return MarkdownDoc(html="\n".join(blocks), title=title)


def convert_file(path: Path) -> MarkdownDoc:
    """Read and convert a UTF-8 markdown file."""
    return markdown_to_html(read_source(path))


def read_title_override(path: Path) -> Optional[str]:
    """Return the title override of a markdown file, or None."""
    title, _ = _split_title(LINE_SPLIT_RE.split(read_source(path)))
    return title
