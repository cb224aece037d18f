"""Directive tokenizer: offset-based cursor and token stream over a template source"""

from dataclasses import dataclass, field
from enum import Enum

from mdsite.core.errors import TemplateSyntaxError


class TokenKind(str, Enum):
    """Token kinds recognised inside directives and site variable files"""
    ASSIGN = "ASSIGN"                   # =
    EOL = "EOL"                         # \n or \r\n
    EXPR_START = "EXPR_START"           # {{
    EXPR_END = "EXPR_END"               # }}
    INCLUDE = "INCLUDE"
    FOR = "FOR"
    ENDFOR = "ENDFOR"
    IN = "IN"
    IDENTIFIER = "IDENTIFIER"
    COLLECTION_PAGE = "COLLECTION_PAGE"  # all_pages
    COLLECTION_POST = "COLLECTION_POST"  # all_posts
    PATH = "PATH"                       # "quoted/text"
    ORDERBY_ASC = "ORDERBY_ASC"
    ORDERBY_DESC = "ORDERBY_DESC"
    UNKNOWN = "UNKNOWN"
    EOF = "EOF"


KEYWORDS: dict[str, TokenKind] = {
    'for':          TokenKind.FOR,
    'endfor':       TokenKind.ENDFOR,
    'in':           TokenKind.IN,
    'include':      TokenKind.INCLUDE,
    'all_pages':    TokenKind.COLLECTION_PAGE,
    'all_posts':    TokenKind.COLLECTION_POST,
    'orderby_asc':  TokenKind.ORDERBY_ASC,
    'orderby_desc': TokenKind.ORDERBY_DESC,
}

WHITESPACE = ' \t'
IDENT_START = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_')
IDENT_CHARS = IDENT_START | frozenset('0123456789.-')


@dataclass(frozen=True)
class Token:
    """A typed (start, end) view into the source; never an owned copy of the text."""
    kind:   TokenKind
    start:  int
    end:    int
    source: str = field(repr=False, compare=False)

    def __post_init__(self):
        if not 0 <= self.start <= self.end <= len(self.source):
            raise ValueError(f"Token span ({self.start}, {self.end}) outside source of length {len(self.source)}")

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]


@dataclass
class Cursor:
    """Scan state over one immutable source; several cursors may alias the same source."""
    source:   str
    position: int = 0
    end:      int | None = None

    def __post_init__(self):
        if self.end is None:
            self.end = len(self.source)
        if not 0 <= self.position <= self.end <= len(self.source):
            raise ValueError(f"Cursor range ({self.position}, {self.end}) outside source")

    @property
    def at_eof(self) -> bool:
        return self.position >= self.end

    def peek_char(self, offset: int = 0) -> str:
        """Return the character at position + offset, or '' past the end."""
        i = self.position + offset
        return self.source[i] if i < self.end else ''


def _skip_whitespace(cursor: Cursor) -> None:
    while not cursor.at_eof and cursor.source[cursor.position] in WHITESPACE:
        cursor.position += 1


def _scan_path(cursor: Cursor, start: int) -> Token:
    """Consume a double-quoted path; the token span excludes the quotes."""
    cursor.position += 1
    while not cursor.at_eof:
        c = cursor.source[cursor.position]
        if c == '\\' and cursor.position + 1 < cursor.end:
            cursor.position += 2
            continue
        if c == '"':
            token = Token(TokenKind.PATH, start + 1, cursor.position, cursor.source)
            cursor.position += 1
            return token
        cursor.position += 1
    # unterminated string
    return Token(TokenKind.UNKNOWN, start, cursor.position, cursor.source)


def next_token(cursor: Cursor) -> Token:
    """Consume leading whitespace and return the next token, advancing the cursor past it."""
    _skip_whitespace(cursor)
    start = cursor.position
    src = cursor.source

    if cursor.at_eof:
        return Token(TokenKind.EOF, start, start, src)

    c, nc = cursor.peek_char(), cursor.peek_char(1)

    if c == '{' and nc == '{':
        cursor.position += 2
        return Token(TokenKind.EXPR_START, start, cursor.position, src)
    if c == '}' and nc == '}':
        cursor.position += 2
        return Token(TokenKind.EXPR_END, start, cursor.position, src)
    if c == '=':
        cursor.position += 1
        return Token(TokenKind.ASSIGN, start, cursor.position, src)
    if c == '\n':
        cursor.position += 1
        return Token(TokenKind.EOL, start, cursor.position, src)
    if c == '\r' and nc == '\n':
        cursor.position += 2
        return Token(TokenKind.EOL, start, cursor.position, src)
    if c == '"':
        return _scan_path(cursor, start)

    if c in IDENT_START:
        while not cursor.at_eof and src[cursor.position] in IDENT_CHARS:
            cursor.position += 1
        kind = KEYWORDS.get(src[start:cursor.position].lower(), TokenKind.IDENTIFIER)
        return Token(kind, start, cursor.position, src)

    cursor.position += 1
    return Token(TokenKind.UNKNOWN, start, cursor.position, src)


def peek_token(cursor: Cursor) -> Token:
    """Return the next token without moving the cursor."""
    saved = cursor.position
    try:
        return next_token(cursor)
    finally:
        cursor.position = saved


def require_token(cursor: Cursor, expected: TokenKind) -> Token:
    """Consume one token; raise TemplateSyntaxError unless it is of the expected kind."""
    token = next_token(cursor)
    if token.kind != expected:
        raise TemplateSyntaxError("Unexpected token", found=token.kind, expected=expected, position=token.start)
    return token


def unescape_path(text: str) -> str:
    """Drop the backslash of each escaped character in a PATH token's text."""
    out = []
    i = 0
    while i < len(text):
        if text[i] == '\\' and i + 1 < len(text):
            i += 1
        out.append(text[i])
        i += 1
    return ''.join(out)
