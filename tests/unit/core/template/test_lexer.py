"""Unit tests for core/template/lexer.py"""

import pytest

from mdsite.core.errors import TemplateSyntaxError
from mdsite.core.template.lexer import (
    Cursor,
    Token,
    TokenKind,
    next_token,
    peek_token,
    require_token,
    unescape_path,
)


def _kinds(source: str) -> list[TokenKind]:
    cursor = Cursor(source)
    kinds = []
    while True:
        token = next_token(cursor)
        kinds.append(token.kind)
        if token.kind is TokenKind.EOF:
            return kinds


def test_variable_directive_tokens():
    """A {{ name }} directive yields EXPR_START, IDENTIFIER, EXPR_END, EOF."""
    cursor = Cursor("{{ site.name }}")
    start = next_token(cursor)
    ident = next_token(cursor)
    end = next_token(cursor)
    assert (start.kind, start.start, start.end) == (TokenKind.EXPR_START, 0, 2)
    assert ident.kind is TokenKind.IDENTIFIER
    assert ident.text == "site.name"
    assert end.kind is TokenKind.EXPR_END
    assert next_token(cursor).kind is TokenKind.EOF


def test_for_header_tokens():
    """A full for-loop header is recognised keyword by keyword."""
    assert _kinds("{{for p in all_posts orderby_desc date}}") == [
        TokenKind.EXPR_START, TokenKind.FOR, TokenKind.IDENTIFIER, TokenKind.IN,
        TokenKind.COLLECTION_POST, TokenKind.ORDERBY_DESC, TokenKind.IDENTIFIER,
        TokenKind.EXPR_END, TokenKind.EOF,
    ]


@pytest.mark.parametrize("word,kind", [
    ("for", TokenKind.FOR),
    ("FOR", TokenKind.FOR),
    ("EndFor", TokenKind.ENDFOR),
    ("Include", TokenKind.INCLUDE),
    ("IN", TokenKind.IN),
    ("ALL_PAGES", TokenKind.COLLECTION_PAGE),
    ("all_posts", TokenKind.COLLECTION_POST),
    ("orderby_asc", TokenKind.ORDERBY_ASC),
    ("forx", TokenKind.IDENTIFIER),
])
def test_keywords_case_insensitive(word, kind):
    """Keywords match regardless of case; longer words stay identifiers."""
    assert next_token(Cursor(word)).kind is kind


def test_identifier_chars():
    """Identifiers may contain dots, hyphens, digits and underscores after the first char."""
    token = next_token(Cursor("post.month_name-2 rest"))
    assert token.text == "post.month_name-2"


def test_path_excludes_quotes():
    """A quoted string becomes a PATH whose span covers only the text between the quotes."""
    cursor = Cursor('  "header.html" ')
    token = next_token(cursor)
    assert token.kind is TokenKind.PATH
    assert token.text == "header.html"
    assert (token.start, token.end) == (3, 14)
    assert cursor.position == 15


def test_path_with_escaped_quote():
    """A backslash escapes the following quote inside a PATH."""
    token = next_token(Cursor(r'"a\"b"'))
    assert token.kind is TokenKind.PATH
    assert unescape_path(token.text) == 'a"b'


def test_unterminated_path_is_unknown():
    """An unterminated string yields one UNKNOWN token running to the end of input."""
    cursor = Cursor('"abc')
    token = next_token(cursor)
    assert token.kind is TokenKind.UNKNOWN
    assert (token.start, token.end) == (0, 4)
    assert next_token(cursor).kind is TokenKind.EOF


def test_line_endings():
    """\\n and \\r\\n are single EOL tokens; a lone \\r is UNKNOWN."""
    cursor = Cursor("a\r\nb\nc\r")
    kinds = [next_token(cursor) for _ in range(7)]
    assert [t.kind for t in kinds] == [
        TokenKind.IDENTIFIER, TokenKind.EOL, TokenKind.IDENTIFIER, TokenKind.EOL,
        TokenKind.IDENTIFIER, TokenKind.UNKNOWN, TokenKind.EOF,
    ]
    assert kinds[1].text == "\r\n"


@pytest.mark.parametrize("source", ["{", "}", "1abc", "!", "#"])
def test_unknown_single_char(source):
    """Anything unrecognised is a one-character UNKNOWN token."""
    cursor = Cursor(source)
    token = next_token(cursor)
    assert token.kind is TokenKind.UNKNOWN
    assert token.end - token.start == 1


def test_assign_between_identifier_and_path():
    """A site file line tokenizes as IDENTIFIER ASSIGN PATH."""
    assert _kinds('site.name = "Blog"') == [
        TokenKind.IDENTIFIER, TokenKind.ASSIGN, TokenKind.PATH, TokenKind.EOF,
    ]


def test_eof_is_repeatable():
    """At end of input every call returns an empty EOF token."""
    cursor = Cursor("   ")
    first = next_token(cursor)
    second = next_token(cursor)
    assert first.kind is second.kind is TokenKind.EOF
    assert first.start == first.end == 3


def test_cursor_end_bounds_scan():
    """A cursor with an end offset never reads past it."""
    cursor = Cursor("{{a}}xyz", 0, 5)
    assert [next_token(cursor).kind for _ in range(4)] == [
        TokenKind.EXPR_START, TokenKind.IDENTIFIER, TokenKind.EXPR_END, TokenKind.EOF,
    ]


def test_peek_does_not_advance():
    """peek_token returns the next token and leaves the cursor where it was."""
    cursor = Cursor("{{ name }}", 2)
    peeked = peek_token(cursor)
    assert cursor.position == 2
    assert peek_token(cursor) == peeked
    assert next_token(cursor) == peeked


def test_require_token_mismatch():
    """require_token raises TemplateSyntaxError naming the found and expected kinds."""
    cursor = Cursor("{{ name")
    next_token(cursor)
    next_token(cursor)
    with pytest.raises(TemplateSyntaxError, match="found EOF, expected EXPR_END") as exc:
        require_token(cursor, TokenKind.EXPR_END)
    assert exc.value.found is TokenKind.EOF
    assert exc.value.expected is TokenKind.EXPR_END


def test_token_span_validated():
    """A token cannot point outside its source."""
    with pytest.raises(ValueError):
        Token(TokenKind.IDENTIFIER, 2, 9, "abc")
    with pytest.raises(ValueError):
        Token(TokenKind.IDENTIFIER, 2, 1, "abc")


def test_unescape_path_keeps_plain_text():
    """unescape_path only removes backslashes that escape a character."""
    assert unescape_path("dir/file.html") == "dir/file.html"
    assert unescape_path(r"a\\b") == "a\\b"
