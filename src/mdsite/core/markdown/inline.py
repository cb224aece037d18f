"""Inline span formatting: images, links, escapes, then emphasis

The passes run in a fixed order. Images go first so the leading '!' of
![alt](src) is never left behind by the link pattern, and emphasis goes last
so it can wrap links and images produced by the earlier passes.
"""

import re


IMAGE_RE = re.compile(r'(?<!\\)!\[([^\]]*)\]\(([^)\s]*)\)')
LINK_RE = re.compile(r'(?<!\\)\[([^\]]*)(?<!\\)\]\(([^)\s]*)\)')
ESCAPE_RE = re.compile(r'\\([_\[\]<>()\\*~])')
TAG_RE = re.compile(r'</?[A-Za-z][^>]*>')
STASH_RE = re.compile(r'\x00(\d+)\x00')

ESCAPES: dict[str, str] = {
    '_':  '&#95;',
    '[':  '&#91;',
    ']':  '&#93;',
    '<':  '&lt;',
    '>':  '&gt;',
    '(':  '&#40;',
    ')':  '&#41;',
    '\\': '&#92;',
    '*':  '&#42;',
    '~':  '&#126;',
}

# strong before em: '**' would otherwise be read as two empty '*' spans
EMPHASIS: list[tuple[re.Pattern, str]] = [
    (re.compile(r'\*\*(?=\S)(.+?)(?<=\S)\*\*'),             r'<strong>\1</strong>'),
    (re.compile(r'(?<!\w)__(?=\S)(.+?)(?<=\S)__(?!\w)'),    r'<strong>\1</strong>'),
    (re.compile(r'~~(?=\S)(.+?)(?<=\S)~~'),                 r'<s>\1</s>'),
    (re.compile(r'\*(?=\S)(.+?)(?<=\S)\*'),                 r'<em>\1</em>'),
    (re.compile(r'(?<!\w)_(?=\S)(.+?)(?<=\S)_(?!\w)'),      r'<em>\1</em>'),
]


def format_images(line: str) -> str:
    """![alt](src) -> <img src="src" alt="alt">"""
    if '![' not in line:
        return line
    return IMAGE_RE.sub(lambda m: f'<img src="{m.group(2)}" alt="{m.group(1)}">', line)


def format_links(line: str) -> str:
    """[text](href) -> <a href="href">text</a>, repeated over the rest of the line."""
    if '](' not in line:
        return line
    m = LINK_RE.search(line)
    if not m:
        return line
    anchor = f'<a href="{m.group(2)}">{m.group(1)}</a>'
    return line[:m.start()] + anchor + format_links(line[m.end():])


def format_escapes(line: str) -> str:
    if '\\' not in line:
        return line
    return ESCAPE_RE.sub(lambda m: ESCAPES[m.group(1)], line)


def format_emphasis(line: str) -> str:
    """Apply strong/em/strike patterns to text outside of HTML tags."""
    if not any(c in line for c in '*_~'):
        return line

    tags: list[str] = []

    def _stash(m: re.Match) -> str:
        tags.append(m.group(0))
        return f'\x00{len(tags) - 1}\x00'

    masked = TAG_RE.sub(_stash, line)
    for pattern, repl in EMPHASIS:
        masked = pattern.sub(repl, masked)
    return STASH_RE.sub(lambda m: tags[int(m.group(1))], masked)


def format_inline(line: str) -> str:
    """Run every inline pass over one line of body text."""
    return format_emphasis(format_escapes(format_links(format_images(line))))
