#!/usr/bin/env python3
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from diagnostics import Diagnostics
from escaper import escape_html


@dataclass(frozen=True)
class InlineMatch:
    """
    A decorated span found at one scan position.

    kind:
      - "link"        payload = (anchor_text | None, uri)
      - "image"       payload = (alt, src, width | None, height | None)
      - "bold"        payload = (inner,)
      - "underline"   payload = (inner,)
      - "monospace"   payload = (inner,)
      - "strike"      payload = (inner,)
      - "superscript" payload = (inner,)
      - "subscript"   payload = (inner,)
      - "line_break"  payload = ()
      - "escape"      payload = (char,)

    length is the number of characters the span consumes (always > 0).
    """
    kind: str
    length: int
    payload: tuple[Optional[str], ...]


# Only ASCII whitespace is trimmed or matched by \s; U+3000 and friends are text.
ASCII_WHITESPACE = " \t\n\v\f\r"

# Tried in this order at each position; the first one that matches wins.
# All quantifiers are reluctant so a span closes at the nearest delimiter.
INLINE_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    ("link", re.compile(r"\[\[(?:(.+?):)?\s*((?:https?|ftp)://\S+?)\s*\]\]", re.ASCII)),
    ("image", re.compile(r"\{\{\s*(.+?):\s*(/\S+?)\s*(?::\s*(\d+)x(\d+))?\s*\}\}", re.ASCII)),
    ("bold", re.compile(r"\*\*(.+?)\*\*")),
    ("underline", re.compile(r"__(.+?)__")),
    ("monospace", re.compile(r"''(.+?)''")),
    ("strike", re.compile(r"--(.+?)--")),
    ("superscript", re.compile(r"\^\{(.+?)\}")),
    ("subscript", re.compile(r"_\{(.+?)\}")),
    ("line_break", re.compile(r"\\\\(?:\s|$)", re.ASCII)),
    ("escape", re.compile(r"([&\"'<>])")),
)

# Characters that can open one of the patterns above; everything else is
# copied through without trying the matchers.
_SPAN_START_RE = re.compile(r"[\[{*_'\-^\\&\"<>]")

DECORATION_TAGS: dict[str, str] = {
    "bold": "strong",
    "underline": "u",
    "monospace": "code",
    "strike": "del",
    "superscript": "sup",
    "subscript": "sub",
}


def match_inline_at(text: str, pos: int) -> Optional[InlineMatch]:
    """
    Try every inline pattern at `pos`, in precedence order.

    Returns None when no pattern matches there.
    """
    for kind, pattern in INLINE_PATTERNS:
        match = pattern.match(text, pos)
        if match:
            return InlineMatch(kind=kind, length=match.end() - pos, payload=match.groups())
    return None


def create_anchor(uri: str, text: Optional[str]) -> str:
    """
    Build <a href="uri">text</a>.

    The URI is written as-is: it must already be escaped by the author.
    Without anchor text the URI doubles as the label.
    """
    uri_output = uri.strip(ASCII_WHITESPACE)
    text_output = uri_output if text is None else escape_html(text.strip(ASCII_WHITESPACE))
    return f'<a href="{uri_output}">{text_output}</a>'


def create_img(
    src: str,
    alt: str,
    width: Optional[str] = None,
    height: Optional[str] = None,
) -> str:
    def attr_value(value: str) -> str:
        return escape_html(value).strip(ASCII_WHITESPACE)

    attr = ""
    if width is not None and height is not None:
        attr = f' width="{attr_value(width)}" height="{attr_value(height)}"'
    return f'<img src="{attr_value(src)}" alt="{attr_value(alt)}"{attr} />'


def create_tag(text: str, tag: str, diagnostics: Optional[Diagnostics] = None) -> str:
    """Wrap the recursively transformed interior in <tag>...</tag>."""
    return f"<{tag}>{transform_inline(text, diagnostics)}</{tag}>"


def _render_decoration(match: InlineMatch, diagnostics: Optional[Diagnostics]) -> str:
    return create_tag(match.payload[0] or "", DECORATION_TAGS[match.kind], diagnostics)


def _render_link(match: InlineMatch, diagnostics: Optional[Diagnostics]) -> str:
    text, uri = match.payload
    return create_anchor(uri or "", text)


def _render_image(match: InlineMatch, diagnostics: Optional[Diagnostics]) -> str:
    alt, src, width, height = match.payload
    return create_img(src or "", alt or "", width, height)


def _render_line_break(match: InlineMatch, diagnostics: Optional[Diagnostics]) -> str:
    return "<br />"


def _render_escape(match: InlineMatch, diagnostics: Optional[Diagnostics]) -> str:
    return escape_html(match.payload[0] or "")


INLINE_RENDERERS: dict[str, Callable[[InlineMatch, Optional[Diagnostics]], str]] = {
    "link": _render_link,
    "image": _render_image,
    "line_break": _render_line_break,
    "escape": _render_escape,
    **{kind: _render_decoration for kind in DECORATION_TAGS},
}


def render_inline_match(match: InlineMatch, diagnostics: Optional[Diagnostics] = None) -> str:
    """
    Turn one InlineMatch into HTML.

    An unknown kind is reported as a warning and rendered as nothing.
    """
    renderer = INLINE_RENDERERS.get(match.kind)
    if renderer is None:
        if diagnostics is not None:
            diagnostics.warn("Failed in-line element parsing.")
        return ""
    return renderer(match, diagnostics)


def transform_inline(text: str, diagnostics: Optional[Diagnostics] = None) -> str:
    """
    Rewrite every inline span of one line into HTML.

    Single left-to-right scan; after a span is rendered, scanning resumes
    right behind it. Text outside spans is copied verbatim, except that bare
    & " ' < > are entity-escaped.

    Example:
        '**[[Google:https://www.google.com/]]**'
    ->  '<strong><a href="https://www.google.com/">Google</a></strong>'
    """
    out: list[str] = []
    pos = 0
    length = len(text)

    while pos < length:
        candidate = _SPAN_START_RE.search(text, pos)
        if candidate is None:
            out.append(text[pos:])
            break

        start = candidate.start()
        out.append(text[pos:start])

        match = match_inline_at(text, start)
        if match is None:
            out.append(text[start])
            pos = start + 1
            continue

        out.append(render_inline_match(match, diagnostics))
        pos = start + match.length

    return "".join(out)
