#!/usr/bin/env python3
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from config_loader import CruinneConfig, DEFAULT_CONFIG
from cr_inline import ASCII_WHITESPACE, transform_inline
from diagnostics import Diagnostics

# ---------------- Block markers ----------------------------------------------

COMMENT_RE = re.compile(r"\A//")
HRULE_RE = re.compile(r"\A----")
HEADING_RE = re.compile(r"\A(=+)")
FENCE_RE = re.compile(r"\A```")
QUOTE_RE = re.compile(r"\A>\s*", re.ASCII)
LIST_RE = re.compile(r"\A[+-]")
DEFINITION_RE = re.compile(r"\A:")
TABLE_RE = re.compile(r"\A[|$]")
# A paragraph line is anything the markers above would not claim.
PARAGRAPH_RE = re.compile(r"\A(?![=>\-+:|$]|//|----|```|\Z)")

TABLE_DELIMITER_RE = re.compile(r"([|$]+)")

LIST_KINDS: dict[str, str] = {"-": "ul", "+": "ol"}
LIST_KIND_NAMES: dict[str, str] = {"ul": "Unordered", "ol": "Ordered"}

# ---------------- Block nodes -------------------------------------------------


@dataclass
class Heading:
    level: int
    text: str


@dataclass
class Paragraph:
    lines: list[str]


@dataclass
class Blockquote:
    children: list["BlockNode"]


@dataclass
class CodeBlock:
    lines: list[str]
    language: Optional[str] = None


@dataclass
class ListItem:
    """
    One <li>. content is None for a placeholder that only carries a nested
    list opened without a parent item (e.g. a run starting with '--').
    """
    content: Optional[str]
    nested: Optional["ListBlock"] = None


@dataclass
class ListBlock:
    kind: str  # "ul" | "ol"
    items: list[ListItem] = field(default_factory=list)


@dataclass
class DefinitionList:
    pairs: list[tuple[Optional[str], Optional[str]]] = field(default_factory=list)


@dataclass
class TableCell:
    kind: str  # "header" | "data"
    colspan: int
    content: str


@dataclass
class TableRow:
    cells: list[TableCell] = field(default_factory=list)


@dataclass
class Table:
    rows: list[TableRow] = field(default_factory=list)


@dataclass
class HorizontalRule:
    pass


BlockNode = Union[
    Heading,
    Paragraph,
    Blockquote,
    CodeBlock,
    ListBlock,
    DefinitionList,
    Table,
    HorizontalRule,
]

# ---------------- Line cursor ----------------------------------------------


def split_lines(src: str) -> tuple[str, ...]:
    """
    Split a whole document into lines.

    The document is trimmed as a whole; each line only loses its terminator
    (\\n or \\r\\n), never its own leading/trailing whitespace.
    """
    lines = []
    for line in re.split(r"\r?\n", src.strip(ASCII_WHITESPACE)):
        if line.endswith("\r"):
            line = line[:-1]
        lines.append(line)
    return tuple(lines)


def strip_marker(line: str, marker: re.Pattern) -> str:
    return marker.sub("", line, count=1).strip(ASCII_WHITESPACE)


@dataclass
class LineCursor:
    """
    Read position over an immutable sequence of lines.

    Builders advance `pos` past the lines they claim; the lines themselves
    are never modified.
    """
    lines: tuple[str, ...]
    pos: int = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.lines)

    def peek(self) -> Optional[str]:
        if self.at_end():
            return None
        return self.lines[self.pos]

    def advance(self) -> str:
        line = self.lines[self.pos]
        self.pos += 1
        return line

    def take_run(self, marker: re.Pattern, *, strip: bool = True) -> list[str]:
        """
        Claim the maximal run of lines matching `marker`.

        Each line is trimmed; with strip=True the marker is removed first.
        """
        run: list[str] = []
        while not self.at_end() and marker.match(self.lines[self.pos]):
            line = self.advance()
            run.append(strip_marker(line, marker) if strip else line.strip(ASCII_WHITESPACE))
        return run

    def take_fenced(self, fence: re.Pattern) -> list[str]:
        """
        Claim a fenced block: the opening line, the body, and the closing
        line if there is one. Returns the body untouched.
        """
        body: list[str] = []
        self.advance()
        while not self.at_end():
            if fence.match(self.lines[self.pos]):
                self.advance()
                break
            body.append(self.advance())
        return body


@dataclass
class ParseContext:
    cfg: CruinneConfig = DEFAULT_CONFIG
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def inline(self, text: str) -> str:
        return transform_inline(text, self.diagnostics)


# ---------------- Builders ----------------------------------------------------


def build_heading(line: str, ctx: ParseContext) -> Heading:
    """
    '=== Title' -> Heading(level=head_level + 2, ...)

    Levels outside 1..6 are kept as computed (<h8> etc.) but reported.
    """
    markers = HEADING_RE.match(line)
    count = len(markers.group(1)) if markers else 0
    level = ctx.cfg.head_level + count - 1

    if level < 1 or level > 6:
        ctx.diagnostics.warn(f"Heading level ({level}) is out of range.")

    return Heading(level=level, text=ctx.inline(line[count:].strip(ASCII_WHITESPACE)))


def build_paragraph(lines: list[str], ctx: ParseContext) -> Paragraph:
    return Paragraph(lines=[ctx.inline(line) for line in lines])


def build_blockquote(lines: list[str], ctx: ParseContext) -> Blockquote:
    return Blockquote(children=parse_blocks(LineCursor(tuple(lines)), ctx))


def build_code_block(cursor: LineCursor, ctx: ParseContext) -> CodeBlock:
    """
    Consume a ``` block. Text after the opening fence is the language tag.
    A fence that never closes runs to the end of the input.
    """
    opening = cursor.peek() or ""
    language = FENCE_RE.sub("", opening, count=1).strip(ASCII_WHITESPACE)
    body = cursor.take_fenced(FENCE_RE)
    return CodeBlock(lines=body, language=language or None)


def _warn_on_mixed_markers(kind: str, raw_run: list[str], ctx: ParseContext) -> None:
    """
    Items at the run's own depth should all use the marker of `kind`.
    Lines that open a deeper level are judged by the nested list instead.
    """
    for raw in raw_run:
        if LIST_RE.match(strip_marker(raw, LIST_RE)):
            continue
        if LIST_KINDS[raw[0]] != kind:
            ctx.diagnostics.warn("List mixes '-' and '+' markers at the same level.")
            return


def collect_list(cursor: LineCursor, ctx: ParseContext) -> ListBlock:
    """
    Claim the run of '-'/'+' lines at the cursor and build it as one list.

    The first line's marker decides the kind; one marker character is
    stripped from every line, so '--B' becomes '-B' at the next level.
    """
    raw_run = cursor.take_run(LIST_RE, strip=False)
    kind = LIST_KINDS[raw_run[0][0]]
    _warn_on_mixed_markers(kind, raw_run, ctx)
    stripped = tuple(strip_marker(line, LIST_RE) for line in raw_run)
    return build_list(kind, LineCursor(stripped), ctx)


def build_list(kind: str, cursor: LineCursor, ctx: ParseContext) -> ListBlock:
    """
    Build one list level from marker-stripped lines.

    A line that still starts with '-' or '+' opens a nested list made of
    the following marker run; it hangs under the last item of this level.
    """
    block = ListBlock(kind=kind)

    while not cursor.at_end():
        line = cursor.peek() or ""

        if LIST_RE.match(line):
            nested_kind = LIST_KINDS[line[0]]
            has_parent = bool(block.items) and block.items[-1].content is not None
            if not has_parent:
                ctx.diagnostics.warn(
                    f"{LIST_KIND_NAMES[nested_kind]} list seems to skip over the level(s)."
                )
            nested = collect_list(cursor, ctx)
            if has_parent:
                block.items[-1].nested = nested
            else:
                block.items.append(ListItem(content=None, nested=nested))
            continue

        block.items.append(ListItem(content=ctx.inline(cursor.advance())))

    return block


def build_definition_list(lines: list[str], ctx: ParseContext) -> DefinitionList:
    """
    ': term | description' lines. Empty halves are left out, so a line can
    yield a term only, a description only, both, or nothing.
    """
    dl = DefinitionList()
    for line in lines:
        term, _, description = line.partition("|")
        term = term.strip(ASCII_WHITESPACE)
        description = description.strip(ASCII_WHITESPACE)
        dl.pairs.append(
            (
                ctx.inline(term) if term else None,
                ctx.inline(description) if description else None,
            )
        )
    return dl


def tokenize_table_line(line: str) -> list[str]:
    """
    Split a table line into alternating text / delimiter-run tokens.

    Example:
        '$$E$F$'  ->  ['', '$$', 'E', '$', 'F', '$']

    A well-formed line yields an even number of tokens: it opens with an
    empty token and closes with a delimiter run.
    """
    tokens = TABLE_DELIMITER_RE.split(line)
    while tokens and tokens[-1] == "":
        tokens.pop()
    return [t.strip(ASCII_WHITESPACE) for t in tokens]


def build_table_row(tokens: list[str], ctx: ParseContext) -> TableRow:
    row = TableRow()
    pairs = tokens[1:-1]
    for i in range(0, len(pairs), 2):
        delimiter, content = pairs[i], pairs[i + 1]
        marker = delimiter[0]
        colspan = len(delimiter) - len(delimiter.lstrip(marker))
        row.cells.append(
            TableCell(
                kind="header" if marker == "$" else "data",
                colspan=max(1, colspan),
                content=ctx.inline(content),
            )
        )
    return row


def build_table(lines: list[str], ctx: ParseContext) -> Table:
    """
    '$' opens a header cell, '|' a data cell; a run of N delimiters spans N
    columns. Malformed lines are dropped with an error, the rest still render.
    """
    table = Table()
    for line in lines:
        tokens = tokenize_table_line(line)
        if len(tokens) % 2 != 0:
            ctx.diagnostics.error(
                "Table line has a illegal markup. Skip the parsing of this line!!"
            )
            continue
        table.rows.append(build_table_row(tokens, ctx))
    return table


# ---------------- Dispatcher --------------------------------------------------


def parse_blocks(cursor: LineCursor, ctx: ParseContext) -> list[BlockNode]:
    """
    Partition the remaining lines into block nodes, in document order.

    Every iteration consumes at least one line, so the whole sequence is
    always used up.
    """
    blocks: list[BlockNode] = []

    while not cursor.at_end():
        line = cursor.peek() or ""

        if line == "":
            cursor.advance()

        elif COMMENT_RE.match(line):
            cursor.advance()

        elif HRULE_RE.match(line):
            cursor.advance()
            blocks.append(HorizontalRule())

        elif HEADING_RE.match(line):
            blocks.append(build_heading(cursor.advance(), ctx))

        elif FENCE_RE.match(line):
            blocks.append(build_code_block(cursor, ctx))

        elif QUOTE_RE.match(line):
            blocks.append(build_blockquote(cursor.take_run(QUOTE_RE), ctx))

        elif LIST_RE.match(line):
            blocks.append(collect_list(cursor, ctx))

        elif DEFINITION_RE.match(line):
            blocks.append(build_definition_list(cursor.take_run(DEFINITION_RE), ctx))

        elif TABLE_RE.match(line):
            blocks.append(build_table(cursor.take_run(TABLE_RE, strip=False), ctx))

        else:
            blocks.append(build_paragraph(cursor.take_run(PARAGRAPH_RE), ctx))

    return blocks


def parse_document(
    src: str,
    cfg: CruinneConfig = DEFAULT_CONFIG,
    diagnostics: Optional[Diagnostics] = None,
) -> list[BlockNode]:
    """Split `src` into lines and parse them into block nodes."""
    ctx = ParseContext(cfg=cfg, diagnostics=diagnostics if diagnostics is not None else Diagnostics())
    return parse_blocks(LineCursor(split_lines(src)), ctx)
