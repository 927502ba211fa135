#!/usr/bin/env python3
"""
cr_to_html.py

Cruinne markup -> HTML, built on:

- config_loader.load_config() for heading base level + code block classes
- cr_parser.parse_document() for the block tree (inline text already rendered)
- diagnostics.Diagnostics for warnings/errors collected while parsing

render_block() is a pure function of (node, cfg): all diagnostics are
raised while the tree is built, never while it is rendered.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from config_loader import CruinneConfig, DEFAULT_CONFIG, load_config
from cr_parser import (
    BlockNode,
    Blockquote,
    CodeBlock,
    DefinitionList,
    Heading,
    HorizontalRule,
    ListBlock,
    Paragraph,
    Table,
    parse_document,
)
from cr_reader import read_source, safe_input_path
from diagnostics import Diagnostics
from escaper import escape_html


def render_heading(node: Heading) -> str:
    return f"<h{node.level}>{node.text}</h{node.level}>"


def render_paragraph(node: Paragraph) -> str:
    return "<p>" + "\n".join(node.lines) + "</p>"


def render_blockquote(node: Blockquote, cfg: CruinneConfig) -> str:
    return "<blockquote>" + "\n".join(render_blocks(node.children, cfg)) + "</blockquote>"


def render_code_block(node: CodeBlock, cfg: CruinneConfig) -> str:
    """
    <pre class="prettyprint"><code class="language-LANG">...</code></pre>

    Body lines are escaped, never inline-parsed.
    """
    attr = ""
    if node.language:
        attr = f' class="{cfg.code_language_prefix}{escape_html(node.language)}"'
    body = "\n".join(escape_html(line) for line in node.lines)
    return f'<pre class="{cfg.code_block_class}"><code{attr}>{body}</code></pre>'


def render_list(node: ListBlock) -> str:
    buf: list[str] = [f"<{node.kind}>"]
    for item in node.items:
        if item.content is not None:
            buf.append(f"<li>{item.content}")
        if item.nested is not None:
            buf.append(render_list(item.nested))
        if item.content is not None:
            buf.append("</li>")
    buf.append(f"</{node.kind}>")
    return "\n".join(buf)


def render_definition_list(node: DefinitionList) -> str:
    buf: list[str] = ["<dl>"]
    for term, description in node.pairs:
        if term is not None:
            buf.append(f"<dt>{term}</dt>")
        if description is not None:
            buf.append(f"<dd>{description}</dd>")
    buf.append("</dl>")
    return "\n".join(buf)


def render_table(node: Table) -> str:
    buf: list[str] = ["<table>"]
    for row in node.rows:
        buf.append("<tr>")
        for cell in row.cells:
            tag = "th" if cell.kind == "header" else "td"
            attr = f' colspan="{cell.colspan}"' if cell.colspan >= 2 else ""
            buf.append(f"<{tag}{attr}>")
            buf.append(cell.content)
            buf.append(f"</{tag}>")
        buf.append("</tr>")
    buf.append("</table>")
    return "\n".join(buf)


def render_block(node: BlockNode, cfg: CruinneConfig = DEFAULT_CONFIG) -> str:
    """Render one block node to its HTML fragment."""
    if isinstance(node, Heading):
        return render_heading(node)
    if isinstance(node, Paragraph):
        return render_paragraph(node)
    if isinstance(node, Blockquote):
        return render_blockquote(node, cfg)
    if isinstance(node, CodeBlock):
        return render_code_block(node, cfg)
    if isinstance(node, ListBlock):
        return render_list(node)
    if isinstance(node, DefinitionList):
        return render_definition_list(node)
    if isinstance(node, Table):
        return render_table(node)
    if isinstance(node, HorizontalRule):
        return "<hr />"
    raise TypeError(f"Not a block node: {type(node).__name__}")


def render_blocks(nodes: list[BlockNode], cfg: CruinneConfig = DEFAULT_CONFIG) -> list[str]:
    return [render_block(node, cfg) for node in nodes]


def generate(
    src: str,
    cfg: CruinneConfig = DEFAULT_CONFIG,
    diagnostics: Optional[Diagnostics] = None,
) -> str:
    """
    Convert a whole markup document to HTML fragments joined by newlines.

    Anomalies never raise; they end up in `diagnostics` (when given).
    """
    nodes = parse_document(src, cfg, diagnostics)
    return "\n".join(render_blocks(nodes, cfg))


def read(
    path: Path,
    cfg: CruinneConfig = DEFAULT_CONFIG,
    diagnostics: Optional[Diagnostics] = None,
) -> str:
    """
    Convert a markup file. A missing file is reported and yields "".
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    src = read_source(path, diagnostics)
    if src is None:
        return ""
    return generate(src, cfg, diagnostics)


def open_html_document(title: str) -> str:
    """Return the HTML prolog."""
    return (
        "<!doctype html>\n"
        "<html lang=\"en\">\n"
        "<head>\n"
        "  <meta charset=\"utf-8\" />\n"
        f"  <title>{escape_html(title)}</title>\n"
        "  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />\n"
        "</head>\n"
        "<body>\n"
    )


def close_html_document() -> str:
    """Return the HTML epilog."""
    return "</body>\n</html>\n"


def render_html_document(body_html: str, title: str) -> str:
    return open_html_document(title) + body_html + "\n" + close_html_document()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cr_to_html.py",
        description="Convert Cruinne markup to HTML.",
    )
    parser.add_argument("input", help="Markup file to convert")
    parser.add_argument("-o", "--output", default=None, help="Output HTML file (default: stdout)")
    parser.add_argument("-c", "--config", default=None, help="Config YAML file (default: built-in settings)")
    parser.add_argument(
        "--fragment",
        action="store_true",
        help="Write only the HTML fragments, without <html>/<body> wrapper",
    )
    parser.add_argument("--title", default=None, help="Document title (default: input file name)")
    parser.add_argument("--report", action="store_true", help="Print parser diagnostics to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    cfg = DEFAULT_CONFIG
    if args.config:
        try:
            cfg = load_config(Path(args.config))
        except Exception as e:
            print(f"[cr_to_html] Failed to load config: {e}", file=sys.stderr)
            return 2

    try:
        input_path = safe_input_path(args.input)
    except Exception as e:
        print(f"[cr_to_html] Invalid input path: {e}", file=sys.stderr)
        return 2

    diagnostics = Diagnostics()
    try:
        body_html = read(input_path, cfg, diagnostics)
    except Exception as e:
        print(f"[cr_to_html] Error while reading: {e}", file=sys.stderr)
        return 1

    if args.fragment:
        output = body_html + "\n"
    else:
        output = render_html_document(body_html, args.title or input_path.stem)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    if args.report:
        diagnostics.report(sys.stderr, color=sys.stderr.isatty())

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
