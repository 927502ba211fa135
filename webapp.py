#!/usr/bin/env python3
from __future__ import annotations

import html as _html
from pathlib import Path
from urllib.parse import quote

from flask import Flask, abort, render_template_string

from config_loader import CruinneConfig, DEFAULT_CONFIG, load_config
from cr_to_html import read
from diagnostics import Diagnostics

DOC_SUFFIX = ".cr"

LAYOUT_TEMPLATE = """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ page_title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body class="with-sidebar">
  <div class="layout">
    <aside class="sidebar">
      <div class="sidebar-title"><a href="/">Cruinne Viewer</a></div>
      {{ file_list|safe }}
    </aside>

    <main class="content">
    {{ content|safe }}
    {% if diagnostics %}
    <pre class="diagnostics">{{ diagnostics }}</pre>
    {% endif %}
    </main>
  </div>
</body>
</html>
"""


def list_documents(doc_dir: Path) -> list[str]:
    """Relative paths of all markup files below doc_dir, hidden dirs skipped."""
    if not doc_dir.exists():
        return []

    docs: list[str] = []
    for p in sorted(doc_dir.glob(f"**/*{DOC_SUFFIX}")):
        rel = p.relative_to(doc_dir)
        if any(seg.startswith(".") for seg in rel.parts):
            continue
        docs.append(rel.as_posix())
    return docs


def render_file_list(docs: list[str], current: str = "") -> str:
    out: list[str] = []
    for rel in docs:
        href = "/view/" + quote(rel)
        active = " active" if rel == current else ""
        out.append(f'<div class="fm-file{active}"><a href="{href}">{_html.escape(rel)}</a></div>')
    return "".join(out)


def create_app(doc_dir: Path, cfg: CruinneConfig = DEFAULT_CONFIG) -> Flask:
    """
    Build the viewer app for the markup files below doc_dir.

    /                -> index
    /view/<path>     -> one rendered document plus its diagnostics
    """
    doc_root = Path(doc_dir).resolve()
    app = Flask(__name__)

    @app.route("/")
    def index():
        return render_template_string(
            LAYOUT_TEMPLATE,
            page_title="Cruinne Viewer",
            file_list=render_file_list(list_documents(doc_root)),
            content="<h1>Cruinne Viewer</h1>\n<p>Pick a document on the left.</p>",
            diagnostics="",
        )

    @app.route("/view/<path:filename>")
    def view_file(filename: str):
        doc_path = (doc_root / filename).resolve()
        try:
            doc_path.relative_to(doc_root)
        except ValueError:
            abort(404)

        if not doc_path.is_file() or doc_path.suffix.lower() != DOC_SUFFIX:
            abort(404)

        diagnostics = Diagnostics()
        body_html = read(doc_path, cfg, diagnostics)
        current = doc_path.relative_to(doc_root).as_posix()

        return render_template_string(
            LAYOUT_TEMPLATE,
            page_title=current,
            file_list=render_file_list(list_documents(doc_root), current),
            content=body_html,
            diagnostics="\n".join(ev.format() for ev in diagnostics.events),
        )

    return app


if __name__ == "__main__":
    base_dir = Path.cwd()
    config_path = base_dir / "config.yml"
    app_cfg = load_config(config_path) if config_path.exists() else DEFAULT_CONFIG
    create_app(base_dir / "docs", app_cfg).run(debug=False)
