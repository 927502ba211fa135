# escaper.py
from __future__ import annotations

import html
from urllib.parse import quote_plus


def escape_html(text: str) -> str:
    """
    Escape text for HTML output.

    Replaces & " ' < > with named entities. The apostrophe becomes '&#39;'
    (html.escape would emit '&#x27;').
    """
    return html.escape(text, quote=True).replace("&#x27;", "&#39;")


def url_encode(text: str) -> str:
    """
    Form-style URL encoding.

    Example:
        'a&a.a<a>a b'  ->  'a%26a.a%3Ca%3Ea+b'
        'あ'           ->  '%E3%81%82'
    """
    return quote_plus(text, safe="", encoding="utf-8")
