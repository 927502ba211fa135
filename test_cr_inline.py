# test_cr_inline.py
#
# Run:
#   python -m unittest -v

import unittest

import cr_inline as m
from diagnostics import Diagnostics


class TestMatchInlineAt(unittest.TestCase):
    def test_no_match(self):
        self.assertIsNone(m.match_inline_at("plain", 0))
        self.assertIsNone(m.match_inline_at("** open", 0))

    def test_link_payload(self):
        match = m.match_inline_at("x[[a:b:http://h/]]y", 1)
        self.assertEqual(match.kind, "link")
        self.assertEqual(match.length, len("[[a:b:http://h/]]"))
        self.assertEqual(match.payload, ("a:b", "http://h/"))

    def test_image_payload(self):
        match = m.match_inline_at("{{ alt : /i.png : 3x4 }}", 0)
        self.assertEqual(match.kind, "image")
        self.assertEqual(match.payload, ("alt ", "/i.png", "3", "4"))

    def test_link_wins_over_escape(self):
        # '&' inside the URI belongs to the link, not to the escape rule
        match = m.match_inline_at("[[http://h/?a&b]]", 0)
        self.assertEqual(match.kind, "link")

    def test_escape_payload_is_the_character(self):
        for ch in "&\"'<>":
            match = m.match_inline_at(f"a{ch}b", 1)
            self.assertEqual(match.kind, "escape")
            self.assertEqual(match.length, 1)
            self.assertEqual(match.payload, (ch,))

    def test_reluctant_bold(self):
        match = m.match_inline_at("**a** b **c**", 0)
        self.assertEqual(match.kind, "bold")
        self.assertEqual(match.payload, ("a",))

    def test_line_break_needs_space_or_end(self):
        self.assertEqual(m.match_inline_at("\\\\", 0).kind, "line_break")
        self.assertEqual(m.match_inline_at("\\\\ x", 0).length, 3)
        self.assertIsNone(m.match_inline_at("\\\\x", 0))


class TestTransformInline(unittest.TestCase):
    def test_plain_text_is_identity(self):
        self.assertEqual(m.transform_inline("Lorem ipsum, dolor: sit [amet]."), "Lorem ipsum, dolor: sit [amet].")

    def test_bare_characters_are_escaped(self):
        self.assertEqual(m.transform_inline("a & b < c > d \" e ' f"), "a &amp; b &lt; c &gt; d &quot; e &#39; f")

    def test_each_decoration(self):
        self.assertEqual(m.transform_inline("**b**"), "<strong>b</strong>")
        self.assertEqual(m.transform_inline("__u__"), "<u>u</u>")
        self.assertEqual(m.transform_inline("''m''"), "<code>m</code>")
        self.assertEqual(m.transform_inline("--d--"), "<del>d</del>")
        self.assertEqual(m.transform_inline("x^{2}"), "x<sup>2</sup>")
        self.assertEqual(m.transform_inline("x_{i}"), "x<sub>i</sub>")

    def test_decorations_nest(self):
        self.assertEqual(
            m.transform_inline("**a __b ''c''__**"),
            "<strong>a <u>b <code>c</code></u></strong>",
        )

    def test_escape_inside_decoration(self):
        self.assertEqual(m.transform_inline("**<b>**"), "<strong>&lt;b&gt;</strong>")

    def test_bold_around_link(self):
        self.assertEqual(
            m.transform_inline("**[[Google:https://www.google.com/]]**"),
            '<strong><a href="https://www.google.com/">Google</a></strong>',
        )

    def test_line_break_consumes_one_whitespace(self):
        self.assertEqual(m.transform_inline("a\\\\  b"), "a<br /> b")

    def test_empty_anchor_text(self):
        self.assertEqual(m.transform_inline("[[ : http://h/]]"), '<a href="http://h/"></a>')

    def test_only_ascii_whitespace_is_trimmed(self):
        self.assertEqual(m.transform_inline("a\\\\\u3000b"), "a\\\\\u3000b")
        self.assertEqual(
            m.transform_inline("[[\u3000x\u3000:http://h/]]"),
            '<a href="http://h/">\u3000x\u3000</a>',
        )

    def test_image_size_is_all_or_nothing(self):
        self.assertEqual(m.transform_inline("{{a:/i.png : 3x}}"), "{{a:/i.png : 3x}}")


class TestRenderInlineMatch(unittest.TestCase):
    def test_unknown_kind_warns_and_renders_nothing(self):
        diagnostics = Diagnostics()
        rendered = m.render_inline_match(m.InlineMatch(kind="blink", length=2, payload=()), diagnostics)
        self.assertEqual(rendered, "")
        self.assertEqual(len(diagnostics.events), 1)
        self.assertEqual(diagnostics.events[0].level, "warn")
        self.assertEqual(diagnostics.events[0].message, "Failed in-line element parsing.")

    def test_helpers(self):
        self.assertEqual(m.create_anchor(" http://h/ ", None), '<a href="http://h/">http://h/</a>')
        self.assertEqual(m.create_img("/a.png", "<x>"), '<img src="/a.png" alt="&lt;x&gt;" />')
        self.assertEqual(
            m.create_img("/a.png", "x", "1", "2"),
            '<img src="/a.png" alt="x" width="1" height="2" />',
        )
        self.assertEqual(m.create_tag("**a**", "sup"), "<sup><strong>a</strong></sup>")


if __name__ == "__main__":
    unittest.main()
