# test_cr_reader.py
#
# Run:
#   python -m unittest -v

import tempfile
import unittest
from pathlib import Path

import cr_reader as m
from diagnostics import Diagnostics


class TestCrReader(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def write(self, rel: str, content: str) -> Path:
        p = self.root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content.encode("utf-8"))
        return p

    # ---------- safe_input_path ----------
    def test_safe_input_path_ok(self):
        p = self.write("a.cr", "x")
        self.assertEqual(m.safe_input_path(str(p)), p.resolve())

    def test_safe_input_path_rejects_empty(self):
        with self.assertRaises(ValueError):
            m.safe_input_path("  ")

    def test_safe_input_path_rejects_nul(self):
        with self.assertRaises(ValueError):
            m.safe_input_path("a\x00b")

    def test_safe_input_path_rejects_traversal(self):
        with self.assertRaises(ValueError):
            m.safe_input_path(str(self.root / ".." / "a.cr"))

    def test_safe_input_path_root(self):
        inside = self.write("docs/a.cr", "x")
        outside = self.write("b.cr", "x")
        self.assertEqual(m.safe_input_path(str(inside), root=self.root / "docs"), inside.resolve())
        with self.assertRaises(ValueError):
            m.safe_input_path(str(outside), root=self.root / "docs")

    def test_safe_input_path_missing_and_directory(self):
        with self.assertRaises(FileNotFoundError):
            m.safe_input_path(str(self.root / "missing.cr"))
        (self.root / "dir").mkdir()
        with self.assertRaises(IsADirectoryError):
            m.safe_input_path(str(self.root / "dir"))

    # ---------- read_source ----------
    def test_read_source_keeps_line_endings(self):
        p = self.write("a.cr", "A\r\nB\n")
        diagnostics = Diagnostics()
        self.assertEqual(m.read_source(p, diagnostics), "A\r\nB\n")
        self.assertEqual(diagnostics.events, [])

    def test_safe_input_path_rejects_empty_string(self):
        with self.assertRaises(ValueError):
            m.safe_input_path("")

    def test_read_source_undecodable(self):
        p = self.root / "latin1.cr"
        p.write_bytes(b"caf\xe9 & co")
        with self.assertRaises(UnicodeDecodeError):
            m.read_source(p, Diagnostics())

    def test_read_source_missing(self):
        diagnostics = Diagnostics()
        self.assertIsNone(m.read_source(self.root / "missing.cr", diagnostics))
        self.assertEqual([(ev.level, ev.message) for ev in diagnostics.events], [("error", "File not found!")])


if __name__ == "__main__":
    unittest.main()
