# test_config_loader.py
#
# Run:
#   python -m unittest -v

import tempfile
import unittest
from pathlib import Path

import config_loader as m


class TestLoadConfig(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def write(self, content: str) -> Path:
        p = self.root / "config.yml"
        p.write_text(content, encoding="utf-8")
        return p

    def test_defaults(self):
        self.assertEqual(m.DEFAULT_CONFIG.head_level, 2)
        self.assertEqual(m.DEFAULT_CONFIG.code_block_class, "prettyprint")
        self.assertEqual(m.DEFAULT_CONFIG.code_language_prefix, "language-")

    def test_empty_file_gives_defaults(self):
        cfg = m.load_config(self.write(""))
        self.assertEqual(cfg.head_level, 2)
        self.assertEqual(cfg.code_block_class, "prettyprint")

    def test_overrides(self):
        cfg = m.load_config(self.write("head_level: 1\ncode_block_class: hl\ncode_language_prefix: lang-\n"))
        self.assertEqual(cfg.head_level, 1)
        self.assertEqual(cfg.code_block_class, "hl")
        self.assertEqual(cfg.code_language_prefix, "lang-")

    def test_partial_override(self):
        cfg = m.load_config(self.write("head_level: 3\n"))
        self.assertEqual(cfg.head_level, 3)
        self.assertEqual(cfg.code_language_prefix, "language-")

    def test_root_must_be_mapping(self):
        with self.assertRaises(TypeError):
            m.load_config(self.write("- a\n- b\n"))

    def test_head_level_must_be_int(self):
        with self.assertRaises(TypeError):
            m.load_config(self.write("head_level: two\n"))
        with self.assertRaises(TypeError):
            m.load_config(self.write("head_level: true\n"))

    def test_class_must_be_string(self):
        with self.assertRaises(TypeError):
            m.load_config(self.write("code_block_class: [a, b]\n"))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            m.load_config(self.root / "nope.yml")


if __name__ == "__main__":
    unittest.main()
