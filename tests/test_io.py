"""Tests for output sinks and path helpers."""

import os
import tempfile
import unittest

from TexPack.core import FileSink, get_output_path, safe_output_name, write_bytes_atomic
from TexPack.core.paths import normalize_rel_path


class TestPathHelpers(unittest.TestCase):
    def test_safe_output_name_strips_separators(self):
        self.assertEqual(safe_output_name("ui/icons\\star"), "ui_icons_star")
        self.assertEqual(safe_output_name('a:b*c?"d'), "a_b_c__d")

    def test_safe_output_name_fallback(self):
        self.assertEqual(safe_output_name(""), "unnamed")
        self.assertEqual(safe_output_name(".."), "unnamed")

    def test_get_output_path(self):
        self.assertEqual(
            get_output_path("out", "rock", "dds"), os.path.join("out", "rock.dds")
        )
        self.assertEqual(
            get_output_path("out", "rock", ".dds", "_12"), os.path.join("out", "rock_12.dds")
        )

    def test_normalize_rel_path(self):
        self.assertEqual(str(normalize_rel_path("a/./b/../c.bin")), os.path.join("a", "c.bin"))
        for bad in ("", "..", "../x", "/abs", "D:\\x"):
            with self.assertRaises(ValueError):
                normalize_rel_path(bad)


class TestFileSink(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.out = os.path.join(self._tmp.name, "out")

    def tearDown(self):
        self._tmp.cleanup()

    def _read(self, path):
        with open(path, "rb") as f:
            return f.read()

    def test_emit_writes_named_file(self):
        sink = FileSink(self.out)
        path = sink.emit(b"DDS payload", 1, "rock", "dds")
        self.assertEqual(path, os.path.join(self.out, "rock.dds"))
        self.assertEqual(self._read(path), b"DDS payload")
        self.assertEqual(
            [n for n in os.listdir(self.out) if ".tmp." in n], []
        )

    def test_duplicate_names_get_path_id_suffix(self):
        sink = FileSink(self.out)
        first = sink.emit(b"1", 1, "rock", "dds")
        second = sink.emit(b"2", 2, "rock", "dds")
        self.assertNotEqual(first, second)
        self.assertTrue(second.endswith("rock_2.dds"))
        self.assertEqual(self._read(first), b"1")
        self.assertEqual(self._read(second), b"2")

    def test_same_record_rewrites_its_own_file(self):
        sink = FileSink(self.out)
        first = sink.emit(b"1", 1, "rock", "dds")
        again = sink.emit(b"3", 1, "rock", "dds")
        self.assertEqual(first, again)
        self.assertEqual(self._read(first), b"3")

    def test_overwrite_disabled_keeps_existing_file(self):
        write_bytes_atomic(os.path.join(self.out, "rock.dds"), b"old")
        sink = FileSink(self.out, overwrite=False)
        with self.assertLogs("texpack.io", level="WARNING"):
            self.assertIsNone(sink.emit(b"new", 1, "rock", "dds"))
        self.assertEqual(self._read(os.path.join(self.out, "rock.dds")), b"old")

    def test_overwrite_enabled_replaces_existing_file(self):
        write_bytes_atomic(os.path.join(self.out, "rock.dds"), b"old")
        path = FileSink(self.out).emit(b"new", 1, "rock", "dds")
        self.assertEqual(self._read(path), b"new")


if __name__ == "__main__":
    unittest.main(verbosity=2)
