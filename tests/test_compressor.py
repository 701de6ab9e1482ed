"""Tests for the compressor module."""

import gzip
import os
import shutil
import tempfile
import unittest
from unittest import mock

from rotatelog.compressor import Compressor, compress_and_remove
from rotatelog.errors import CompressionError


class TestCompressAndRemove(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def _write(self, name, content: bytes):
        path = os.path.join(self.tmpdir, name)
        with open(path, "wb") as f:
            f.write(content)
        return path

    def test_compress_creates_gz_and_removes_original(self):
        path = self._write("app-2025-01-15", b"x" * 100)

        gz_path = compress_and_remove(path)

        self.assertEqual(gz_path, path + ".gz")
        self.assertTrue(os.path.exists(gz_path))
        self.assertFalse(os.path.exists(path))

    def test_compressed_content_roundtrips(self):
        content = b"hello world\n" * 100 + b"\x00\xff binary tail"
        path = self._write("app-2025-01-15", content)

        gz_path = compress_and_remove(path, level=9)

        with gzip.open(gz_path, "rb") as f:
            self.assertEqual(f.read(), content)

    def test_existing_archive_is_not_overwritten(self):
        path = self._write("app-2025-01-15", b"second pass\n")
        gz_path = path + ".gz"
        with gzip.open(gz_path, "wb") as f:
            f.write(b"first pass\n")

        with self.assertRaises(CompressionError):
            compress_and_remove(path)

        with gzip.open(gz_path, "rb") as f:
            self.assertEqual(f.read(), b"first pass\n")
        with open(path, "rb") as f:
            self.assertEqual(f.read(), b"second pass\n")
        self.assertEqual(sorted(os.listdir(self.tmpdir)), ["app-2025-01-15", "app-2025-01-15.gz"])

    def test_empty_file_is_deleted_not_wrapped(self):
        path = self._write("app-2025-01-15", b"")

        result = compress_and_remove(path)

        self.assertIsNone(result)
        self.assertFalse(os.path.exists(path))
        self.assertFalse(os.path.exists(path + ".gz"))

    def test_missing_file_raises(self):
        with self.assertRaises(CompressionError):
            compress_and_remove(os.path.join(self.tmpdir, "nope"))

    def test_no_temporary_left_behind(self):
        path = self._write("app-2025-01-15", b"data\n")
        compress_and_remove(path)
        self.assertEqual(os.listdir(self.tmpdir), ["app-2025-01-15.gz"])

    def test_failed_encode_keeps_original(self):
        path = self._write("app-2025-01-15", b"important\n" * 10)

        with mock.patch("rotatelog.compressor.shutil.copyfileobj", side_effect=OSError("disk full")):
            with self.assertRaises(CompressionError):
                compress_and_remove(path)

        self.assertEqual(os.listdir(self.tmpdir), ["app-2025-01-15"])
        with open(path, "rb") as f:
            self.assertEqual(f.read(), b"important\n" * 10)

    def test_failed_delete_keeps_only_original(self):
        path = self._write("app-2025-01-15", b"important\n")
        real_remove = os.remove

        def remove(p):
            if p == path:
                raise PermissionError("denied")
            real_remove(p)

        with mock.patch("rotatelog.compressor.os.remove", side_effect=remove):
            with self.assertRaises(CompressionError):
                compress_and_remove(path)

        self.assertEqual(os.listdir(self.tmpdir), ["app-2025-01-15"])


class TestCompressorBackground(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_submit_runs_in_background_thread(self):
        path = os.path.join(self.tmpdir, "app-2025-01-15")
        with open(path, "wb") as f:
            f.write(b"y" * 100)

        thread = Compressor(level=1).submit(path)
        thread.join(timeout=5)

        self.assertFalse(thread.is_alive())
        self.assertTrue(thread.daemon)
        self.assertTrue(os.path.exists(path + ".gz"))
        self.assertFalse(os.path.exists(path))

    def test_failure_is_logged_not_raised(self):
        missing = os.path.join(self.tmpdir, "gone")
        with self.assertLogs("rotatelog.compressor", level="ERROR") as cm:
            thread = Compressor().submit(missing)
            thread.join(timeout=5)
        self.assertIn("Compression failed", cm.output[0])

    def test_concurrent_compressions_are_independent(self):
        paths = []
        for day in range(10, 15):
            path = os.path.join(self.tmpdir, f"app-2025-01-{day}")
            with open(path, "wb") as f:
                f.write(f"day {day}\n".encode() * 50)
            paths.append(path)

        compressor = Compressor()
        threads = [compressor.submit(p) for p in paths]
        for t in threads:
            t.join(timeout=5)

        for day, path in zip(range(10, 15), paths):
            self.assertFalse(os.path.exists(path))
            with gzip.open(path + ".gz", "rb") as f:
                self.assertEqual(f.read(), f"day {day}\n".encode() * 50)


if __name__ == "__main__":
    unittest.main()
