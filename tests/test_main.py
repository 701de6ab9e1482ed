"""Tests for the entry point's exit codes."""

import io
import os

from rotatelog.main import main


class BrokenStream:
    def read1(self, size=-1):
        raise OSError("EIO")


class TestMain:
    def test_clean_eof_returns_zero(self, tmp_path):
        rc = main(["-d", str(tmp_path), "-f", "app"], stream=io.BytesIO(b"a\nb\n"))
        assert rc == 0
        assert (tmp_path / "app").read_bytes() == b"a\nb\n"

    def test_configuration_error_returns_two(self, tmp_path, capsys):
        rc = main(["-d", str(tmp_path)], stream=io.BytesIO(b"lost\n"))
        assert rc == 2
        assert "usage" in capsys.readouterr().err
        assert os.listdir(tmp_path) == []

    def test_read_error_returns_one(self, tmp_path, caplog):
        rc = main(["-d", str(tmp_path), "-f", "app"], stream=BrokenStream())
        assert rc == 1
        assert "Fatal" in caplog.text

    def test_rotation_error_returns_one(self, tmp_path):
        (tmp_path / "app").mkdir()
        rc = main(["-d", str(tmp_path), "-f", "app"], stream=io.BytesIO(b"a\n"))
        assert rc == 1
