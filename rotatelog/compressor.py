"""Post-rotation compression of superseded log files."""

import gzip
import logging
import os
import shutil
import threading

from rotatelog.errors import CompressionError

logger = logging.getLogger(__name__)


def _remove_quietly(path: str):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove %s: %s", path, exc)


def compress_and_remove(filepath: str, level: int = 6) -> str | None:
    """Gzip a file next to itself and delete the original.

    Empty files are deleted without producing a .gz. Returns the .gz path,
    or None when the file was empty. On failure the original is left in
    place, any partial output is removed and CompressionError is raised.
    """
    try:
        size = os.path.getsize(filepath)
    except OSError as exc:
        raise CompressionError(f"cannot stat {filepath}: {exc}") from exc

    if size == 0:
        try:
            os.remove(filepath)
        except OSError as exc:
            raise CompressionError(f"cannot remove empty file {filepath}: {exc}") from exc
        return None

    gz_path = filepath + ".gz"
    if os.path.lexists(gz_path):
        raise CompressionError(f"refusing to overwrite existing archive {gz_path}")
    tmp_path = gz_path + ".tmp"
    try:
        with open(filepath, "rb") as f_in, gzip.open(tmp_path, "wb", compresslevel=level) as f_out:
            shutil.copyfileobj(f_in, f_out)
        os.replace(tmp_path, gz_path)
    except OSError as exc:
        _remove_quietly(tmp_path)
        raise CompressionError(f"cannot compress {filepath}: {exc}") from exc

    try:
        os.remove(filepath)
    except OSError as exc:
        # Keep the original as the single copy
        _remove_quietly(gz_path)
        raise CompressionError(f"cannot remove {filepath} after compression: {exc}") from exc
    return gz_path


class Compressor:
    """Runs compress_and_remove on a detached daemon thread per file."""

    def __init__(self, level: int = 6):
        self._level = level

    @property
    def level(self) -> int:
        return self._level

    def submit(self, filepath: str) -> threading.Thread:
        """Start compressing *filepath* in the background and return the thread."""
        thread = threading.Thread(
            target=self._run,
            args=(filepath,),
            name=f"compress-{os.path.basename(filepath)}",
            daemon=True,
        )
        thread.start()
        return thread

    def _run(self, filepath: str):
        try:
            gz_path = compress_and_remove(filepath, self._level)
        except CompressionError as exc:
            logger.error("Compression failed, original kept: %s", exc)
            return
        if gz_path is None:
            logger.info("Removed empty log file %s", filepath)
        else:
            logger.info("Compressed: %s", gz_path)
