"""Date-based rotation: dated file naming, symlink bookkeeping, compression hand-off."""

import logging
import os
from datetime import datetime

from rotatelog.compressor import Compressor
from rotatelog.config import Config
from rotatelog.errors import RotationError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DEBUG_DATE_FORMAT = "%Y-%m-%d-%H%M%S"


class RotationEngine:
    """Opens the dated log file for "now" and keeps ``folder/base_filename``
    pointing at it.

    The symlink target is stored relative to the folder, so the link keeps
    working when the folder is given as a relative path or moved.
    """

    def __init__(self, config: Config, compressor: Compressor | None = None, time_func=None):
        self._config = config
        self._time_func = time_func or datetime.now
        self._date_format = DEBUG_DATE_FORMAT if config.debug else DATE_FORMAT
        self._link_path = os.path.join(config.folder, config.base_filename)
        if compressor is None and config.compress_on_rotate:
            compressor = Compressor(config.compression_level)
        self._compressor = compressor

    @property
    def link_path(self) -> str:
        return self._link_path

    def dated_filename(self, now: datetime | None = None) -> str:
        now = now or self._time_func()
        return f"{self._config.base_filename}-{now.strftime(self._date_format)}"

    def current_target(self) -> str | None:
        """Return the symlink's target without following it, or None."""
        try:
            return os.readlink(self._link_path)
        except OSError:
            return None

    def rotate(self):
        """Open the dated file for now and repoint the symlink. Returns the open file.

        The superseded file is handed to the compressor only once the link
        points at the new file, so the link never names a file being removed.
        """
        filename = self.dated_filename()
        filepath = os.path.join(self._config.folder, filename)
        previous = self.current_target()
        relink = previous != filename

        superseded = None
        if relink and previous is not None:
            previous_path = os.path.join(self._config.folder, previous)
            if self._should_compress(previous_path, filepath):
                superseded = previous_path

        try:
            f = open(filepath, "ab")
        except OSError as exc:
            raise RotationError(f"cannot open log file {filepath}: {exc}") from exc

        if relink:
            try:
                self._relink(filename)
            except OSError as exc:
                f.close()
                raise RotationError(f"cannot link {self._link_path} -> {filename}: {exc}") from exc
            logger.info("Rotated: %s -> %s", previous or "(none)", filename)

        if superseded is not None:
            logger.info("Handing %s to the compressor", superseded)
            self._compressor.submit(superseded)
        return f

    def _should_compress(self, previous_path: str, filepath: str) -> bool:
        if not self._config.compress_on_rotate or self._compressor is None:
            return False
        if previous_path.endswith(".gz"):
            return False
        if os.path.abspath(previous_path) == os.path.abspath(filepath):
            return False
        return os.path.isfile(previous_path)

    def _relink(self, filename: str):
        """Atomically replace whatever sits at the link path with a symlink to *filename*."""
        if os.path.lexists(self._link_path) and not os.path.islink(self._link_path):
            logger.warning("Replacing non-symlink entry at %s", self._link_path)
        tmp_link = f"{self._link_path}.{os.getpid()}.tmp"
        try:
            os.remove(tmp_link)
        except FileNotFoundError:
            pass
        os.symlink(filename, tmp_link)
        try:
            os.replace(tmp_link, self._link_path)
        except OSError:
            os.remove(tmp_link)
            raise
