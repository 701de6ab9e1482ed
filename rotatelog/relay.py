"""The hot path: copy input chunks into the active dated log file."""

import logging
import threading
import time

from rotatelog.engine import RotationEngine
from rotatelog.errors import InputReadError, RotationError
from rotatelog.trigger import SignalTrigger

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
SHORT_READ_SLEEP = 0.01


class LogRelay:
    """Reads *stream* until EOF, rotating through *engine* whenever
    *rotate_event* is set or *trigger* has a pending request.

    *stream* is a binary buffered reader (``sys.stdin.buffer``); bulk reads
    use ``read1`` so a slow producer's output is written as soon as it
    arrives instead of waiting for a full chunk.
    """

    def __init__(
        self,
        engine: RotationEngine,
        stream,
        rotate_event: threading.Event,
        near_end_event: threading.Event,
        chunk_size: int = CHUNK_SIZE,
        sleep_func=None,
        trigger: SignalTrigger | None = None,
    ):
        self._engine = engine
        self._stream = stream
        self._rotate = rotate_event
        self._near_end = near_end_event
        self._chunk_size = chunk_size
        self._sleep = sleep_func or time.sleep
        self._trigger = trigger
        self._file = None
        self._bytes_written = 0
        self._rotations = 0

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    @property
    def rotations(self) -> int:
        return self._rotations

    def _read(self) -> bytes:
        try:
            if self._near_end.is_set():
                return self._stream.readline(self._chunk_size)
            return self._stream.read1(self._chunk_size)
        except OSError as exc:
            raise InputReadError(f"error reading input: {exc}") from exc

    def _rotation_due(self) -> bool:
        due = self._trigger is not None and self._trigger.consume()
        if self._rotate.is_set():
            self._rotate.clear()
            due = True
        return due

    def _swap(self, f):
        old, self._file = self._file, f
        if old is not None:
            old.close()

    def _write(self, chunk: bytes):
        try:
            self._file.write(chunk)
            self._file.flush()
        except OSError as exc:
            raise RotationError(f"error writing to {self._file.name}: {exc}") from exc
        self._bytes_written += len(chunk)

    def run(self) -> int:
        """Relay until end of input. Returns the number of bytes written."""
        self._swap(self._engine.rotate())
        try:
            while True:
                chunk = self._read()
                if not chunk:
                    break

                if self._rotation_due():
                    self._swap(self._engine.rotate())
                    self._rotations += 1

                self._write(chunk)

                if len(chunk) == 1:
                    self._sleep(SHORT_READ_SLEEP)
        finally:
            self._swap(None)
        return self._bytes_written
