"""Forced rotation on an OS signal (enabled with --debug)."""

import logging
import signal

logger = logging.getLogger(__name__)


class SignalTrigger:
    """Records a pending rotation whenever *signum* is delivered.

    The handler only sets a flag; the relay polls it with ``consume``.
    ``install`` must be called from the main thread.
    """

    def __init__(self, signum: int | None = None):
        self._signum = signum if signum is not None else signal.SIGUSR1
        self._pending = False
        self._previous = None

    @property
    def signum(self) -> int:
        return self._signum

    @property
    def pending(self) -> bool:
        return self._pending

    def _handler(self, _signum, _frame):
        self._pending = True

    def consume(self) -> bool:
        """Return True and clear the flag if a rotation was requested."""
        if not self._pending:
            return False
        self._pending = False
        logger.info("Forced rotation requested (signal %d)", self._signum)
        return True

    def install(self):
        self._previous = signal.signal(self._signum, self._handler)
        logger.info("Send signal %d to force a rotation", self._signum)

    def uninstall(self):
        if self._previous is not None:
            signal.signal(self._signum, self._previous)
            self._previous = None
