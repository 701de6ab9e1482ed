"""rotatelog: relay stdin into date-stamped log files behind a current-log symlink."""

import logging
import sys
import threading

from rotatelog.clock import ClockWatcher
from rotatelog.config import build_parser, load_config
from rotatelog.engine import RotationEngine
from rotatelog.errors import ConfigurationError, RotateLogError
from rotatelog.relay import LogRelay
from rotatelog.trigger import SignalTrigger

logger = logging.getLogger("rotatelog")


def main(argv: list[str] | None = None, stream=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [rotatelog] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(argv)
    except ConfigurationError as e:
        build_parser().print_usage(sys.stderr)
        print(f"rotatelog: error: {e}", file=sys.stderr)
        return 2

    logger.info(
        "Starting: folder=%s, filename=%s, compress=%s, debug=%s",
        config.folder, config.base_filename, config.compress_on_rotate, config.debug,
    )

    rotate_event = threading.Event()
    near_end_event = threading.Event()

    ClockWatcher(rotate_event, near_end_event).start()
    trigger = None
    if config.debug:
        trigger = SignalTrigger()
        trigger.install()

    engine = RotationEngine(config)
    relay = LogRelay(
        engine, stream or sys.stdin.buffer, rotate_event, near_end_event, trigger=trigger,
    )

    try:
        total = relay.run()
    except RotateLogError as e:
        logger.error("Fatal: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted after %d bytes", relay.bytes_written)
        return 130

    logger.info("End of input. %d bytes written, %d rotation(s)", total, relay.rotations)
    return 0


if __name__ == "__main__":
    sys.exit(main())
