"""Configuration module: frozen dataclass loaded from env vars and CLI args."""

import argparse
import os
import sys
from dataclasses import dataclass

from rotatelog.errors import ConfigurationError

VERSION = "1.0.0"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    folder: str = ""
    base_filename: str = ""
    compress_on_rotate: bool = False
    debug: bool = False
    compression_level: int = 6


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="rotatelog",
        description="Automatic date-based log rotation for piped output.",
    )
    parser.add_argument(
        "-d", "--directory",
        default=None,
        help="Folder for the dated log files (must exist and be writable)",
    )
    parser.add_argument(
        "-f", "--filename",
        default=None,
        help="Base filename for dated log files and the current-log symlink",
    )
    parser.add_argument(
        "-c", "--compress",
        action="store_true",
        default=None,
        help="Gzip the previous log file after each rotation",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Rotate on SIGUSR1 and use second-granular filenames",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {VERSION}",
    )
    return parser


def validate(config: Config) -> Config:
    """Raise ConfigurationError unless the config can drive the relay."""
    if not config.folder:
        raise ConfigurationError("a log directory is required (-d/--directory)")
    if not config.base_filename:
        raise ConfigurationError("a base filename is required (-f/--filename)")
    if os.sep in config.base_filename or (os.altsep and os.altsep in config.base_filename):
        raise ConfigurationError(
            f"base filename must not contain a path separator: {config.base_filename!r}"
        )
    if config.base_filename in (".", ".."):
        raise ConfigurationError(f"invalid base filename: {config.base_filename!r}")
    if not os.path.isdir(config.folder):
        raise ConfigurationError(f"log directory does not exist: {config.folder}")
    if not os.access(config.folder, os.W_OK | os.X_OK):
        raise ConfigurationError(f"log directory is not writable: {config.folder}")
    if not 1 <= config.compression_level <= 9:
        raise ConfigurationError(
            f"compression level must be between 1 and 9, got {config.compression_level}"
        )
    return config


def load_config(argv: list[str] | None = None) -> Config:
    """Build Config from defaults <- env vars <- CLI args (highest priority)."""
    if argv is None:
        argv = sys.argv[1:]

    args = build_parser().parse_args(argv)

    raw_level = os.environ.get("ROTATELOG_COMPRESSION_LEVEL", str(Config.compression_level))
    try:
        env_level = int(raw_level)
    except ValueError:
        raise ConfigurationError(f"invalid ROTATELOG_COMPRESSION_LEVEL: {raw_level!r}") from None

    env_folder = os.environ.get("ROTATELOG_DIRECTORY", Config.folder)
    env_filename = os.environ.get("ROTATELOG_FILENAME", Config.base_filename)
    env_compress = _parse_bool(os.environ.get("ROTATELOG_COMPRESS", "false"))
    env_debug = _parse_bool(os.environ.get("ROTATELOG_DEBUG", "false"))

    config = Config(
        folder=args.directory if args.directory is not None else env_folder,
        base_filename=args.filename if args.filename is not None else env_filename,
        compress_on_rotate=args.compress if args.compress is not None else env_compress,
        debug=args.debug if args.debug is not None else env_debug,
        compression_level=env_level,
    )
    return validate(config)
