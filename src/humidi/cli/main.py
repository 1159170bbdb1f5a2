"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from humidi import __version__

from .commands import config_group, midi_group

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = Path.home() / ".humidi" / "logs"


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    """
    Determine where log output goes.

    Args:
        debug: Debug mode logs to ./humidi-debug.log
        log_file: Explicit log file path, takes precedence

    Returns:
        Path of the log file
    """
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "humidi-debug.log"
    return DEFAULT_LOG_DIR / "humidi.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Override with explicit log level if provided
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")


@click.group()
@click.version_option(version=__version__, prog_name="humidi")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v: INFO, -vv: DEBUG)")
@click.option(
    "--debug", is_flag=True, help="Enable debug mode (DEBUG level, logs to ./humidi-debug.log)"
)
@click.option("--log-file", type=click.Path(path_type=Path), default=None, help="Custom log file path")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Log level for file logging (default: INFO)",
)
def cli(verbose: int, debug: bool, log_file: Optional[Path], log_level: str):
    """
    humidi - human-friendly MIDI input.

    Decodes MIDI input into note, pitch bend and sustain events, and releases
    held notes when a device is unplugged.

    \b
    Examples:
      # List MIDI input ports
      humidi midi list

      # Print decoded events from every input
      humidi midi monitor

      # Only channel 0 note events
      humidi midi monitor --channel 0 --event noteon --event noteoff

      # Show configuration
      humidi config show
    """
    setup_logging(verbose, debug, log_file, log_level)


cli.add_command(midi_group)
cli.add_command(config_group)

if __name__ == "__main__":
    cli()
