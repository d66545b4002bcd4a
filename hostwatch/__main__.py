"""Entry point for running the monitor as a module."""

import argparse
import atexit
import logging
import signal
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .app import MonitorApp

# Global reference for signal handlers
_app: MonitorApp | None = None
_logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging with rotation support.

    Args:
        log_level: The logging level (DEBUG, INFO, WARNING, ERROR)
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    log_dir = Path("logs")
    try:
        log_dir.mkdir(exist_ok=True)
        # Rotate at 10MB, keep 5 backup files
        file_handler = RotatingFileHandler(
            log_dir / "hostwatch.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        handlers.append(file_handler)
    except (PermissionError, OSError):
        pass  # Skip file logging if we can't write

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def _signal_handler(signum: int, frame: object) -> None:
    """Handle shutdown signals gracefully.

    Args:
        signum: Signal number received
        frame: Current stack frame (unused)
    """
    signal_name = signal.Signals(signum).name
    _logger.info(f"Received {signal_name}, shutting down...")

    if _app is not None:
        _app.exit()


def _cleanup() -> None:
    """Cleanup handler called on exit."""
    _logger.info("hostwatch shutdown complete")


def setup_signal_handlers() -> None:
    """Set up signal handlers for graceful shutdown."""
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)
    atexit.register(_cleanup)


def main() -> None:
    """Main entry point."""
    global _app

    parser = argparse.ArgumentParser(
        description="hostwatch - monitor TCP reachability of a list of hosts"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.json"),
        help="Path to configuration file (default: config.json)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        default=None,
        help="Per-attempt connect timeout in seconds, 1-10 (overrides config)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Check every target once, print results and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    args = parser.parse_args()

    if args.version:
        from . import __version__

        print(f"hostwatch v{__version__}")
        sys.exit(0)

    if not args.config.exists():
        print(f"Config file not found: {args.config}")
        print("Create a config.json to add targets. See config.example.json for format.")

    _app = MonitorApp(config_path=args.config, timeout=args.timeout)

    log_level = "DEBUG" if args.verbose else _app.config.settings.log_level
    setup_logging(log_level)

    if args.once:
        sys.exit(_app.run_once())

    setup_signal_handlers()
    _logger.info(f"Starting hostwatch with {len(_app.targets)} targets")
    _app.run()


if __name__ == "__main__":
    main()
