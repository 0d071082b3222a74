#!/usr/bin/env python3
"""
BreakBell - Main Entry Point

Background work/rest scheduler. Sends a check-in reminder every few
minutes while you work, and enforces a rest after each work period.

Usage:
    python main.py              # Run until Ctrl+C
    python main.py --verbose    # Debug logging
"""

import sys
import signal
import logging
import argparse
from typing import List, Optional

import config
from core import BreakScheduler
from core.errors import StartupError
from alerts import DesktopNotifier, SoundPlayer
from resources import provision_icon

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging from config (or DEBUG when verbose)."""
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(level=level, format=config.LOG_FORMAT)


def build_scheduler() -> BreakScheduler:
    """Wire the scheduler to the platform notifier, sound player and icon."""
    return BreakScheduler(
        notifier=DesktopNotifier(config.APP_NAME),
        sound_player=SoundPlayer(),
        icon_provider=provision_icon,
    )


def install_signal_handlers(scheduler: BreakScheduler) -> None:
    """
    Route SIGINT/SIGTERM to scheduler.stop().

    The handler only requests cancellation; the loop thread does the rest.
    """
    def _handle_signal(signum, frame) -> None:
        logger.info("Interrupt received, shutting down...")
        scheduler.stop()

    signal.signal(signal.SIGINT, _handle_signal)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, _handle_signal)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit status (0 on clean shutdown, 1 on startup failure).
    """
    parser = argparse.ArgumentParser(
        description="BreakBell - work/rest break reminders",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    scheduler = build_scheduler()
    install_signal_handlers(scheduler)

    try:
        scheduler.start()
    except StartupError as e:
        logger.error(f"Fatal error: {e}")
        print(f"\n❌ Fatal error: {e}")
        return 1

    work_minutes = config.WORK_PERIOD_MS // 60000
    rest_minutes = config.REST_PERIOD_MS // 60000
    print(f"\n⏰ {config.APP_NAME} running: {work_minutes} min work / {rest_minutes} min rest.")
    print("   Press Ctrl+C to stop\n")

    scheduler.wait()

    print("\n👋 Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
