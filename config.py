"""Configuration settings for BreakBell."""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv


def is_bundled() -> bool:
    """
    Check if the application is running from a PyInstaller bundle.

    Returns:
        True if running from a bundled executable, False otherwise.
    """
    return getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS')


# Load environment variables from .env file (only in development)
if not is_bundled():
    # Explicitly load from the project root (where config.py lives)
    _env_path = Path(__file__).parent / ".env"
    load_dotenv(_env_path)

APP_NAME = "BreakBell"

# Work/rest rhythm (milliseconds). Not read from the environment.
MIN_INTERVAL_MS = 4 * 60 * 1000   # Shortest gap between check-ins
MAX_INTERVAL_MS = 6 * 60 * 1000   # Longest gap between check-ins
WORK_PERIOD_MS = 90 * 60 * 1000   # Work period before an enforced rest
REST_PERIOD_MS = 20 * 60 * 1000   # Length of the enforced rest
MICRO_BREAK_SECONDS = 20          # Suggested micro-break shown in check-ins

# A wake-up later than this past its deadline is logged (laptop suspend, clock jump)
OVERSLEEP_WARNING_MS = 60 * 1000

# How long wait() blocks per join slice so signals reach the main thread
JOIN_POLL_SECONDS = 0.5

# Side-effect timeouts (bound the time the loop holds its lock)
NOTIFY_TIMEOUT_SECONDS = 5
SOUND_TIMEOUT_SECONDS = 5

# Notification icon
ICON_FILENAME = "breakbell-icon.png"
ICON_SIZE = 128

# Freedesktop sound theme (Linux)
FREEDESKTOP_SOUND_DIR = Path("/usr/share/sounds/freedesktop/stereo")

# macOS system sounds
MACOS_SOUND_DIR = Path("/System/Library/Sounds")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()  # Can override in .env: DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
