"""
Desktop notifications.

Picks a backend per platform:
- Linux: notify-send (libnotify)
- macOS: osascript
- Windows: plyer
"""

import sys
import shutil
import logging
import subprocess
from pathlib import Path
from typing import List, Optional

import config
from core.errors import NotifierInitError, NotifyError
from core.interfaces import Urgency

logger = logging.getLogger(__name__)

BACKEND_NOTIFY_SEND = "notify-send"
BACKEND_OSASCRIPT = "osascript"
BACKEND_PLYER = "plyer"


def _applescript_string(text: str) -> str:
    """Quote text as an AppleScript string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class DesktopNotifier:
    """
    Shows native desktop notifications.

    Must be initialised once with init() before show(), and torn down
    with uninit() at shutdown.
    """

    def __init__(self, app_name: str = config.APP_NAME, timeout: float = config.NOTIFY_TIMEOUT_SECONDS):
        self.app_name = app_name
        self.timeout = timeout
        self.backend: Optional[str] = None
        self._command: Optional[str] = None
        self._plyer_notification = None

    @property
    def is_initialised(self) -> bool:
        return self.backend is not None

    def init(self) -> None:
        """
        Select and verify the platform backend.

        Raises:
            NotifierInitError: If no usable backend exists on this system.
        """
        if self.is_initialised:
            return

        if sys.platform == "darwin":
            self._command = shutil.which("osascript")
            if not self._command:
                raise NotifierInitError("osascript not found; cannot show macOS notifications")
            self.backend = BACKEND_OSASCRIPT
        elif sys.platform == "win32":
            try:
                from plyer import notification
            except ImportError as e:
                raise NotifierInitError("plyer is required for notifications on Windows") from e
            self._plyer_notification = notification
            self.backend = BACKEND_PLYER
        else:
            self._command = shutil.which("notify-send")
            if not self._command:
                raise NotifierInitError(
                    "notify-send not found. Install libnotify "
                    "(e.g. sudo apt install libnotify-bin)"
                )
            self.backend = BACKEND_NOTIFY_SEND

        logger.info(f"Notifications via {self.backend}")

    def show(
        self,
        title: str,
        body: str,
        urgency: Urgency = Urgency.NORMAL,
        icon_path: Optional[Path] = None,
    ) -> None:
        """
        Show a notification.

        Raises:
            NotifyError: If the notifier is not initialised or the backend fails.
        """
        if not self.is_initialised:
            raise NotifyError("Notifier not initialised")

        if self.backend == BACKEND_PLYER:
            try:
                self._plyer_notification.notify(
                    title=title,
                    message=body,
                    app_name=self.app_name,
                    timeout=10,
                )
            except Exception as e:
                raise NotifyError(f"plyer notification failed: {e}") from e
            return

        argv = self._build_command(title, body, urgency, icon_path)
        try:
            subprocess.run(
                argv,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode(errors="replace").strip()
            raise NotifyError(f"{self.backend} exited with status {e.returncode}: {stderr}") from e
        except subprocess.TimeoutExpired as e:
            raise NotifyError(f"{self.backend} timed out after {self.timeout}s") from e
        except OSError as e:
            raise NotifyError(f"Could not run {self.backend}: {e}") from e

    def uninit(self) -> None:
        """Release the backend. Safe to call more than once."""
        if not self.is_initialised:
            return
        logger.debug(f"Closing {self.backend} notifier")
        self.backend = None
        self._command = None
        self._plyer_notification = None

    def _build_command(
        self,
        title: str,
        body: str,
        urgency: Urgency,
        icon_path: Optional[Path],
    ) -> List[str]:
        if self.backend == BACKEND_OSASCRIPT:
            script = f"display notification {_applescript_string(body)} with title {_applescript_string(title)}"
            return [self._command, "-e", script]

        argv = [self._command, f"--app-name={self.app_name}", f"--urgency={urgency.value}"]
        if icon_path:
            argv.append(f"--icon={icon_path}")
        argv.extend([title, body])
        return argv
