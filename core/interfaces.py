"""Collaborator contracts consumed by the scheduler."""

import time
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol


class Urgency(Enum):
    """Notification severity. Values match notify-send's --urgency levels."""
    NORMAL = "normal"
    CRITICAL = "critical"


class SoundKind(Enum):
    """Which alert to play."""
    CHECKIN = "checkin"  # Regular check-in during work
    BOUNDARY_COMPLETE = "complete"  # Work period finished, rest begins
    MESSAGE = "message"  # Session start, rest over


class Notifier(Protocol):
    """Surfaces a reminder on the desktop."""

    def init(self) -> None:
        ...

    def show(
        self,
        title: str,
        body: str,
        urgency: Urgency = Urgency.NORMAL,
        icon_path: Optional[Path] = None,
    ) -> None:
        ...

    def uninit(self) -> None:
        ...


class SoundPlayer(Protocol):
    """Plays an audible alert."""

    def play(self, kind: SoundKind) -> None:
        ...


class Clock(Protocol):
    """Wall-clock source in milliseconds since the epoch."""

    def now(self) -> int:
        ...


class SystemClock:
    """Clock backed by time.time()."""

    def now(self) -> int:
        return int(time.time() * 1000)
