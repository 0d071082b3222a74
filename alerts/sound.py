"""
Alert sounds.

SoundPlayer tries an ordered list of playback strategies until one works,
then falls back to the terminal bell:
- Linux: paplay, aplay, pw-play (freedesktop sound theme)
- macOS: afplay (system sounds)
- Windows: winsound (system aliases)
"""

import sys
import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import config
from core.errors import PlayError
from core.interfaces import SoundKind

logger = logging.getLogger(__name__)


FREEDESKTOP_SOUNDS: Dict[SoundKind, Path] = {
    SoundKind.CHECKIN: config.FREEDESKTOP_SOUND_DIR / "bell.oga",
    SoundKind.BOUNDARY_COMPLETE: config.FREEDESKTOP_SOUND_DIR / "complete.oga",
    SoundKind.MESSAGE: config.FREEDESKTOP_SOUND_DIR / "message.oga",
}

MACOS_SOUNDS: Dict[SoundKind, Path] = {
    SoundKind.CHECKIN: config.MACOS_SOUND_DIR / "Tink.aiff",
    SoundKind.BOUNDARY_COMPLETE: config.MACOS_SOUND_DIR / "Glass.aiff",
    SoundKind.MESSAGE: config.MACOS_SOUND_DIR / "Pop.aiff",
}

WINDOWS_SOUND_ALIASES: Dict[SoundKind, str] = {
    SoundKind.CHECKIN: "SystemAsterisk",
    SoundKind.BOUNDARY_COMPLETE: "SystemExclamation",
    SoundKind.MESSAGE: "SystemDefault",
}


class CommandStrategy:
    """Play a sound file with an external player process."""

    def __init__(
        self,
        player: str,
        sounds: Dict[SoundKind, Path],
        args: Sequence[str] = (),
        timeout: float = config.SOUND_TIMEOUT_SECONDS,
    ):
        self.name = player
        self.player = player
        self.sounds = sounds
        self.args = list(args)
        self.timeout = timeout

    def play(self, kind: SoundKind) -> None:
        sound_file = self.sounds[kind]
        if not sound_file.exists():
            raise FileNotFoundError(f"Sound file not found: {sound_file}")
        subprocess.run(
            [self.player, *self.args, str(sound_file)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=self.timeout,
            check=True,
        )


class WinsoundStrategy:
    """Play a Windows system sound alias."""

    name = "winsound"

    def play(self, kind: SoundKind) -> None:
        import winsound
        winsound.PlaySound(WINDOWS_SOUND_ALIASES[kind], winsound.SND_ALIAS)


def default_strategies(timeout: float = config.SOUND_TIMEOUT_SECONDS) -> List:
    """Playback strategies for the current platform, in order of preference."""
    if sys.platform == "darwin":
        return [CommandStrategy("afplay", MACOS_SOUNDS, timeout=timeout)]
    if sys.platform == "win32":
        return [WinsoundStrategy()]
    return [
        CommandStrategy("paplay", FREEDESKTOP_SOUNDS, timeout=timeout),
        CommandStrategy("aplay", FREEDESKTOP_SOUNDS, args=["-q"], timeout=timeout),
        CommandStrategy("pw-play", FREEDESKTOP_SOUNDS, timeout=timeout),
    ]


class SoundPlayer:
    """Plays alert sounds, degrading through strategies to the terminal bell."""

    def __init__(self, strategies: Optional[List] = None):
        self.strategies = strategies if strategies is not None else default_strategies()

    def play(self, kind: SoundKind) -> None:
        """
        Play the sound for `kind`.

        Raises:
            PlayError: Only if every strategy and the terminal bell fail.
        """
        for strategy in self.strategies:
            try:
                strategy.play(kind)
                logger.debug(f"Played {kind.value} sound via {strategy.name}")
                return
            except Exception as e:
                logger.debug(f"{strategy.name} could not play {kind.value}: {e}")

        self._ring_bell(kind)

    @staticmethod
    def _ring_bell(kind: SoundKind) -> None:
        # stdout is None under pythonw and may be closed when detached
        try:
            sys.stdout.write("\a")
            sys.stdout.flush()
        except (AttributeError, OSError, ValueError) as e:
            raise PlayError(f"No playback strategy could play {kind.value}: {e}") from e
        logger.debug(f"Played {kind.value} sound via terminal bell")
