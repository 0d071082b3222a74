"""
Side-effect backends for BreakBell: desktop notifications and alert sounds.
"""

from alerts.notifier import DesktopNotifier
from alerts.sound import SoundPlayer

__all__ = ["DesktopNotifier", "SoundPlayer"]
