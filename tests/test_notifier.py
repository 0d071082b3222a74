"""
Tests for alerts/notifier.py - backend selection and command building.
No real notifications are shown; subprocess and plyer are mocked.
"""

import sys
import subprocess
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from alerts.notifier import DesktopNotifier, BACKEND_NOTIFY_SEND, BACKEND_OSASCRIPT, BACKEND_PLYER
from core.errors import NotifierInitError, NotifyError, StartupError
from core.interfaces import Urgency


class TestLinuxNotifier(unittest.TestCase):
    """notify-send backend."""

    def _init_notifier(self):
        notifier = DesktopNotifier("TestApp")
        with patch("alerts.notifier.sys.platform", "linux"), \
                patch("alerts.notifier.shutil.which", return_value="/usr/bin/notify-send"):
            notifier.init()
        return notifier

    def test_init_without_notify_send_fails(self):
        """Missing notify-send is a startup failure."""
        notifier = DesktopNotifier("TestApp")
        with patch("alerts.notifier.sys.platform", "linux"), \
                patch("alerts.notifier.shutil.which", return_value=None):
            with self.assertRaises(NotifierInitError) as ctx:
                notifier.init()
        self.assertIsInstance(ctx.exception, StartupError)
        self.assertFalse(notifier.is_initialised)

    def test_init_selects_notify_send(self):
        notifier = self._init_notifier()
        self.assertTrue(notifier.is_initialised)
        self.assertEqual(notifier.backend, BACKEND_NOTIFY_SEND)

    @patch("alerts.notifier.subprocess.run")
    def test_show_builds_command(self, mock_run):
        notifier = self._init_notifier()
        notifier.show("Break Time!", "Rest now", Urgency.CRITICAL, Path("/tmp/icon.png"))

        argv = mock_run.call_args[0][0]
        self.assertEqual(argv[0], "/usr/bin/notify-send")
        self.assertIn("--app-name=TestApp", argv)
        self.assertIn("--urgency=critical", argv)
        self.assertIn("--icon=/tmp/icon.png", argv)
        self.assertEqual(argv[-2:], ["Break Time!", "Rest now"])
        self.assertTrue(mock_run.call_args.kwargs["check"])

    @patch("alerts.notifier.subprocess.run")
    def test_show_without_icon(self, mock_run):
        notifier = self._init_notifier()
        notifier.show("Title", "Body")
        argv = mock_run.call_args[0][0]
        self.assertIn("--urgency=normal", argv)
        self.assertFalse(any(arg.startswith("--icon") for arg in argv))

    @patch("alerts.notifier.subprocess.run")
    def test_show_failure_raises_notify_error(self, mock_run):
        notifier = self._init_notifier()
        mock_run.side_effect = subprocess.CalledProcessError(1, "notify-send", stderr=b"no dbus")
        with self.assertRaises(NotifyError) as ctx:
            notifier.show("Title", "Body")
        self.assertIn("no dbus", str(ctx.exception))

    @patch("alerts.notifier.subprocess.run")
    def test_show_timeout_raises_notify_error(self, mock_run):
        notifier = self._init_notifier()
        mock_run.side_effect = subprocess.TimeoutExpired("notify-send", 5)
        with self.assertRaises(NotifyError):
            notifier.show("Title", "Body")

    @patch("alerts.notifier.subprocess.run")
    def test_show_missing_binary_raises_notify_error(self, mock_run):
        notifier = self._init_notifier()
        mock_run.side_effect = FileNotFoundError("notify-send")
        with self.assertRaises(NotifyError):
            notifier.show("Title", "Body")

    def test_show_before_init_raises(self):
        notifier = DesktopNotifier("TestApp")
        with self.assertRaises(NotifyError):
            notifier.show("Title", "Body")

    def test_uninit_is_idempotent(self):
        notifier = self._init_notifier()
        notifier.uninit()
        notifier.uninit()
        self.assertFalse(notifier.is_initialised)
        with self.assertRaises(NotifyError):
            notifier.show("Title", "Body")


class TestMacNotifier(unittest.TestCase):
    """osascript backend."""

    @patch("alerts.notifier.subprocess.run")
    def test_show_escapes_quotes(self, mock_run):
        notifier = DesktopNotifier("TestApp")
        with patch("alerts.notifier.sys.platform", "darwin"), \
                patch("alerts.notifier.shutil.which", return_value="/usr/bin/osascript"):
            notifier.init()
        self.assertEqual(notifier.backend, BACKEND_OSASCRIPT)

        notifier.show('Say "hi"', "Body")

        argv = mock_run.call_args[0][0]
        self.assertEqual(argv[:2], ["/usr/bin/osascript", "-e"])
        self.assertEqual(argv[2], 'display notification "Body" with title "Say \\"hi\\""')


class TestWindowsNotifier(unittest.TestCase):
    """plyer backend."""

    def test_show_uses_plyer(self):
        fake_plyer = MagicMock()
        notifier = DesktopNotifier("TestApp")
        with patch("alerts.notifier.sys.platform", "win32"), \
                patch.dict(sys.modules, {"plyer": fake_plyer}):
            notifier.init()
        self.assertEqual(notifier.backend, BACKEND_PLYER)

        notifier.show("Title", "Body")

        fake_plyer.notification.notify.assert_called_once()
        kwargs = fake_plyer.notification.notify.call_args.kwargs
        self.assertEqual(kwargs["title"], "Title")
        self.assertEqual(kwargs["message"], "Body")
        self.assertEqual(kwargs["app_name"], "TestApp")

    def test_plyer_failure_raises_notify_error(self):
        fake_plyer = MagicMock()
        fake_plyer.notification.notify.side_effect = NotImplementedError("no backend")
        notifier = DesktopNotifier("TestApp")
        with patch("alerts.notifier.sys.platform", "win32"), \
                patch.dict(sys.modules, {"plyer": fake_plyer}):
            notifier.init()
        with self.assertRaises(NotifyError):
            notifier.show("Title", "Body")


if __name__ == "__main__":
    unittest.main()
