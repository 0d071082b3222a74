"""
Tests for resources/icon.py - icon rendering and provisioning.
"""

import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PIL import Image

# Ensure project root is on the path
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from resources.icon import provision_icon, render_icon
from core.errors import IconProvisionError, StartupError


class TestRenderIcon(unittest.TestCase):

    def test_size_and_mode(self):
        img = render_icon(64)
        self.assertEqual(img.size, (64, 64))
        self.assertEqual(img.mode, "RGBA")

    def test_transparent_corners(self):
        """Rounded background leaves the corners transparent."""
        img = render_icon(128)
        self.assertEqual(img.getpixel((0, 0))[3], 0)
        self.assertEqual(img.getpixel((64, 64))[3], 255)


class TestProvisionIcon(unittest.TestCase):

    def test_writes_png(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = provision_icon(tmpdir)
            self.assertEqual(path, Path(tmpdir) / config.ICON_FILENAME)
            self.assertTrue(path.exists())
            with Image.open(path) as img:
                self.assertEqual(img.format, "PNG")
                self.assertEqual(img.size, (config.ICON_SIZE, config.ICON_SIZE))

    def test_defaults_to_temp_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            with patch("resources.icon.tempfile.gettempdir", return_value=tmpdir):
                path = provision_icon()
            self.assertEqual(path.parent, Path(tmpdir))
            self.assertTrue(path.exists())

    def test_overwrites_existing_icon(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / config.ICON_FILENAME).write_bytes(b"stale")
            path = provision_icon(tmpdir)
            with Image.open(path) as img:
                self.assertEqual(img.format, "PNG")

    def test_unwritable_location_is_fatal(self):
        """A file where the directory should be raises IconProvisionError."""
        with tempfile.NamedTemporaryFile() as f:
            with self.assertRaises(IconProvisionError) as ctx:
                provision_icon(f.name)
        self.assertIsInstance(ctx.exception, StartupError)


if __name__ == "__main__":
    unittest.main()
