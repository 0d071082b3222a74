"""
Notification icon provisioning.

Renders the BreakBell icon (a white bell on a teal rounded square) with
Pillow and writes it as a PNG the notifier can reference by path.
"""

import logging
import tempfile
from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageDraw

import config
from core.errors import IconProvisionError

logger = logging.getLogger(__name__)

# Icon styling
ICON_BACKGROUND_COLOR = (0, 128, 128, 255)  # Teal
ICON_FOREGROUND_COLOR = (255, 255, 255, 255)
ICON_CLAPPER_COLOR = (0, 80, 80, 255)
ICON_CORNER_RADIUS_RATIO = 0.22  # Corner radius as ratio of icon size


def render_icon(size: int = config.ICON_SIZE) -> Image.Image:
    """
    Draw the icon.

    Args:
        size: Width and height in pixels.

    Returns:
        RGBA image with transparent corners.
    """
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    def s(ratio: float) -> int:
        return int(round(size * ratio))

    # Background (PIL 9.2.0+ has rounded_rectangle)
    draw.rounded_rectangle(
        [(0, 0), (size - 1, size - 1)],
        radius=s(ICON_CORNER_RADIUS_RATIO),
        fill=ICON_BACKGROUND_COLOR,
    )

    # Bell: handle, dome, waist, flared rim, clapper
    draw.ellipse([s(0.45), s(0.13), s(0.55), s(0.23)], fill=ICON_FOREGROUND_COLOR)
    draw.ellipse([s(0.30), s(0.20), s(0.70), s(0.56)], fill=ICON_FOREGROUND_COLOR)
    draw.rectangle([s(0.30), s(0.38), s(0.70), s(0.66)], fill=ICON_FOREGROUND_COLOR)
    draw.polygon(
        [(s(0.30), s(0.64)), (s(0.70), s(0.64)), (s(0.80), s(0.74)), (s(0.20), s(0.74))],
        fill=ICON_FOREGROUND_COLOR,
    )
    draw.ellipse([s(0.43), s(0.74), s(0.57), s(0.86)], fill=ICON_FOREGROUND_COLOR)
    draw.ellipse([s(0.46), s(0.76), s(0.54), s(0.83)], fill=ICON_CLAPPER_COLOR)

    return img


def provision_icon(directory: Optional[Union[str, Path]] = None) -> Path:
    """
    Write the icon PNG to disk.

    Args:
        directory: Target directory. Defaults to the system temp
            directory (honours TMPDIR).

    Returns:
        Path to the written PNG.

    Raises:
        IconProvisionError: If the file cannot be written.
    """
    target_dir = Path(directory) if directory else Path(tempfile.gettempdir())
    icon_path = target_dir / config.ICON_FILENAME

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        render_icon().save(icon_path, format="PNG")
    except OSError as e:
        raise IconProvisionError(f"Could not write icon to {icon_path}: {e}") from e

    logger.debug(f"Icon written to {icon_path}")
    return icon_path
