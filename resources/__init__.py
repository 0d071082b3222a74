"""Bundled resources for BreakBell."""

from resources.icon import provision_icon, render_icon

__all__ = ["provision_icon", "render_icon"]
