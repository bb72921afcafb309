"""waybarctl — Waybar configuration editor CLI."""

__version__ = "0.1.0"
