"""Shared style constants for levari."""

COLORS = {
    "bass": "#cc5500",
    "primary": "#ff8c00",
    "highlight": "#ffb347",
    "focus": "#d65fd6",
    "background": "#1a1a1a",
    "surface": "#2d2d2d",
    "muted": "#888888",
    "dim": "#555555",
    "inactive": "#333333",
}

COLOR_BASS = COLORS["bass"]
COLOR_PRIMARY = COLORS["primary"]
COLOR_HIGHLIGHT = COLORS["highlight"]
COLOR_FOCUS = COLORS["focus"]
COLOR_BACKGROUND = COLORS["background"]
COLOR_SURFACE = COLORS["surface"]
COLOR_MUTED = COLORS["muted"]
COLOR_DIM = COLORS["dim"]
COLOR_INACTIVE = COLORS["inactive"]
