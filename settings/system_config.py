# /settings/system_config.py

"""
Telescope System Configuration

Centralized map-wide adjustable settings:
- Viewport limits (zoom range, wheel step)
- Pulse / marker animation timing
- Map drawing parameters (sizes, colors)
- Static-data coordinate correction defaults
"""

# ---------------------------------------------------------------------------
# Viewport / zoom
# ---------------------------------------------------------------------------
# Minimum and maximum zoom factor a map pane accepts. Requests outside this
# range are clamped, never rejected. 1.0 means one world unit per pixel after
# coordinate correction.
MAP_ZOOM_MIN = 0.05
MAP_ZOOM_MAX = 8.0

# Default zoom applied when a pane receives its first dataset.
MAP_ZOOM_DEFAULT = 1.0

# Multiplier applied per wheel notch (120 angle-delta units). Values above
# 1.0 zoom in on wheel-up. Typical: 1.10 - 1.35.
MAP_WHEEL_ZOOM_STEP = 1.20

# ---------------------------------------------------------------------------
# Frame clock
# ---------------------------------------------------------------------------
# Milliseconds between animation frames while a pulse is running or a dataset
# load is pending. When nothing animates the pane only repaints on input.
MAP_FRAME_INTERVAL_MS = 16

# ---------------------------------------------------------------------------
# Pulse notifications
# ---------------------------------------------------------------------------
# Seconds a pulse stays visible. Alpha decays linearly from 1.0 to 0.0 over
# this window, then the entry is discarded.
PULSE_DURATION_SEC = 2.0

# Ring stroke (pixels at zoom 1.0) at the start of a pulse, and how many
# pixels per second the ring grows while it fades.
PULSE_BASE_WIDTH_PX = 4.0
PULSE_GROWTH_PX_PER_SEC = 25.0

# Base ring radius (pixels at zoom 1.0) drawn around the pulsing system.
PULSE_RING_RADIUS_PX = 12.0

# ---------------------------------------------------------------------------
# Tracked marker (player location)
# ---------------------------------------------------------------------------
# Period of the marker LED blink in milliseconds. The alpha follows a
# triangle wave: 0 -> 255 -> 0 over one period.
MARKER_BLINK_PERIOD_MS = 2550

# Marker LED radius and its offset from the system dot (pixels).
MARKER_RADIUS_PX = 6.0
MARKER_OFFSET_PX = (10.0, -10.0)

# ---------------------------------------------------------------------------
# Map drawing
# ---------------------------------------------------------------------------
# Radius of a system dot in pixels (not scaled by zoom).
POINT_RADIUS_PX = 4.0

# Radius of the ring drawn around the selected system (pixels).
SELECTION_RADIUS_PX = 9.0

# Pixel tolerance used when turning a click into a system id.
HIT_TOLERANCE_PX = 8.0

# Colors (hex strings so they can be handed straight to QColor).
COLOR_BACKGROUND = "#05081a"
COLOR_SYSTEM = "#facc15"
COLOR_EDGE = "#8b0000"
COLOR_LABEL = "#94a3b8"
COLOR_PULSE = "#38bdf8"
COLOR_MARKER = "#22c55e"
COLOR_MARKER_BORDER = "#ffffff"
COLOR_SELECTION = "#f8fafc"
COLOR_DEBUG = "#90ee90"

# Region label font size in points.
LABEL_FONT_PT = 11

# Show system names once the zoom factor reaches this level.
NAME_MIN_ZOOM = 1.5

# ---------------------------------------------------------------------------
# Static-data coordinate correction
# ---------------------------------------------------------------------------
# Raw universe coordinates are meters and far too large to draw. A factor
# greater than 1 divides every coordinate by it; a factor lower than -1
# multiplies by its absolute value; anything else leaves coordinates alone.
UNIVERSE_FACTOR = 10_000_000_000_000

# Schematic (abstract) region maps are already small.
REGION_FACTOR = 1

# Per-axis sign inversion applied once at ingestion. The universe export is
# mirrored on every axis; schematic maps are not.
UNIVERSE_INVERT_AXES = (True, True, True)
REGION_INVERT_AXES = (False, False, False)

# K-space system id range in the static-data export.
SYSTEM_ID_MIN = 30_000_000
SYSTEM_ID_MAX = 30_999_999

# Region id range in the static-data export.
REGION_ID_MIN = 10_000_000
REGION_ID_MAX = 10_999_999

# Maximum rows returned by the system search box.
SEARCH_LIMIT = 25
