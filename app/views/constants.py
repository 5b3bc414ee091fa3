"""
UI/view constants centralized for reuse across view modules.

Values here are defaults; most are overridable from settings.json.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

# Data roles
TAG_ROLE: int = Qt.UserRole  # raw tag name on tag list entries

# Timeline strip defaults
DEFAULT_THUMB_HEIGHT: int = 160
DEFAULT_COLLAPSED_SLICE_PX: int = 6
DEFAULT_COLLAPSED_MAX_PX: int = 96
CLUSTER_SPACING_PX: int = 8
TILE_SPACING_PX: int = 1
STRIP_MARGIN_PX: int = 4

# Scrolling
CENTER_ANIMATION_MS: int = 180

# Strip styling; tiles and clusters expose "selected"/"expanded" properties
TIMELINE_STYLESHEET: str = """
#ItemTile { background: #2b2b2b; color: #aaa; }
#ItemTile[video="true"] { background: #1d2733; }
#ItemTile[selected="true"] { border: 2px solid #3daee9; }
#Cluster[expanded="true"] { background: #202020; }
"""

# Display pane
DISPLAY_MIN_HEIGHT: int = 200
