"""Shared constants and paths for EarForge."""

from pathlib import Path

# Project paths
PACKAGE_ROOT = Path(__file__).parent
ASSETS_DIR = PACKAGE_ROOT / "assets"
CONFIG_DIR = ASSETS_DIR / "config"
DISTORTION_CONFIG_NAME = "distortion.json"

# Up axis (y) and the fallback normal / direction that goes with it
UP_AXIS = 1
UP_VECTOR = (0.0, 1.0, 0.0)

# Ear bump shape
INFLUENCE_RADIUS = 0.28
DISPLACEMENT_HEIGHT = 0.65
FALLOFF_EXPONENT = 2.2

# Attachment point search
MIN_LANDMARK_VERTICES = 50      # need strictly more than this
TOP_SUBSET_MIN = 100
TOP_SUBSET_DIVISOR = 3          # top subset is at least a third of all verts
TARGET_DISTANCE_RATIO = 0.7
CENTROID_TOLERANCE = 0.5        # +-50% of the target distance
MIN_SEPARATION_RATIO = 0.4
SEARCH_SAMPLE_LIMIT = 100
SEARCH_STRIDE = 3

# Scanning
SCAN_READY_VERTEX_COUNT = 2000

# Presentation tints (RGB 0..1)
EAR_TINT = (0.35, 0.35, 0.35)
BASE_TINT = (0.92, 0.92, 0.92)

# Camera framing
CAMERA_DISTANCE_SCALE = 1.5
MIN_CAMERA_DISTANCE = 0.5
DEFAULT_CAMERA_FOV = 60.0

# Drag-to-rotate sensitivity (radians per pixel)
ROTATE_SPEED = 0.005
