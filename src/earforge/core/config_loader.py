"""JSON config file loading utilities."""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

from earforge import constants
from earforge.constants import CONFIG_DIR, DISTORTION_CONFIG_NAME

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistortionParams:
    """Tunables for attachment point search and the ear bump."""
    # Bump shape
    influence_radius: float = constants.INFLUENCE_RADIUS
    displacement_height: float = constants.DISPLACEMENT_HEIGHT
    falloff_exponent: float = constants.FALLOFF_EXPONENT

    # Attachment point search
    min_vertex_count: int = constants.MIN_LANDMARK_VERTICES
    top_subset_min: int = constants.TOP_SUBSET_MIN
    top_subset_divisor: int = constants.TOP_SUBSET_DIVISOR
    target_distance_ratio: float = constants.TARGET_DISTANCE_RATIO
    centroid_tolerance: float = constants.CENTROID_TOLERANCE
    min_separation_ratio: float = constants.MIN_SEPARATION_RATIO
    search_sample_limit: int = constants.SEARCH_SAMPLE_LIMIT
    search_stride: int = constants.SEARCH_STRIDE
    up_axis: int = constants.UP_AXIS

    def __post_init__(self):
        if self.influence_radius <= 0:
            raise ValueError(f"influence_radius must be positive, got {self.influence_radius}")
        if self.falloff_exponent <= 0:
            raise ValueError(f"falloff_exponent must be positive, got {self.falloff_exponent}")
        if self.min_vertex_count < 0:
            raise ValueError(f"min_vertex_count must be >= 0, got {self.min_vertex_count}")
        if self.top_subset_min < 1 or self.top_subset_divisor < 1:
            raise ValueError("top_subset_min and top_subset_divisor must be >= 1")
        if self.search_sample_limit < 2 or self.search_stride < 1:
            raise ValueError("search_sample_limit must be >= 2 and search_stride >= 1")
        if not 0 <= self.centroid_tolerance:
            raise ValueError(f"centroid_tolerance must be >= 0, got {self.centroid_tolerance}")
        if self.up_axis not in (0, 1, 2):
            raise ValueError(f"up_axis must be 0, 1 or 2, got {self.up_axis}")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "DistortionParams":
        """Build params from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown distortion config keys: {', '.join(unknown)}")
        return cls(**d)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_json(path: Path) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path) as f:
        return json.load(f)


def load_config(name: str) -> Any:
    """Load a config file from assets/config/."""
    return load_json(CONFIG_DIR / name)


def load_distortion_params(path: Optional[Path] = None) -> DistortionParams:
    """Load distortion params from ``path`` or the bundled distortion.json.

    Missing keys keep their defaults.  A missing bundled file falls back to
    the defaults; a missing explicit ``path`` raises FileNotFoundError.
    """
    if path is not None:
        data = load_json(Path(path))
        logger.info("Loaded distortion config from %s", path)
    else:
        try:
            data = load_config(DISTORTION_CONFIG_NAME)
        except FileNotFoundError:
            logger.warning("Bundled %s not found, using defaults", DISTORTION_CONFIG_NAME)
            data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Distortion config must be a JSON object, got {type(data).__name__}")
    return DistortionParams.from_dict(data)
