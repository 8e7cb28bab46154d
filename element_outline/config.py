"""
Configuration dataclass for element outline extraction.

This module defines the OutlineConfig dataclass that holds all the
parameters for a run. Passing one config object around keeps function
signatures small and lets new options be added without breaking callers.
"""

import math
from dataclasses import dataclass
from .constants import (
    DEFAULT_SCALE,
    VERTICAL_TOLERANCE,
    ARC_SEGMENTS_PER_TURN,
    SUBTRACT_HOLES,
    ON_UNION_ERROR,
    VALID_UNION_ERROR_POLICIES,
    OUTPUT_SUFFIX
)


@dataclass
class OutlineConfig:
    """
    Configuration for element outline extraction.

    Attributes:
        scale: Multiplier from model units to the integer grid (feet -> mm by default)
        vertical_tolerance: Max |normal.z| for a planar face to count as vertical
        arc_segments_per_turn: Tessellation density for arcs (segments per full circle)
        subtract_holes: If True, face holes are emitted as clockwise subjects and
                        carved out of the footprint. If False, only outer loops are used
        on_union_error: "abort" to stop the run on a union failure, "skip" to
                        record the element as skipped and continue
        output_suffix: Suffix appended to the document title for the output file
    """

    scale: float = DEFAULT_SCALE
    vertical_tolerance: float = VERTICAL_TOLERANCE
    arc_segments_per_turn: int = ARC_SEGMENTS_PER_TURN
    subtract_holes: bool = SUBTRACT_HOLES
    on_union_error: str = ON_UNION_ERROR
    output_suffix: str = OUTPUT_SUFFIX

    def __post_init__(self):
        """Validate configuration parameters."""
        if not math.isfinite(self.scale) or self.scale <= 0:
            raise ValueError(f"scale must be a positive finite number, got {self.scale}")
        if self.vertical_tolerance < 0:
            raise ValueError(f"vertical_tolerance must be non-negative, got {self.vertical_tolerance}")
        if self.arc_segments_per_turn < 4:
            raise ValueError(f"arc_segments_per_turn must be at least 4, got {self.arc_segments_per_turn}")
        if self.on_union_error not in VALID_UNION_ERROR_POLICIES:
            raise ValueError(
                f"on_union_error must be one of {sorted(VALID_UNION_ERROR_POLICIES)}, "
                f"got {self.on_union_error}"
            )
        if not self.output_suffix:
            raise ValueError("output_suffix must not be empty")
