"""
Configuration constants for element 2D boolean outlines.

All the tunable numbers live here. Change a default once and every run
picks it up.
"""

__version__ = "1.0.0"

# ============================================================================
# Quantization
# ============================================================================

# Scale from host model units to the integer grid.
# Host coordinates are in feet; 304.8 puts the grid in whole millimetres,
# which is plenty for a footprint and keeps all union math exact.
DEFAULT_SCALE = 304.8

# Output units written next to the loops in the JSON file
OUTPUT_UNITS = "mm"

# ============================================================================
# Face Filtering
# ============================================================================

# A planar face whose normal has |z| below this is vertical and is skipped
# (it projects to zero area)
VERTICAL_TOLERANCE = 1e-9

# ============================================================================
# Tessellation
# ============================================================================

# Number of straight segments used for a full 360 degree arc.
# Partial arcs get a proportional share (minimum one segment)
ARC_SEGMENTS_PER_TURN = 72

# ============================================================================
# Holes & Failure Policy
# ============================================================================

# Emit face holes (inner loops) as clockwise subjects so the union carves
# them out. Off by default: the footprint is the solid silhouette
SUBTRACT_HOLES = False

# What to do when the union engine fails for one element
# - "abort": stop the whole run, write nothing
# - "skip":  record the element as skipped and carry on
ON_UNION_ERROR = "abort"
VALID_UNION_ERROR_POLICIES = {"abort", "skip"}

# ============================================================================
# Output
# ============================================================================

# Output file name is "{document_title}{OUTPUT_SUFFIX}"
OUTPUT_SUFFIX = "_element_2d_boolean_outline.json"

# Default output folder when none is given on the command line
DEFAULT_OUTPUT_FOLDER = "."

# Preview image suffix used by --render
PREVIEW_SUFFIX = "_element_2d_boolean_outline.png"
