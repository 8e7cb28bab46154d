"""
Exception types raised by the outline pipeline.

Everything derives from OutlineError so callers (the CLI, mostly) can catch
one type for "this run failed" and still tell the causes apart.
"""


class OutlineError(Exception):
    """Base class for all element outline failures."""


class GeometryKindError(OutlineError):
    """
    An unexpected geometry object appeared in an element's geometry tree.

    The projector only knows curves, solids, meshes and instances. Anything
    else means the traversal is incomplete, so the run is aborted rather
    than producing a silently wrong footprint.
    """


class UnionError(OutlineError):
    """The polygon union could not be computed for an element's subjects."""

    def __init__(self, message: str, element_id=None):
        super().__init__(message)
        self.element_id = element_id


class DocumentError(OutlineError):
    """The scene document is missing, unreadable or malformed."""
