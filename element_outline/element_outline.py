"""
Core pipeline for element 2D boolean outlines.

For each selected element: reset the shared state, project its geometry
tree to rings, union them, and convert the result to integer loops. One
element is finished before the next starts, and the vertex table and
union engine are cleared (not rebuilt) in between.

No printing and no argparse here, just the pipeline. The CLI lives in
cli.py.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from .config import OutlineConfig
from .errors import DocumentError, UnionError
from .geometry import GeometryElement
from .outline_converter import Outline, to_outline
from .outline_writer import write_outlines
from .projector import GeometryProjector
from .scene_loader import load_scene
from .union_engine import UnionEngine
from .vertex_table import VertexTable

logger = logging.getLogger(__name__)


class OutlineContext:
    """
    The mutable state shared by every element of a run.

    Holds the vertex table, the projector and the union engine. reset()
    empties the table and the subject set so nothing from one element is
    visible while processing the next.
    """

    def __init__(self, config: OutlineConfig):
        self.config = config
        self.table = VertexTable(scale=config.scale)
        self.projector = GeometryProjector(self.table, config)
        self.engine = UnionEngine(self.table)

    def reset(self) -> None:
        self.table.clear()
        self.engine.clear()


@dataclass
class OutlineRun:
    """
    Result of processing a selection of elements.

    Attributes:
        outlines: Element id -> outline loops, in processing order
        skipped: Element id -> reason, for elements whose union failed
                 under the "skip" policy
        stats: Counters collected while processing
    """

    outlines: Dict[int, Outline] = field(default_factory=dict)
    skipped: Dict[int, str] = field(default_factory=dict)
    stats: Dict[str, Any] = field(default_factory=dict)


def compute_element_outline(geometry: GeometryElement, context: OutlineContext) -> Outline:
    """
    Compute the outline of one element.

    Raises:
        GeometryKindError: If the geometry tree holds an unsupported object
        UnionError: If the union cannot be computed
    """
    context.reset()
    polygons = context.projector.project(geometry)
    kept = context.engine.add_subjects(polygons)
    union = context.engine.union()
    logger.debug(f"{len(polygons)} rings projected, {kept} kept, {len(union)} after union")
    return to_outline(union, context.table)


def compute_outlines(
    elements: Mapping[int, GeometryElement],
    config: Optional[OutlineConfig] = None,
    progress_callback: Optional[Callable[[str, str], None]] = None
) -> OutlineRun:
    """
    Compute outlines for every element, strictly one after another.

    Args:
        elements: Element id -> geometry tree
        config: OutlineConfig (defaults if None)
        progress_callback: Optional callback(stage: str, message: str)

    Returns:
        OutlineRun with one outline per processed element

    Raises:
        GeometryKindError: Always fatal, the run is aborted
        UnionError: If a union fails and config.on_union_error is "abort"
    """
    if config is None:
        config = OutlineConfig()

    def _progress(stage: str, message: str):
        if progress_callback:
            progress_callback(stage, message)

    run = OutlineRun()
    if not elements:
        logger.info("No elements selected, nothing to do")
        return run

    context = OutlineContext(config)
    total = len(elements)
    for i, (element_id, geometry) in enumerate(elements.items(), start=1):
        _progress("element", f"Element {element_id} ({i}/{total})")
        try:
            outline = compute_element_outline(geometry, context)
        except UnionError as e:
            e.element_id = element_id
            if config.on_union_error == "skip":
                logger.warning(f"Skipping element {element_id}: {e}")
                run.skipped[element_id] = str(e)
                continue
            raise
        run.outlines[element_id] = outline

    run.stats = {
        'elements': total,
        'outlines': len(run.outlines),
        'skipped': len(run.skipped),
        'loops': sum(len(o) for o in run.outlines.values()),
        **context.projector.stats,
        **{f"union_{k}": v for k, v in context.engine.stats.items()}
    }
    log_run_summary(run.stats)
    return run


def log_run_summary(stats: Dict[str, Any]) -> None:
    """Log a summary of a run's counters."""
    logger.info("=" * 70)
    logger.info("OUTLINE SUMMARY")
    logger.info("=" * 70)
    logger.info(f"Elements processed: {stats['elements']}")
    logger.info(f"Outlines produced: {stats['outlines']} ({stats['loops']} loops)")
    if stats['skipped']:
        logger.info(f"Elements skipped: {stats['skipped']}")
    logger.info(f"Faces: {stats['faces']} ({stats['vertical_faces']} vertical, skipped)")
    logger.info(f"Mesh triangles: {stats['triangles']} ({stats['degenerate_triangles']} degenerate)")
    if stats['union_degenerate']:
        logger.info(f"Degenerate rings dropped: {stats['union_degenerate']}")
    logger.info("=" * 70)


def select_elements(
    elements: Mapping[int, GeometryElement],
    element_ids: Optional[Iterable[int]]
) -> Dict[int, GeometryElement]:
    """
    Restrict a document's elements to a selection, keeping selection order.

    Raises:
        DocumentError: If a selected id is not in the document
    """
    if element_ids is None:
        return dict(elements)
    selected: Dict[int, GeometryElement] = {}
    for element_id in element_ids:
        if element_id not in elements:
            raise DocumentError(f"Selected element {element_id} is not in the document")
        selected[element_id] = elements[element_id]
    return selected


def extract_document_outlines(
    scene_path: str,
    output_folder: str,
    config: Optional[OutlineConfig] = None,
    element_ids: Optional[Iterable[int]] = None,
    progress_callback: Optional[Callable[[str, str], None]] = None
) -> Dict[str, Any]:
    """
    Load a scene document, compute the selected outlines and write them.

    The selection is element_ids if given, else the document's own
    selection, else every element. An empty selection completes without
    writing anything.

    Returns:
        Dictionary with run statistics:
        {
            'title': str,
            'num_selected': int,
            'num_outlines': int,
            'num_skipped': int,
            'skipped': Dict[int, str],
            'outlines': Dict[int, Outline],
            'output_path': Optional[str],
            'elapsed_s': float
        }

    Raises:
        DocumentError: Missing or invalid document, or unknown selection ids
        GeometryKindError: Unsupported geometry in the tree
        UnionError: Union failure under the "abort" policy
    """
    if config is None:
        config = OutlineConfig()

    start = time.perf_counter()
    if progress_callback:
        progress_callback("load", f"Loading {Path(scene_path).name}")
    document = load_scene(scene_path)

    ids = element_ids if element_ids is not None else document.selection
    selected = select_elements(document.elements, ids)

    run = compute_outlines(selected, config, progress_callback)

    output_path = None
    if selected:
        if progress_callback:
            progress_callback("write", "Writing outlines")
        output_path = write_outlines(output_folder, document.title, run, config)

    return {
        'title': document.title,
        'num_selected': len(selected),
        'num_outlines': len(run.outlines),
        'num_skipped': len(run.skipped),
        'skipped': dict(run.skipped),
        'outlines': dict(run.outlines),
        'output_path': output_path,
        'elapsed_s': time.perf_counter() - start
    }
