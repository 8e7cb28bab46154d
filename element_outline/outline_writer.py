"""
Outline file writer.

Writes the element outline map of one run to
``{output_folder}/{document_title}_element_2d_boolean_outline.json``:

    {
      "document": "Level 1",
      "units": "mm",
      "scale": 304.8,
      "elements": {
        "101": [[[0, 0], [305, 0], [305, 305], [0, 305]]]
      },
      "skipped": {"102": "Union of 12 rings failed: ..."}
    }

Loops are open (the closing point is implied). Element keys are strings
because JSON object keys must be.
"""

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from .constants import OUTPUT_UNITS
from .json_utils import dumps_compact_points

# Import for type checking only (avoids circular imports)
if TYPE_CHECKING:
    from .config import OutlineConfig
    from .element_outline import OutlineRun

logger = logging.getLogger(__name__)

# Path separators and characters Windows refuses in file names
_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def safe_file_stem(title: str) -> str:
    """Turn a document title into something usable as a file name stem."""
    stem = _UNSAFE_FILENAME_CHARS.sub("_", title).strip()
    if stem in ("", ".", ".."):
        return "untitled"
    return stem


def output_file_path(output_folder: str, title: str, config: 'OutlineConfig') -> Path:
    """Path of the outline file for a document title."""
    return Path(output_folder) / f"{safe_file_stem(title)}{config.output_suffix}"


def outlines_to_dict(title: str, run: 'OutlineRun', config: 'OutlineConfig') -> dict:
    data = {
        "document": title,
        "units": OUTPUT_UNITS,
        "scale": config.scale,
        "elements": {
            str(element_id): [[list(p) for p in loop] for loop in outline]
            for element_id, outline in run.outlines.items()
        }
    }
    if run.skipped:
        data["skipped"] = {str(k): v for k, v in run.skipped.items()}
    return data


def write_outlines(output_folder: str, title: str, run: 'OutlineRun', config: 'OutlineConfig') -> str:
    """
    Write a run's outlines to the output folder.

    The folder is created if needed.

    Returns:
        Path to the written file
    """
    path = output_file_path(output_folder, title, config)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_compact_points(outlines_to_dict(title, run, config)) + "\n", encoding='utf-8')
    logger.info(f"Wrote {len(run.outlines)} outlines to {path}")
    return str(path)
