"""
JSON formatting utilities.

Outline files are mostly coordinate pairs. Plain json.dumps with indent
puts every number on its own line, which makes a footprint unreadable, so
we keep the overall structure indented and squeeze each point onto one line.
"""

import json
import re
from typing import Any

# An innermost array of numbers spread over several lines
_NUMBER_ARRAY = re.compile(r'\[\s*\n\s*([\d\.\-\+eE,\s]+?)\n\s*\]')


def dumps_compact_points(data: Any, indent: int = 2) -> str:
    """
    Format JSON with numeric arrays on single lines.

    Example:
        >>> print(dumps_compact_points({"loop": [[0, 0], [10, 0], [10, 5]]}))
        {
          "loop": [
            [0, 0],
            [10, 0],
            [10, 5]
          ]
        }

    Args:
        data: Data structure to serialize
        indent: Number of spaces for indentation (default: 2)

    Returns:
        JSON string
    """
    json_str = json.dumps(data, indent=indent, ensure_ascii=False)
    return _NUMBER_ARRAY.sub(
        lambda m: '[' + re.sub(r'\s+', ' ', m.group(1).strip()) + ']',
        json_str
    )
