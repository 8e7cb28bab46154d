"""
Outline preview rendering.

Draws every element's outline loops to a PNG with matplotlib, so a run can
be eyeballed without loading the JSON into the host application. Outer
loops (counter-clockwise) are filled, holes (clockwise) are drawn on top
in white.
"""

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for headless operation

import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as PolygonPatch
from typing import Dict

from .outline_converter import Outline
from .rings import signed_area


def render_outlines_to_file(outlines: Dict[int, Outline], output_path: str, title: str = "") -> int:
    """
    Render outlines to a PNG file.

    Args:
        outlines: Element id -> outline loops (grid coordinates)
        output_path: Where the PNG should be saved
        title: Optional figure title

    Returns:
        Number of loops drawn

    Raises:
        IOError: If the output file cannot be written
    """
    fig, ax = plt.subplots(figsize=(10, 10), dpi=120)
    cmap = plt.get_cmap('tab20')

    drawn = 0
    xs, ys = [], []
    for index, (element_id, outline) in enumerate(outlines.items()):
        color = cmap(index % 20)
        # Outer loops first so holes land on top
        ordered = sorted(outline, key=lambda loop: signed_area(loop) < 0)
        for loop in ordered:
            is_hole = signed_area(loop) < 0
            ax.add_patch(PolygonPatch(
                loop,
                closed=True,
                facecolor='white' if is_hole else color,
                edgecolor='black',
                linewidth=0.8,
                alpha=1.0 if is_hole else 0.6
            ))
            xs.extend(p[0] for p in loop)
            ys.extend(p[1] for p in loop)
            drawn += 1
        if outline:
            x0, y0 = outline[0][0]
            ax.annotate(str(element_id), (x0, y0), fontsize=7)

    if xs:
        pad_x = max(1, (max(xs) - min(xs)) * 0.05)
        pad_y = max(1, (max(ys) - min(ys)) * 0.05)
        ax.set_xlim(min(xs) - pad_x, max(xs) + pad_x)
        ax.set_ylim(min(ys) - pad_y, max(ys) + pad_y)
    ax.set_aspect('equal')
    if title:
        ax.set_title(title)

    fig.savefig(output_path, bbox_inches='tight')
    plt.close(fig)
    return drawn
