#!/usr/bin/env python3
"""
Command-line interface for element 2D boolean outlines.

This module handles the CLI side: argument parsing, logging setup, pretty
printing and error display. The pipeline itself lives in element_outline.py
and can be imported and used programmatically.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.panel import Panel
from rich.table import Table
from rich import box

from .constants import (
    DEFAULT_SCALE,
    DEFAULT_OUTPUT_FOLDER,
    PREVIEW_SUFFIX,
    VALID_UNION_ERROR_POLICIES,
    ON_UNION_ERROR,
    ARC_SEGMENTS_PER_TURN,
    __version__
)
from .config import OutlineConfig
from .element_outline import extract_document_outlines
from .errors import DocumentError, GeometryKindError, UnionError
from .outline_writer import safe_file_stem

# Create Rich consoles for output and errors
console = Console()
error_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Route the package loggers through Rich. Library code never prints."""
    package_logger = logging.getLogger('element_outline')
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not package_logger.handlers:
        handler = RichHandler(console=error_console, show_path=False)
        handler.setFormatter(logging.Formatter('%(message)s'))
        package_logger.addHandler(handler)


def build_results_table(stats: Dict[str, Any]) -> Table:
    """Summarize each element's outline in a table."""
    table = Table(title="Element Outlines", box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Element", style="bold yellow")
    table.add_column("Loops", justify="right")
    table.add_column("Points", justify="right")
    table.add_column("Status")

    for element_id, outline in stats['outlines'].items():
        points = sum(len(loop) for loop in outline)
        status = "[green]ok[/green]" if outline else "[yellow]empty[/yellow]"
        table.add_row(str(element_id), str(len(outline)), str(points), status)
    for element_id, reason in stats['skipped'].items():
        table.add_row(str(element_id), "-", "-", f"[red]skipped[/red] {reason}")
    return table


def parse_ids(values) -> Optional[List[int]]:
    """Parse --ids values, accepting "1 2 3" as well as "1,2,3"."""
    if values is None:
        return None
    ids = []
    for value in values:
        for part in str(value).split(','):
            if part.strip():
                ids.append(int(part))
    return ids


def main():
    """Main CLI entry point."""

    parser = argparse.ArgumentParser(
        description="Extract 2D boolean outlines (plan footprints) of building elements",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s level1.json
  %(prog)s level1.json --output-folder out/ --ids 101 102
  %(prog)s level1.json --subtract-holes --on-union-error skip --render

The program will:
  1. Load the scene document and the selected elements
  2. Project each element's solids and meshes onto the XY plane
  3. Union the projected polygons on an integer grid
  4. Write {title}_element_2d_boolean_outline.json to the output folder
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show program's version number and exit"
    )

    parser.add_argument(
        "scene_file",
        type=str,
        help="Scene document (JSON) describing the elements and their geometry"
    )

    parser.add_argument(
        "--output-folder",
        type=str,
        default=DEFAULT_OUTPUT_FOLDER,
        help=f"Folder for the outline file (default: {DEFAULT_OUTPUT_FOLDER})"
    )

    parser.add_argument(
        "--ids",
        nargs='+',
        default=None,
        help="Element ids to process (space or comma separated). Default: the document's selection, or all"
    )

    parser.add_argument(
        "--scale",
        type=float,
        default=DEFAULT_SCALE,
        help=f"Model units to integer grid scale (default: {DEFAULT_SCALE}, feet to mm)"
    )

    parser.add_argument(
        "--arc-segments",
        type=int,
        default=ARC_SEGMENTS_PER_TURN,
        help=f"Segments per full turn when tessellating arcs (default: {ARC_SEGMENTS_PER_TURN})"
    )

    parser.add_argument(
        "--subtract-holes",
        action="store_true",
        help="Carve face holes out of the outline instead of keeping the solid silhouette"
    )

    parser.add_argument(
        "--on-union-error",
        choices=sorted(VALID_UNION_ERROR_POLICIES),
        default=ON_UNION_ERROR,
        help=f"What to do when an element's union fails (default: {ON_UNION_ERROR})"
    )

    parser.add_argument(
        "--render",
        action="store_true",
        help="Also write a PNG preview of the outlines"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging"
    )

    args = parser.parse_args()
    configure_logging(args.verbose)

    try:
        element_ids = parse_ids(args.ids)
    except ValueError as e:
        error_console.print(f"[red]❌ Error: Invalid element id: {e}[/red]")
        sys.exit(1)

    try:
        config = OutlineConfig(
            scale=args.scale,
            arc_segments_per_turn=args.arc_segments,
            subtract_holes=args.subtract_holes,
            on_union_error=args.on_union_error
        )
    except ValueError as e:
        error_console.print(f"[red]❌ Error: Invalid configuration: {e}[/red]")
        sys.exit(1)

    console.print(Panel.fit(
        "[bold cyan]📐 Element 2D Boolean Outline[/bold cyan]",
        border_style="cyan"
    ))
    console.print()

    config_table = Table(title="Configuration", box=box.ROUNDED, show_header=True, header_style="bold cyan")
    config_table.add_column("Parameter", style="bold yellow")
    config_table.add_column("Value", style="white")
    config_table.add_row("Scene File", args.scene_file)
    config_table.add_row("Output Folder", args.output_folder)
    config_table.add_row("Selection", ", ".join(str(i) for i in element_ids) if element_ids else "Document default")
    config_table.add_row("Grid Scale", str(config.scale))
    config_table.add_row("Holes", "Subtracted" if config.subtract_holes else "Ignored (silhouette)")
    config_table.add_row("On Union Error", config.on_union_error)
    console.print(config_table)
    console.print()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True
    ) as progress:
        task = progress.add_task("[cyan]Starting...", total=None)

        def progress_callback(stage: str, message: str):
            progress.update(task, description=f"[cyan]{message}")

        try:
            stats = extract_document_outlines(
                scene_path=args.scene_file,
                output_folder=args.output_folder,
                config=config,
                element_ids=element_ids,
                progress_callback=progress_callback
            )
        except DocumentError as e:
            error_console.print(f"\n[red]❌ Error: {e}[/red]")
            error_console.print("[red]   Please run this command on a valid scene document.[/red]")
            sys.exit(1)
        except GeometryKindError as e:
            error_console.print(f"\n[red]❌ Unexpected geometry: {e}[/red]")
            sys.exit(1)
        except UnionError as e:
            error_console.print(f"\n[red]❌ Union failed for element {e.element_id}: {e}[/red]")
            error_console.print("[red]   No output written. Use --on-union-error skip to continue past it.[/red]")
            sys.exit(1)

    if stats['num_selected'] == 0:
        console.print("[yellow]⚠️  No elements selected, nothing to do.[/yellow]")
        return

    console.print(build_results_table(stats))
    console.print()

    if args.render and stats['outlines']:
        from .render_outline import render_outlines_to_file
        preview_path = Path(args.output_folder) / f"{safe_file_stem(stats['title'])}{PREVIEW_SUFFIX}"
        render_outlines_to_file(stats['outlines'], str(preview_path), title=stats['title'])
        console.print(f"[cyan]🖼️  Preview: {preview_path}[/cyan]")

    console.print(Panel.fit(
        f"[bold green]✅ {stats['num_outlines']} outline(s) written in {stats['elapsed_s']:.2f}s[/bold green]\n"
        f"[cyan]📄 {stats['output_path']}[/cyan]",
        border_style="green"
    ))

    if stats['num_skipped']:
        error_console.print(f"[yellow]⚠️  {stats['num_skipped']} element(s) skipped after union errors[/yellow]")


if __name__ == "__main__":
    main()
