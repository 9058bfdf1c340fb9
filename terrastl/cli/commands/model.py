#!/usr/bin/env python3
"""
Terrain model commands for the terrastl CLI.

The functions here do the work behind ``terrastl model ...``: resolve
settings from options and the user config, run the generation pipeline,
and write STL files and previews. They report through the rich console
and return True/False rather than raising.
"""

import logging
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Optional, Tuple

from rich.progress import Progress

from terrastl.cli.core.config import load_config
from terrastl.cli.core.io import create_output_dir, find_grid_files, load_elevation_grid
from terrastl.cli.core.ui import (
    console,
    display_model_stats,
    print_error,
    print_rich_table,
    print_success,
    print_warning
)
from terrastl.cli.exceptions import InputError, TerraSTLCliException
from terrastl.exceptions import TerraSTLException
from terrastl.geo.bbox import BoundingBox, DemSource, Region
from terrastl.image.heightmap import save_heightmap_preview
from terrastl.model.config import ModelSettings
from terrastl.model.core.mesh import TriangleMesh
from terrastl.model.formats.stl import DEFAULT_HEADER, parse_stl, write_stl
from terrastl.model.generator import generate_model

logger = logging.getLogger(__name__)


def resolve_dimensions(
    config: dict,
    width_mm: Optional[float] = None,
    length_mm: Optional[float] = None,
    bbox: Optional[BoundingBox] = None
) -> Tuple[float, float]:
    """
    Pick the model footprint.

    Explicit values win. With a bounding box, a missing side follows the
    region's aspect ratio. Otherwise missing sides come from the config.
    """
    if width_mm is not None and length_mm is not None:
        return width_mm, length_mm

    if bbox is not None:
        if width_mm is not None:
            return width_mm, bbox.linked_length(width_mm)
        if length_mm is not None:
            return bbox.linked_width(length_mm), length_mm
        return bbox.default_model_dimensions(float(config["default_length_mm"]))

    width = width_mm if width_mm is not None else float(config["default_width_mm"])
    length = length_mm if length_mm is not None else float(config["default_length_mm"])
    return width, length


def _option_or_config(value, config: dict, key: str):
    return value if value is not None else config[key]


def generate_model_command(
    grid_file: Path,
    output_file: Optional[Path] = None,
    width_mm: Optional[float] = None,
    length_mm: Optional[float] = None,
    bbox: Optional[str] = None,
    exaggeration: Optional[float] = None,
    smoothness: Optional[float] = None,
    layer_thickness: Optional[float] = None,
    dem_source: Optional[str] = None,
    nodata: Optional[float] = None,
    ascii_format: bool = False,
    save_preview: Optional[bool] = None,
    colormap: Optional[str] = None,
    show_stats: bool = True
) -> bool:
    """Generate a printable STL from an elevation grid file."""
    try:
        config = load_config()
        grid_file = Path(grid_file)

        region_bbox = None
        if bbox:
            try:
                region_bbox = BoundingBox.from_string(bbox, name=grid_file.stem)
            except ValueError as e:
                raise InputError(f"Invalid bounding box: {e}")

        width, length = resolve_dimensions(config, width_mm, length_mm, region_bbox)
        try:
            settings = ModelSettings(
                physical_width_mm=width,
                physical_length_mm=length,
                vertical_exaggeration=float(_option_or_config(exaggeration, config, "vertical_exaggeration")),
                smoothness_level=float(_option_or_config(smoothness, config, "smoothness")),
                layer_thickness_mm=float(_option_or_config(layer_thickness, config, "layer_thickness_mm"))
            )
            source = DemSource(_option_or_config(dem_source, config, "dem_source"))
        except ValueError as e:
            raise InputError(str(e))

        header = DEFAULT_HEADER
        if region_bbox is not None:
            header = Region(region_bbox, dem_source=source, settings=settings).header_text()

        with console.status(f"Loading {grid_file.name}..."):
            grid = load_elevation_grid(grid_file, nodata=nodata)

        if output_file is None:
            output_file = create_output_dir() / f"{grid_file.stem}.stl"

        preview_enabled = _option_or_config(save_preview, config, "save_preview")
        cmap = _option_or_config(colormap, config, "colormap") or None

        start = time.perf_counter()
        with console.status("Generating terrain model..."):
            model = generate_model(grid, settings, header=header, colormap=cmap)

            if ascii_format:
                parsed = parse_stl(model.buffer)
                mesh = TriangleMesh(parsed.vertices, parsed.normals)
                written = write_stl(mesh, str(output_file), header=grid_file.stem, ascii_format=True)
            else:
                written = write_stl(model.buffer, str(output_file))

        print_success(
            f"Generated {model.triangle_count:,} triangles in {time.perf_counter() - start:.2f}s"
        )
        print_success(f"Model saved to {written}")

        if preview_enabled:
            preview_path = Path(written).with_suffix(".png")
            save_heightmap_preview(model.preview, str(preview_path))
            console.print(f"Preview saved to [path]{preview_path}[/path]")

        if show_stats:
            display_model_stats(
                model.stats.as_dict(),
                vars(model.dimensions),
                title=f"Terrain Model: {grid_file.stem}"
            )
        return True

    except (TerraSTLCliException, TerraSTLException, ValueError) as e:
        print_error(str(e))
        return False
    except OSError as e:
        logger.error(f"Model generation failed: {e}", exc_info=True)
        print_error(f"Could not write model: {e}")
        return False


def _generate_worker(grid_file: Path, output_file: Path, options: dict) -> bool:
    return generate_model_command(grid_file, output_file, show_stats=False, **options)


def batch_generate_models(
    input_dir: Path,
    output_dir: Optional[Path] = None,
    pattern: str = "*.npy",
    max_workers: int = 1,
    recursive: bool = False,
    **options
) -> bool:
    """
    Generate models for every grid file in a directory.

    Files are independent, so with ``max_workers > 1`` they are processed in
    parallel worker processes.
    """
    input_dir = Path(input_dir)
    if not input_dir.is_dir():
        print_error(f"Input directory does not exist: {input_dir}")
        return False

    grid_files = find_grid_files(input_dir, pattern, recursive)
    if not grid_files:
        print_error(f"No grid files found matching pattern '{pattern}' in {input_dir}")
        return False

    if output_dir is None:
        output_dir = input_dir / "models"
    output_dir = create_output_dir(output_dir)

    console.print(f"[cyan]Found {len(grid_files)} grid files to process[/cyan]")
    console.print(f"[yellow]Output directory: {output_dir}[/yellow]")

    failures = []
    with Progress(console=console) as progress:
        main_task = progress.add_task("[cyan]Processing files...", total=len(grid_files))

        if max_workers <= 1:
            for grid_file in grid_files:
                output_file = output_dir / f"{grid_file.stem}.stl"
                if not _generate_worker(grid_file, output_file, options):
                    failures.append(grid_file)
                progress.advance(main_task)
        else:
            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                futures = {
                    executor.submit(
                        _generate_worker, f, output_dir / f"{f.stem}.stl", options
                    ): f
                    for f in grid_files
                }
                for future in as_completed(futures):
                    grid_file = futures[future]
                    try:
                        if not future.result():
                            failures.append(grid_file)
                    except Exception as e:
                        logger.error(f"Worker failed on {grid_file}: {e}")
                        failures.append(grid_file)
                    progress.advance(main_task)

    for grid_file in failures:
        print_warning(f"Failed to process: {grid_file}")

    if failures:
        print_error(f"{len(failures)} of {len(grid_files)} files failed")
        return False

    print_success(f"Batch processing completed. Check {output_dir} for results.")
    return True


def show_stl_info(stl_file: Path) -> bool:
    """Print the header, triangle count and extent of a binary STL file."""
    stl_file = Path(stl_file)
    if not stl_file.exists():
        print_error(f"File not found: {stl_file}")
        return False

    try:
        parsed = parse_stl(stl_file.read_bytes())
    except TerraSTLException as e:
        print_error(f"{stl_file.name}: {e}")
        return False

    lo, hi = parsed.get_bounding_box()
    size = hi - lo
    rows = [
        {"Property": "header", "Value": parsed.header_text},
        {"Property": "triangles", "Value": f"{parsed.triangle_count:,}"},
        {"Property": "file size", "Value": f"{stl_file.stat().st_size:,} bytes"},
        {"Property": "width_mm", "Value": f"{size[0]:.3f}"},
        {"Property": "length_mm", "Value": f"{size[1]:.3f}"},
        {"Property": "height_mm", "Value": f"{size[2]:.3f}"},
    ]
    print_rich_table(rows, title=stl_file.name, columns=[("Property", "cyan"), ("Value", "green")])
    return True
