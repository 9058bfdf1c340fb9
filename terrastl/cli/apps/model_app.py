"""Terrain model generation app for the CLI"""
import typer
from pathlib import Path
from typing import Optional

from terrastl.cli.commands.model import (
    generate_model_command,
    batch_generate_models,
    show_stl_info
)


def create_model_app() -> typer.Typer:
    """Create the model app with generate, batch and info commands."""
    app = typer.Typer(
        help="Generate printable STL terrain models from elevation grids",
        short_help="Generate terrain models"
    )

    @app.command("generate")
    def generate(
        grid_file: Path = typer.Argument(..., help="Elevation grid (.npy, .npz, .tif, .png)"),
        output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="Output STL file"),
        width: Optional[float] = typer.Option(None, "--width", help="Model width in mm"),
        length: Optional[float] = typer.Option(None, "--length", help="Model length in mm"),
        bbox: Optional[str] = typer.Option(
            None, "--bbox", help="Region as 'south,west,north,east' to derive the aspect ratio"
        ),
        exaggeration: Optional[float] = typer.Option(
            None, "--exaggeration", "-z", help="Vertical exaggeration (values below 1 act as 1)"
        ),
        smoothness: Optional[float] = typer.Option(
            None, "--smoothness", "-s", help="Smoothing level (0 disables, max 5 passes)"
        ),
        layer_thickness: Optional[float] = typer.Option(
            None, "--layer-thickness", help="Print layer thickness in mm (for layer estimate)"
        ),
        dem_source: Optional[str] = typer.Option(None, "--dem-source", help="DEM dataset name for the header"),
        nodata: Optional[float] = typer.Option(None, "--nodata", help="Sample value marking missing data"),
        ascii_format: bool = typer.Option(False, "--ascii", help="Write ASCII STL instead of binary"),
        preview: Optional[bool] = typer.Option(
            None, "--preview/--no-preview", help="Save a PNG heightmap preview next to the STL"
        ),
        colormap: Optional[str] = typer.Option(None, "--colormap", help="Matplotlib colormap for the preview")
    ):
        """Generate an STL terrain model from an elevation grid."""
        success = generate_model_command(
            grid_file=grid_file,
            output_file=output_file,
            width_mm=width,
            length_mm=length,
            bbox=bbox,
            exaggeration=exaggeration,
            smoothness=smoothness,
            layer_thickness=layer_thickness,
            dem_source=dem_source,
            nodata=nodata,
            ascii_format=ascii_format,
            save_preview=preview,
            colormap=colormap
        )
        if not success:
            raise typer.Exit(code=1)

    @app.command("batch")
    def batch(
        input_dir: Path = typer.Argument(..., help="Directory containing elevation grids"),
        output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Output directory"),
        pattern: str = typer.Option("*.npy", "--pattern", "-p", help="File pattern to match"),
        workers: int = typer.Option(1, "--workers", "-w", help="Number of worker processes"),
        recursive: bool = typer.Option(False, "--recursive", "-r", help="Search subdirectories"),
        exaggeration: Optional[float] = typer.Option(None, "--exaggeration", "-z", help="Vertical exaggeration"),
        smoothness: Optional[float] = typer.Option(None, "--smoothness", "-s", help="Smoothing level")
    ):
        """Generate STL models for every grid in a directory."""
        success = batch_generate_models(
            input_dir=input_dir,
            output_dir=output_dir,
            pattern=pattern,
            max_workers=workers,
            recursive=recursive,
            exaggeration=exaggeration,
            smoothness=smoothness
        )
        if not success:
            raise typer.Exit(code=1)

    @app.command("info")
    def info(
        stl_file: Path = typer.Argument(..., help="Binary STL file")
    ):
        """Show header, triangle count and extent of a binary STL file."""
        if not show_stl_info(stl_file):
            raise typer.Exit(code=1)

    return app
