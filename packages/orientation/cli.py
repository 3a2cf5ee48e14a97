"""CLI entry-point for ground orientation estimates."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from packages.core.types import BBox, ComponentBounds, Vec3
from packages.orientation.align import align_components
from packages.orientation.estimator import WARN_POINT_COUNT, estimate_ground_rotation
from packages.orientation.loader import load_points
from packages.orientation.sampling import GRID_STEP, RAY_LENGTH
from packages.orientation.triples import COLLINEAR_EPS

logger = logging.getLogger(__name__)


def _load(path: str):
    try:
        return load_points(path)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="FILE")


def _emit(json_str: str, output_file: str | None) -> None:
    if output_file is not None:
        Path(output_file).write_text(json_str)
        logger.info("Wrote estimate → %s", output_file)
    click.echo(json_str)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log per-hit and per-candidate detail.")
def main(verbose: bool):
    """Estimate ground-aligned rotations from sampled hit points."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s | %(name)s | %(message)s",
    )


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", "output_file", default=None, help="Output JSON path.")
@click.option("--collinear-eps", default=COLLINEAR_EPS, show_default=True,
              help="Squared cross-product length below which a triple is collinear.")
@click.option("--warn-points", default=WARN_POINT_COUNT, show_default=True,
              help="Warn when the cloud has more points than this.")
def estimate(input_file: str, output_file: str | None, collinear_eps: float, warn_points: int):
    """Estimate the ground rotation for the points in INPUT_FILE (.ply/.e57)."""
    points = _load(input_file)
    result = estimate_ground_rotation(
        points, collinear_eps=collinear_eps, warn_point_count=warn_points,
    )
    _emit(result.model_dump_json(indent=2), output_file)


@main.command()
@click.argument("scene_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--bounds", "bounds", type=float, nargs=6, required=True,
              metavar="MINX MINY MINZ MAXX MAXY MAXZ", help="Component bounds.")
@click.option("--name", default="component", show_default=True, help="Component name.")
@click.option("-o", "--output", "output_file", default=None, help="Output JSON path.")
@click.option("--step", default=GRID_STEP, show_default=True, help="Ray grid spacing.")
@click.option("--max-distance", default=RAY_LENGTH, show_default=True, help="Ray length.")
@click.option("--hit-radius", default=25.0, show_default=True,
              help="XY radius around a ray that counts as a hit.")
def align(
    scene_file: str,
    bounds: tuple[float, ...],
    name: str,
    output_file: str | None,
    step: float,
    max_distance: float,
    hit_radius: float,
):
    """Sample SCENE_FILE beneath --bounds and estimate the component rotation."""
    if step <= 0:
        raise click.BadParameter("must be positive", param_hint="--step")
    if hit_radius <= 0:
        raise click.BadParameter("must be positive", param_hint="--hit-radius")
    bbox = BBox(min=Vec3.from_seq(bounds[:3]), max=Vec3.from_seq(bounds[3:]))
    scene = _load(scene_file)
    results = align_components(
        scene,
        [ComponentBounds(name=name, bounds=bbox)],
        step=step,
        max_distance=max_distance,
        hit_radius=hit_radius,
    )
    _emit(json.dumps([r.model_dump(mode="json") for r in results], indent=2), output_file)


if __name__ == "__main__":
    main()
