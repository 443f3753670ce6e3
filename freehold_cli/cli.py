"""
Freehold CLI - Main entry point.

Loads a plot map from YAML and answers point queries, validates every plot
outline, or renders the border raster to an image.

Map format:
    world: overworld
    groups:
      builders: {alice: OPERATOR, bob: MEMBER}
    plots:
      - id: 1
        depth: 1
        owner: "G:builders"
        vertices: "[0,0][20,0][20,20][0,20]"
      - id: 2
        depth: 2
        parent: 1
        vertices: [[2, 2], [8, 2], [8, 8], [2, 8]]
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import cv2
import yaml

from freehold_claims.service import ClaimService
from freehold_claims.store import InMemoryPlotStore
from freehold_plots.config import PlotConfig
from freehold_plots.geometry.codec import serialize_vertices
from freehold_plots.geometry.polygon import Polygon
from freehold_plots.geometry.shapes import GridPoint
from freehold_plots.hierarchy.arena import PlotArena
from freehold_plots.hierarchy.records import PlotRecord
from freehold_plots.hierarchy.resolver import PlotHierarchyResolver
from freehold_plots.ownership.owner import Group
from freehold_plots.ranks import Rank
from freehold_plots.rendering.visualizer import PlotVisualizer


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load YAML file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If YAML is invalid
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e


def load_map(data: Dict[str, Any]) -> Tuple[str, InMemoryPlotStore]:
    """
    Build an in-memory store from a plot map.

    Returns:
        (world, store)

    Raises:
        ValueError: If the map or any plot entry is malformed
    """
    world = data.get('world')
    if not world:
        raise ValueError("Plot map requires a 'world'")

    groups = [
        Group(name=name, users={user: Rank.parse(rank) for user, rank in (users or {}).items()})
        for name, users in (data.get('groups') or {}).items()
    ]
    store = InMemoryPlotStore(groups=groups)

    for entry in data.get('plots') or []:
        row = dict(entry)
        row.setdefault('world', world)
        if isinstance(row.get('vertices'), list):
            row['vertices'] = serialize_vertices(GridPoint(x, z) for x, z in row['vertices'])
        store.save_plot(PlotRecord.from_dict(row, store.get_group))
    return world, store


def locate(store: InMemoryPlotStore, world: str, x: float, z: float, config: PlotConfig) -> Dict[str, Any]:
    service = ClaimService(store, config=config)
    resolution = service.locate(world, GridPoint(x, z))
    return {
        'plot': resolution.polygon.id,
        'owner': resolution.polygon.display_name,
        'effective_owner': service.policy.effective_owner(resolution.polygon).name,
        'depth': resolution.polygon.depth,
        'chain': [polygon.id for polygon in resolution.chain],
    }


def check(store: InMemoryPlotStore, world: str, config: PlotConfig) -> List[str]:
    """
    Replay every stored outline vertex by vertex inside its parent.

    Returns:
        One problem description per invalid plot (empty when all are valid)
    """
    arena = PlotArena()
    wilderness = arena.add(PlotHierarchyResolver(config).wilderness(world))
    problems: List[str] = []

    for record in sorted(store.plots, key=lambda r: (r.depth, r.id)):
        if record.world != world:
            continue
        parent_id = record.parent_id if record.depth > 1 else wilderness.id
        if parent_id is None or parent_id not in arena:
            problems.append(f"plot {record.id}: parent {record.parent_id} not found")
            continue
        polygon = arena.add(Polygon(
            record.id, world, owner=record.owner, depth=record.depth, parent_id=parent_id,
        ))
        for index, vertex in enumerate(record.vertices):
            result = polygon.add_point(vertex)
            if not result.ok:
                problems.append(f"plot {record.id}: {result.value} at vertex {index} {vertex}")
                break
        else:
            if len(polygon.vertices) < 3 or not polygon.is_complete():
                problems.append(f"plot {record.id}: outline does not close")
            elif not polygon.is_valid_shape():
                problems.append(f"plot {record.id}: border crossed")
    return problems


def render(store: InMemoryPlotStore, world: str, output: str, scale: int) -> None:
    polygons = [record.to_polygon() for record in store.plots if record.world == world]
    frame = PlotVisualizer(scale=scale).render(polygons)
    if not cv2.imwrite(output, frame):
        raise ValueError(f"Could not write image: {output}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='freehold',
        description='Inspect a YAML plot map',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Which plot contains a point?
  freehold locate maps/town.yaml 5 5

  # Validate every plot outline
  freehold check maps/town.yaml

  # Draw borders to an image
  freehold render maps/town.yaml town.png --scale 8
"""
    )

    parser.add_argument(
        "--config",
        help="Path to plot engine config YAML (default: built-in defaults)"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    locate_cmd = subparsers.add_parser('locate', help='Resolve the plot at a point')
    locate_cmd.add_argument('map', help='Path to plot map YAML')
    locate_cmd.add_argument('x', type=float, help='X coordinate')
    locate_cmd.add_argument('z', type=float, help='Z coordinate')

    check_cmd = subparsers.add_parser('check', help='Validate every plot outline')
    check_cmd.add_argument('map', help='Path to plot map YAML')

    render_cmd = subparsers.add_parser('render', help='Render plot borders to an image')
    render_cmd.add_argument('map', help='Path to plot map YAML')
    render_cmd.add_argument('output', help='Output image path (e.g. plots.png)')
    render_cmd.add_argument('--scale', type=int, default=8, help='Pixels per block (default: 8)')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = PlotConfig.from_yaml(args.config) if args.config else PlotConfig(log_level="WARNING")
        world, store = load_map(load_yaml_config(args.map))

        if args.command == 'locate':
            print(json.dumps(locate(store, world, args.x, args.z, config)))

        elif args.command == 'check':
            problems = check(store, world, config)
            for problem in problems:
                print(problem)
            if problems:
                return 1
            print(f"{len(store)} plots OK")

        elif args.command == 'render':
            render(store, world, args.output, args.scale)
            print(f"Wrote {args.output}")

    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
