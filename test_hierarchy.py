"""
Tests for plot records and hierarchy resolution.

Usage:
    pytest test_hierarchy.py
"""

import json

import pytest

from freehold_plots.config import PlotConfig
from freehold_plots.geometry.codec import parse_vertices
from freehold_plots.geometry.shapes import GridPoint
from freehold_plots.hierarchy.records import PlotRecord
from freehold_plots.hierarchy.resolver import PlotHierarchyResolver
from freehold_plots.ownership.owner import Group, Owner, OwnerKind

WORLD = "overworld"


def _record(plot_id, depth, outline, parent_id=None, owner=None, world=WORLD):
    return PlotRecord(
        id=plot_id,
        world=world,
        vertices=tuple(parse_vertices(outline)),
        depth=depth,
        owner=owner,
        parent_id=parent_id,
    )


TOWN = _record(1, 1, "[0,0][0,20][20,20][20,0]", owner=Owner.user("alice"))
MARKET = _record(2, 2, "[2,2][2,8][8,8][8,2]", parent_id=1)


def _events(caplog):
    return [
        json.loads(record.getMessage())['event']
        for record in caplog.records
        if record.name.startswith("freehold.")
    ]


def test_nested_plots_resolve_to_deepest():
    """Depth-2 plot wins, chain is [depth 1, wilderness]."""
    resolver = PlotHierarchyResolver()
    resolution = resolver.resolve(GridPoint(5, 5), WORLD, [TOWN, MARKET])

    assert resolution.polygon.id == 2
    assert [p.id for p in resolution.ancestors] == [1, -1]
    assert resolution.ancestors[-1].is_wilderness
    assert resolution.polygon.parent is resolution.ancestors[0]
    assert [p.id for p in resolution.chain] == [2, 1, -1]


def test_point_outside_inner_plot():
    resolution = PlotHierarchyResolver().resolve(GridPoint(15, 15), WORLD, [TOWN, MARKET])

    assert resolution.polygon.id == 1
    assert [p.id for p in resolution.ancestors] == [-1]


def test_no_candidates_resolve_to_wilderness():
    config = PlotConfig(wilderness_group_name="Everyone")
    resolution = PlotHierarchyResolver(config).resolve(GridPoint(50, 50), WORLD, [])

    assert resolution.polygon.is_wilderness
    assert resolution.polygon.world == WORLD
    assert resolution.ancestors == []
    assert resolution.polygon.owner.kind is OwnerKind.GROUP
    assert resolution.polygon.owner.group.is_everyone
    assert resolution.polygon.display_name == "Everyone"


def test_candidate_covering_bbox_but_not_point_is_dropped():
    """L-shaped plot: its bounding box covers the notch, the plot does not."""
    l_shape = _record(3, 1, "[0,0][0,10][5,10][5,5][10,5][10,0]")
    resolution = PlotHierarchyResolver().resolve(GridPoint(7, 7), WORLD, [l_shape])

    assert resolution.polygon.is_wilderness


def test_missing_parent_is_logged_not_fatal(caplog):
    """Depth 3 with no depth 2 candidate: warn, keep the best match."""
    stall = _record(3, 3, "[4,4][4,6][6,6][6,4]", parent_id=2)

    resolution = PlotHierarchyResolver().resolve(GridPoint(5, 5), WORLD, [TOWN, stall])

    assert resolution.polygon.id == 3
    assert resolution.polygon.parent_id is None
    assert resolution.ancestors == []
    assert "plot.parent_missing" in _events(caplog)


def test_duplicate_depth_keeps_newest(caplog):
    older = _record(4, 1, "[0,0][0,10][10,10][10,0]")
    newer = _record(7, 1, "[0,0][0,10][10,10][10,0]")

    resolution = PlotHierarchyResolver().resolve(GridPoint(5, 5), WORLD, [newer, older])

    assert resolution.polygon.id == 7
    assert "plot.depth_conflict" in _events(caplog)


def test_other_world_candidates_are_skipped():
    nether_town = _record(9, 1, "[0,0][0,20][20,20][20,0]", world="nether")

    resolution = PlotHierarchyResolver().resolve(GridPoint(5, 5), WORLD, [nether_town])

    assert resolution.polygon.is_wilderness


def test_record_validation():
    with pytest.raises(ValueError):
        _record(-1, 1, "[0,0]")
    with pytest.raises(ValueError):
        _record(1, 0, "[0,0]")


def test_record_to_dict():
    row = TOWN.to_dict()

    assert row['id'] == 1
    assert row['owner'] == "P:alice"
    assert row['vertices'] == "[0,0][0,20][20,20][20,0]"
    assert (row['centroid_x'], row['centroid_z']) == (10, 10)
    assert (row['min_x'], row['min_z'], row['max_x'], row['max_z']) == (0, 0, 20, 20)
    assert row['parent'] is None
    assert row['depth'] == 1


def test_record_from_dict_resolves_group_owner():
    builders = Group.founded("builders", "alice")
    groups = {"builders": builders}
    row = dict(MARKET.to_dict(), owner="G:builders")

    record = PlotRecord.from_dict(row, groups.get)

    assert record.id == 2
    assert record.parent_id == 1
    assert record.owner.kind is OwnerKind.GROUP
    assert record.owner.group is builders
    assert record.vertices == MARKET.vertices


def test_record_from_dict_rejects_bad_rows():
    row = TOWN.to_dict()

    with pytest.raises(ValueError, match="Missing required"):
        PlotRecord.from_dict({k: v for k, v in row.items() if k != 'vertices'})
    with pytest.raises(ValueError):
        PlotRecord.from_dict(dict(row, vertices="[0,0][oops]"))
    with pytest.raises(ValueError):
        PlotRecord.from_dict(dict(row, owner="X:alice"))


def test_record_covers_is_bbox_only():
    l_shape = _record(3, 1, "[0,0][0,10][5,10][5,5][10,5][10,0]")

    assert l_shape.covers(WORLD, GridPoint(7, 7))
    assert not l_shape.covers("nether", GridPoint(7, 7))
    assert not l_shape.covers(WORLD, GridPoint(11, 7))
