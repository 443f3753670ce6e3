"""
Tests for the claim workflow: sessions, transfers, groups, permissions.

Usage:
    pytest test_claims.py
"""

import pytest

from freehold_claims.registry import ClaimSessionRegistry
from freehold_claims.service import ClaimService
from freehold_claims.store import InMemoryPlotStore
from freehold_plots.config import PlotConfig
from freehold_plots.geometry.shapes import GridPoint
from freehold_plots.hierarchy.records import PlotRecord
from freehold_plots.ownership.owner import Group, Owner
from freehold_plots.ownership.policy import OwnershipPolicy, StaticCapabilities
from freehold_plots.ranks import Rank
from freehold_plots.results import Result

WORLD = "overworld"
CLAIM_CAPABILITY = "freehold.wilderness.claim"


def _claim(service, actor, outline):
    """Draw and save a plot, asserting every step succeeds."""
    first, *rest = outline
    assert service.begin_claim(actor, WORLD, first) is Result.SUCCESS
    for vertex in rest:
        assert service.add_vertex(actor, vertex) is Result.SUCCESS
    assert service.save_claim(actor) is Result.SUCCESS


@pytest.fixture
def store():
    return InMemoryPlotStore()


@pytest.fixture
def service(store):
    config = PlotConfig()
    capabilities = StaticCapabilities([("alice", CLAIM_CAPABILITY)])
    return ClaimService(store, OwnershipPolicy(config, capabilities), config)


@pytest.fixture
def town(service):
    """Plot 1 (0..20 square) claimed in the wilderness and given to alice."""
    _claim(service, "alice", [GridPoint(0, 0), GridPoint(0, 20), GridPoint(20, 20), GridPoint(20, 0)])
    assert service.transfer("alice", WORLD, GridPoint(5, 5), Owner.user("alice")) is Result.SUCCESS
    return service.store.get_plot(1)


def test_claim_in_wilderness(service, store):
    _claim(service, "alice", [GridPoint(0, 0), GridPoint(0, 20), GridPoint(20, 20), GridPoint(20, 0)])

    record = store.get_plot(1)
    assert record.depth == 1
    assert record.owner is None
    assert record.vertices == (GridPoint(0, 0), GridPoint(0, 20), GridPoint(20, 20), GridPoint(20, 0))
    assert not service.sessions.is_active("alice")


def test_wilderness_claim_needs_capability(service, store):
    assert service.begin_claim("bob", WORLD, GridPoint(0, 0)) is Result.FAILURE_NO_PERMISSION
    assert len(store) == 0


def test_no_claim_inside_vacant_plot(service):
    _claim(service, "alice", [GridPoint(0, 0), GridPoint(0, 20), GridPoint(20, 20), GridPoint(20, 0)])

    assert service.begin_claim("alice", WORLD, GridPoint(5, 5)) is Result.FAILURE_WRONG_USAGE


def test_nested_claim(service, store, town):
    _claim(service, "alice", [GridPoint(2, 2), GridPoint(2, 8), GridPoint(8, 8), GridPoint(8, 2)])

    market = store.get_plot(2)
    assert market.depth == 2
    assert market.parent_id == town.id
    resolution = service.locate(WORLD, GridPoint(5, 5))
    assert [p.id for p in resolution.chain] == [2, 1, -1]


def test_nested_vertex_outside_parent(service, town):
    assert service.begin_claim("alice", WORLD, GridPoint(2, 2)) is Result.SUCCESS
    assert service.add_vertex("alice", GridPoint(2, 25)) is Result.FAILURE_BAD_ALIGNMENT
    assert service.add_vertex("alice", GridPoint(5, 9)) is Result.FAILURE_BAD_ALIGNMENT
    assert len(service.sessions.get("alice").polygon.vertices) == 1


def test_claim_needs_rank_in_parent(service, town):
    assert service.begin_claim("bob", WORLD, GridPoint(5, 5)) is Result.FAILURE_NO_PERMISSION


def test_no_session(service):
    assert service.add_vertex("alice", GridPoint(0, 0)) is Result.FAILURE_NOT_FOUND
    assert service.save_claim("alice") is Result.FAILURE_NOT_FOUND
    assert service.abort_claim("alice") is Result.FAILURE_NOT_FOUND


def test_save_requires_closed_outline(service, town):
    assert service.begin_claim("alice", WORLD, GridPoint(12, 12)) is Result.SUCCESS
    assert service.add_vertex("alice", GridPoint(12, 18)) is Result.SUCCESS
    assert service.save_claim("alice") is Result.FAILURE_BAD_ALIGNMENT

    assert service.add_vertex("alice", GridPoint(17, 18)) is Result.SUCCESS
    assert service.save_claim("alice") is Result.FAILURE_BAD_ALIGNMENT
    assert service.sessions.is_active("alice")


def test_abort_deletes_draft(service, store, town):
    assert service.begin_claim("alice", WORLD, GridPoint(12, 12)) is Result.SUCCESS
    draft_id = service.sessions.get("alice").polygon.id
    assert store.get_plot(draft_id) is not None

    assert service.abort_claim("alice") is Result.SUCCESS
    assert store.get_plot(draft_id) is None
    assert not service.sessions.is_active("alice")


def test_begin_again_discards_previous_draft(service, store, town):
    service.begin_claim("alice", WORLD, GridPoint(12, 12))
    first_id = service.sessions.get("alice").polygon.id

    assert service.begin_claim("alice", WORLD, GridPoint(14, 14)) is Result.SUCCESS
    assert store.get_plot(first_id) is None
    assert service.sessions.get("alice").polygon.id != first_id


def test_transfer_rules(service, store, town):
    store.save_group(Group.founded("builders", "alice"))

    assert service.transfer("alice", WORLD, GridPoint(50, 50), Owner.user("bob")) is Result.FAILURE_WRONG_USAGE
    assert service.transfer("bob", WORLD, GridPoint(5, 5), Owner.user("bob")) is Result.FAILURE_NO_PERMISSION
    assert (
        service.transfer("alice", WORLD, GridPoint(5, 5), Owner.of_group(Group.founded("ghosts", "x")))
        is Result.FAILURE_UNKNOWN_GROUP
    )

    builders = store.get_group("builders")
    assert service.transfer("alice", WORLD, GridPoint(5, 5), Owner.of_group(builders)) is Result.SUCCESS
    record = store.get_plot(1)
    assert record.owner.serialize() == "G:builders"
    assert record.vertices == town.vertices


def test_check_permission(service, town):
    _claim(service, "alice", [GridPoint(2, 2), GridPoint(2, 8), GridPoint(8, 8), GridPoint(8, 2)])

    # Vacant market inherits alice's ownership from the town
    assert service.check_permission("alice", WORLD, GridPoint(5, 5), "build")
    assert not service.check_permission("bob", WORLD, GridPoint(5, 5), "build")
    # Wilderness: low-rank actions are open, building needs the capability
    assert service.check_permission("bob", WORLD, GridPoint(50, 50), "use")
    assert not service.check_permission("bob", WORLD, GridPoint(50, 50), "build")
    assert service.check_permission("alice", WORLD, GridPoint(50, 50), "build")


def test_entered_plots(service, town):
    _claim(service, "alice", [GridPoint(2, 2), GridPoint(2, 8), GridPoint(8, 8), GridPoint(8, 2)])

    entered = service.entered_plots(WORLD, GridPoint(50, 50), GridPoint(5, 5))
    assert [p.id for p in entered] == [1, 2]
    assert service.entered_plots(WORLD, GridPoint(15, 15), GridPoint(5, 5))[0].id == 2
    assert service.entered_plots(WORLD, GridPoint(5, 5), GridPoint(6, 6)) == []
    assert service.entered_plots(WORLD, GridPoint(5, 5), GridPoint(15, 15)) == []


def test_group_management(service, store):
    assert service.create_group("alice", "builders") is Result.SUCCESS
    assert service.create_group("bob", "builders") is Result.FAILURE_ALREADY_PRESENT
    assert service.create_group("bob", "Wilderness") is Result.FAILURE_ALREADY_PRESENT

    assert service.add_member("alice", "builders", "bob") is Result.SUCCESS
    assert service.add_member("alice", "builders", "bob") is Result.FAILURE_ALREADY_PRESENT
    assert service.add_member("bob", "builders", "carol") is Result.FAILURE_NO_PERMISSION

    assert service.rank_member("alice", "builders", "bob", Rank.ASSISTANT) is Result.SUCCESS
    assert service.add_member("bob", "builders", "carol") is Result.SUCCESS
    assert service.remove_member("bob", "builders", "carol") is Result.FAILURE_NO_PERMISSION
    assert service.remove_member("alice", "builders", "dave") is Result.FAILURE_NOT_PRESENT
    assert service.remove_member("alice", "builders", "carol") is Result.SUCCESS

    assert service.rank_member("alice", "builders", "bob", Rank.OUTSIDER) is Result.FAILURE_WRONG_USAGE
    assert service.rank_member("alice", "builders", "dave", Rank.MEMBER) is Result.FAILURE_NOT_PRESENT
    assert service.add_member("alice", "ghosts", "bob") is Result.FAILURE_UNKNOWN_GROUP

    result, members = service.list_members("dave", "builders")
    assert result is Result.SUCCESS
    assert members == {"alice": Rank.OPERATOR, "bob": Rank.ASSISTANT}
    assert store.get_group("builders").rank_of("bob") is Rank.ASSISTANT


def test_group_owned_plot_claiming(service, store):
    """Assistants of an owning group may claim inside its plot, members may not."""
    service.create_group("alice", "builders")
    service.add_member("alice", "builders", "bob")
    service.add_member("alice", "builders", "carol")
    service.rank_member("alice", "builders", "carol", Rank.ASSISTANT)
    _claim(service, "alice", [GridPoint(0, 0), GridPoint(0, 20), GridPoint(20, 20), GridPoint(20, 0)])
    service.transfer("alice", WORLD, GridPoint(5, 5), Owner.of_group(store.get_group("builders")))

    assert service.begin_claim("bob", WORLD, GridPoint(5, 5)) is Result.FAILURE_NO_PERMISSION
    assert service.begin_claim("carol", WORLD, GridPoint(5, 5)) is Result.SUCCESS


def test_store_ids_and_candidates(store):
    record = PlotRecord(
        id=5, world=WORLD, depth=1,
        vertices=(GridPoint(0, 0), GridPoint(0, 4), GridPoint(4, 4), GridPoint(4, 0)),
    )
    store.save_plot(record)

    assert store.next_plot_id() == 6
    assert store.next_plot_id() == 7
    assert store.candidates(WORLD, GridPoint(2, 2)) == [record]
    assert store.candidates(WORLD, GridPoint(9, 9)) == []
    assert store.candidates("nether", GridPoint(2, 2)) == []
    assert store.delete_plot(5)
    assert not store.delete_plot(5)


def test_store_from_rows_skips_bad_rows(caplog):
    good = {'id': 1, 'world': WORLD, 'vertices': "[0,0][0,4][4,4][4,0]", 'depth': 1}
    bad = {'id': 2, 'world': WORLD, 'vertices': "[0,0][", 'depth': 1}

    store = InMemoryPlotStore.from_rows([good, bad])

    assert [record.id for record in store.plots] == [1]
    assert any("error.record_decode" in record.getMessage() for record in caplog.records)


def test_session_registry():
    registry = ClaimSessionRegistry()

    assert registry.get("alice") is None
    assert registry.close("alice") is None
    assert registry.count() == 0
    assert registry.active_actors == set()
