"""
Tests for owners, groups and the ownership policy.

Usage:
    pytest test_ownership.py
"""

import pytest

from freehold_plots.config import PlotConfig, PlotRankConfig
from freehold_plots.geometry.polygon import Polygon
from freehold_plots.geometry.shapes import GridPoint
from freehold_plots.hierarchy.arena import PlotArena
from freehold_plots.ownership.owner import Group, Owner, OwnerKind
from freehold_plots.ownership.policy import OwnershipPolicy, StaticCapabilities
from freehold_plots.ranks import Rank
from freehold_plots.results import Result

CLAIM_CAPABILITY = "freehold.wilderness.claim"


@pytest.fixture
def builders():
    group = Group.founded("builders", "alice")
    group.add_user("bob", Rank.MEMBER)
    group.add_user("carol", Rank.ASSISTANT)
    return group


def test_founder_is_operator(builders):
    assert builders.rank_of("alice") is Rank.OPERATOR
    assert builders.rank_of("dave") is None


def test_group_membership_results(builders):
    assert builders.add_user("bob") is Result.FAILURE_ALREADY_PRESENT
    assert builders.remove_user("dave") is Result.FAILURE_NOT_PRESENT
    assert builders.rank_user("dave", Rank.ASSISTANT) is Result.FAILURE_NOT_PRESENT

    assert builders.rank_user("bob", Rank.ASSISTANT) is Result.SUCCESS
    assert builders.rank_of("bob") is Rank.ASSISTANT
    assert builders.remove_user("bob") is Result.SUCCESS
    assert builders.rank_of("bob") is None


def test_group_users_codec(builders):
    text = builders.serialize_users()

    assert text == "alice,OPERATOR|bob,MEMBER|carol,ASSISTANT|"
    assert Group.parse_users(text) == builders.users
    assert Group.parse_users("") == {}
    with pytest.raises(ValueError):
        Group.parse_users("alice,KING|")


def test_owner_codec(builders):
    groups = {"builders": builders}

    assert Owner.user("alice").serialize() == "P:alice"
    assert Owner.of_group(builders).serialize() == "G:builders"
    assert Owner.parse("P:alice", groups.get) == Owner.user("alice")
    assert Owner.parse("G:builders", groups.get).group is builders
    assert Owner.parse("G:gone", groups.get) is None
    assert Owner.parse("", groups.get) is None
    with pytest.raises(ValueError):
        Owner.parse("X:alice", groups.get)


def test_owner_requires_its_variant_payload():
    with pytest.raises(ValueError):
        Owner(kind=OwnerKind.USER)
    with pytest.raises(ValueError):
        Owner(kind=OwnerKind.GROUP)


def test_rank_parsing():
    assert Rank.parse(" assistant ") is Rank.ASSISTANT
    assert Rank.from_level(3) is Rank.OPERATOR
    with pytest.raises(ValueError):
        Rank.from_level(7)
    with pytest.raises(ValueError):
        Rank.parse("king")


def test_user_owner_ignores_rank():
    policy = OwnershipPolicy()
    owner = Owner.user("alice")

    assert policy.contains_user(owner, "alice", Rank.OPERATOR)
    assert not policy.contains_user(owner, "bob", Rank.OUTSIDER)


def test_group_owner_rank_rules(builders):
    policy = OwnershipPolicy()
    owner = Owner.of_group(builders)

    assert policy.contains_user(owner, "alice", Rank.OPERATOR)
    assert not policy.contains_user(owner, "carol", Rank.OPERATOR)

    assert policy.contains_user(owner, "alice", Rank.ASSISTANT)
    assert policy.contains_user(owner, "carol", Rank.ASSISTANT)
    assert not policy.contains_user(owner, "bob", Rank.ASSISTANT)

    assert policy.contains_user(owner, "bob", Rank.MEMBER)
    assert not policy.contains_user(owner, "dave", Rank.MEMBER)

    assert policy.contains_user(owner, "dave", Rank.OUTSIDER)


def test_everyone_group_bypass():
    """Low ranks always pass in the wilderness, higher ones need the capability."""
    capabilities = StaticCapabilities()
    policy = OwnershipPolicy(PlotConfig(), capabilities)
    everyone = policy.everyone

    assert policy.contains_user(everyone, "bob", Rank.OUTSIDER)
    assert policy.contains_user(everyone, "bob", Rank.MEMBER)
    assert not policy.contains_user(everyone, "bob", Rank.ASSISTANT)

    capabilities.grant("bob", CLAIM_CAPABILITY)
    assert policy.contains_user(everyone, "bob", Rank.OPERATOR)


def test_everyone_bypass_is_not_keyed_on_name():
    """An ordinary group that happens to be named like the wilderness gets no bypass."""
    impostor = Group.founded("Wilderness", "alice")
    policy = OwnershipPolicy(PlotConfig(), StaticCapabilities([("bob", CLAIM_CAPABILITY)]))

    assert not policy.contains_user(Owner.of_group(impostor), "bob", Rank.MEMBER)


def test_capability_name_comes_from_config():
    config = PlotConfig(wilderness_claim_capability="realm.claim")
    policy = OwnershipPolicy(config, StaticCapabilities([("bob", "realm.claim")]))

    assert policy.contains_user(policy.everyone, "bob", Rank.ASSISTANT)


def _nested():
    arena = PlotArena()
    wilderness = arena.add(Polygon.wilderness("overworld"))
    town = arena.create_child(wilderness, plot_id=1, owner=Owner.user("alice"))
    shop = arena.create_child(town, plot_id=2)
    lot = arena.create_child(wilderness, plot_id=3)
    return arena, town, shop, lot


def test_effective_owner_walks_up_the_chain():
    arena, town, shop, lot = _nested()
    policy = OwnershipPolicy()

    assert policy.effective_owner(town) == Owner.user("alice")
    assert policy.effective_owner(shop) == Owner.user("alice")
    assert policy.effective_owner(lot) is policy.everyone
    assert len(arena) == 4


def test_may_uses_configured_action_rank(builders):
    arena, town, shop, lot = _nested()
    town.owner = Owner.of_group(builders)
    policy = OwnershipPolicy(PlotConfig(plot_ranks=PlotRankConfig(build=1)))

    assert policy.may(shop, "bob", "build")
    assert not policy.may(shop, "bob", "delete")
    assert policy.may(lot, "bob", "use")
    assert not policy.may(lot, "bob", "claim")
    with pytest.raises(ValueError):
        policy.may(shop, "bob", "teleport")


def test_polygon_display_name():
    polygon = Polygon(1, "overworld", owner=Owner.user("alice"), depth=1, vertices=[GridPoint(0, 0)])

    assert polygon.display_name == "alice"
