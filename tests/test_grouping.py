from wedding_table_planner.grouping import classify_group, classify_groups, dominant, group_guests, tally
from wedding_table_planner.models import CATEGORIES, SIDES, Guest


def g(gid, group=None, side="groom", category="family", amount=1):
    return Guest(id=gid, name=gid, side=side, category=category, group_id=group, amount=amount)


def test_guests_partitioned_by_trimmed_group_id():
    guests = [g("1", "Levi"), g("2"), g("3", " Levi "), g("4", "Cohen"), g("5", "   ")]
    groups = group_guests(guests)
    assert list(groups) == ["Levi", "Cohen", "individual-2", "individual-5"]
    assert [x.id for x in groups["Levi"]] == ["1", "3"]


def test_tally_is_seat_weighted():
    counts = tally([g("1", amount=3), g("2", side="bride"), g("3", side="bride")], "side", SIDES)
    assert counts == {"groom": 3, "bride": 2, "both": 0}


def test_tie_keeps_earlier_declared_value():
    assert dominant({"groom": 2, "bride": 2, "both": 2}, SIDES) == "groom"
    assert dominant({"family": 0, "friend": 3, "colleague": 3, "other": 1}, CATEGORIES) == "friend"
    assert dominant({"groom": 0, "bride": 0, "both": 0}, SIDES) == "groom"


def test_strictly_greater_replaces_leader():
    assert dominant({"groom": 2, "bride": 3, "both": 0}, SIDES) == "bride"


def test_classify_group():
    members = [g("1", "Army", side="bride", category="friend", amount=3),
               g("2", "Army", side="groom", category="colleague"),
               g("3", "Army", side="groom", category="colleague")]
    group = classify_group("Army", members, ["  ARMY  "])
    assert group.size == 5
    assert group.dominant_side == "bride"
    assert group.dominant_category == "friend"
    assert group.is_requested_for_knight


def test_classification_is_repeatable():
    members = [g("1", "A", side="both"), g("2", "A", side="bride", category="other")]
    first = classify_group("A", members)
    second = classify_group("A", first.members)
    assert (first.dominant_side, first.dominant_category) == (second.dominant_side, second.dominant_category)
    assert (first.dominant_side, first.dominant_category) == ("bride", "family")


def test_knight_names_must_match_exactly():
    groups = classify_groups([g("1", "Army friends"), g("2", "Army")], ["army", ""])
    assert [(x.group_id, x.is_requested_for_knight) for x in groups] == [("Army friends", False), ("Army", True)]


def test_singleton_groups_have_member_size():
    (group,) = classify_groups([g("solo", amount=4, side="both", category="other")])
    assert group.group_id == "individual-solo"
    assert group.size == 4
    assert (group.dominant_side, group.dominant_category) == ("both", "other")


def test_singleton_key_never_replaces_named_group():
    guests = [g("a", "individual-b"), g("b"), g("c", "individual-b-2")]
    groups = group_guests(guests)
    assert list(groups) == ["individual-b", "individual-b-2", "individual-b-3"]
    assert [x.id for x in groups["individual-b"]] == ["a"]
    assert [x.id for x in groups["individual-b-3"]] == ["b"]
    assert sorted(x.id for members in groups.values() for x in members) == ["a", "b", "c"]
