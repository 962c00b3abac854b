from datetime import datetime, timedelta, timezone

from analyze import build_index, find_common_availability, find_common_slots
from conftest import at, rec


def test_only_slots_with_everyone(alice_bob):
    assert find_common_slots(alice_bob, {"Alice", "Bob"}) == [at(9, 0)]


def test_adding_record_extends_common_slots(alice_bob_records):
    index = build_index(alice_bob_records + [rec("Bob", at(9, 30))])
    assert find_common_slots(index, ["Alice", "Bob"]) == [at(9, 0), at(9, 30)]


def test_single_person_gets_all_their_slots(alice_bob):
    assert find_common_slots(alice_bob, ["Alice"]) == [at(9, 0), at(9, 30)]


def test_empty_selection_returns_nothing(team_index):
    assert find_common_slots(team_index, []) == []
    assert find_common_slots(team_index, set()) == []


def test_unknown_names_are_ignored(alice_bob):
    assert find_common_slots(alice_bob, ["Alice", "Bob", "Zed"]) == [at(9, 0)]
    assert find_common_slots(alice_bob, ["Zed"]) == []


def test_every_result_has_every_selected_person(team_index):
    selected = {"Alice", "Bob", "Carol"}
    common = find_common_slots(team_index, selected)

    assert common == [at(9, 0), at(10, 0)]
    for slot in common:
        assert selected <= set(team_index["availability"][slot])

    # 빠진 슬롯도 없어야 한다
    expected = [s for s, people in team_index["availability"].items() if selected <= set(people)]
    assert sorted(expected) == common


def test_sorted_by_time_not_input_order():
    index = build_index([
        rec("Alice", at(10, 0)),
        rec("Alice", at(9, 0, day=14)),
        rec("Alice", at(8, 0)),
    ])
    assert find_common_slots(index, ["Alice"]) == [at(8, 0), at(10, 0), at(9, 0, day=14)]


def test_aware_timestamps_compare_as_points_in_time():
    utc = timezone.utc
    kst = timezone(timedelta(hours=9))
    early = datetime(2025, 1, 13, 9, 0, tzinfo=kst)   # 00:00 UTC
    late = datetime(2025, 1, 13, 1, 0, tzinfo=utc)
    index = build_index([rec("Alice", late), rec("Alice", early)])

    assert find_common_slots(index, ["Alice"]) == [early, late]


def test_common_availability_statuses(alice_bob):
    assert find_common_availability(alice_bob, []).status == "no_selection"
    assert find_common_availability(alice_bob, ["Zed"]).status == "no_selection"

    index = build_index([rec("Alice", at(9, 0)), rec("Bob", at(10, 0))])
    none = find_common_availability(index, ["Alice", "Bob"])
    assert none.status == "no_overlap"
    assert none.slot_count == 0
    assert none.blocks == {}

    some = find_common_availability(alice_bob, ["Bob", "Alice"])
    assert some.status == "available"
    assert some.selected == ("Alice", "Bob")
    assert some.slot_count == 1


def test_common_availability_min_duration(team_index):
    merged = find_common_availability(team_index, ["Alice", "Bob"])
    assert [b.slot_count for b in merged.blocks[at(9).date()]] == [3]

    long_only = find_common_availability(team_index, ["Alice", "Bob", "Carol"], min_duration_minutes=60)
    assert long_only.slot_count == 2
    assert long_only.blocks == {}


def test_repeated_calls_are_equal(team_index):
    first = find_common_availability(team_index, ["Alice", "Carol"], merge=True)
    second = find_common_availability(team_index, ["Alice", "Carol"], merge=True)
    assert first == second
