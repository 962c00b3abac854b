from datetime import date, timedelta

from analyze import build_index, consolidate_slots, find_common_slots, filter_short_blocks
from conftest import at, rec
from schemas import TimeBlock

MONDAY = date(2025, 1, 13)
TUESDAY = date(2025, 1, 14)
SLOT = timedelta(minutes=30)


def _expand(grouped):
    slots = []
    for blocks in grouped.values():
        for block in blocks:
            slots.extend(block.start + i * SLOT for i in range(block.slot_count))
    return slots


def test_single_common_slot_becomes_one_block(alice_bob):
    grouped = consolidate_slots(find_common_slots(alice_bob, ["Alice", "Bob"]))
    assert grouped == {MONDAY: [TimeBlock(start=at(9, 0), end=at(9, 30), slot_count=1)]}


def test_adjacent_common_slots_merge(alice_bob_records):
    index = build_index(alice_bob_records + [rec("Bob", at(9, 30))])
    grouped = consolidate_slots(find_common_slots(index, ["Alice", "Bob"]))
    assert grouped == {MONDAY: [TimeBlock(start=at(9, 0), end=at(10, 0), slot_count=2)]}


def test_merge_off_keeps_one_block_per_slot(alice_bob):
    grouped = consolidate_slots(find_common_slots(alice_bob, ["Alice"]), merge=False)
    assert grouped == {
        MONDAY: [
            TimeBlock(start=at(9, 0), end=at(9, 30), slot_count=1),
            TimeBlock(start=at(9, 30), end=at(10, 0), slot_count=1),
        ]
    }


def test_gap_splits_blocks():
    slots = [at(9, 0), at(9, 30), at(11, 0), at(11, 30), at(12, 0), at(14, 0)]
    blocks = consolidate_slots(slots)[MONDAY]

    assert [(b.start, b.end, b.slot_count) for b in blocks] == [
        (at(9, 0), at(10, 0), 2),
        (at(11, 0), at(12, 30), 3),
        (at(14, 0), at(14, 30), 1),
    ]
    for current, following in zip(blocks, blocks[1:]):
        assert following.start - current.end >= SLOT


def test_unsorted_input_is_sorted_per_date():
    slots = [at(10, 0, day=14), at(9, 30), at(9, 0, day=14), at(9, 0), at(9, 30, day=14)]
    grouped = consolidate_slots(slots)

    assert list(grouped) == [MONDAY, TUESDAY]
    assert grouped[MONDAY] == [TimeBlock(start=at(9, 0), end=at(10, 0), slot_count=2)]
    assert grouped[TUESDAY] == [TimeBlock(start=at(9, 0, day=14), end=at(10, 30, day=14), slot_count=3)]


def test_midnight_does_not_merge_across_dates():
    grouped = consolidate_slots([at(23, 30), at(0, 0, day=14)])

    assert grouped == {
        MONDAY: [TimeBlock(start=at(23, 30), end=at(0, 0, day=14), slot_count=1)],
        TUESDAY: [TimeBlock(start=at(0, 0, day=14), end=at(0, 30, day=14), slot_count=1)],
    }


def test_duplicate_slots_are_not_repeated():
    grouped = consolidate_slots([at(9, 0), at(9, 0), at(9, 30)])
    assert grouped == {MONDAY: [TimeBlock(start=at(9, 0), end=at(10, 0), slot_count=2)]}


def test_blocks_partition_the_input():
    slots = [at(8, 0), at(8, 30), at(9, 0), at(10, 0), at(16, 0, day=14), at(16, 30, day=14)]

    for merge in (True, False):
        grouped = consolidate_slots(slots, merge=merge)
        assert sorted(_expand(grouped)) == slots
        for blocks in grouped.values():
            for block in blocks:
                assert block.end == block.start + block.slot_count * SLOT

    assert sum(len(b) for b in consolidate_slots(slots, merge=False).values()) == len(slots)


def test_custom_slot_minutes():
    slots = [at(9, 0), at(9, 15), at(9, 30), at(10, 0)]
    blocks = consolidate_slots(slots, slot_minutes=15)[MONDAY]

    assert blocks == [
        TimeBlock(start=at(9, 0), end=at(9, 45), slot_count=3),
        TimeBlock(start=at(10, 0), end=at(10, 15), slot_count=1),
    ]


def test_empty_input():
    assert consolidate_slots([]) == {}
    assert consolidate_slots([], merge=False) == {}


def test_same_arguments_same_result():
    slots = [at(9, 0), at(9, 30), at(13, 0)]
    assert consolidate_slots(slots) == consolidate_slots(slots)


def test_filter_short_blocks_drops_empty_dates():
    grouped = consolidate_slots([at(9, 0), at(9, 30), at(9, 0, day=14)])

    assert filter_short_blocks(grouped, 60) == {MONDAY: grouped[MONDAY]}
    assert filter_short_blocks(grouped, 0) == grouped
