from datetime import datetime

import pytest

from analyze import build_index
from schemas import AvailabilityRecord


def at(hour, minute=0, day=13):
    """2025-01-13 (월) 기준 시각"""
    return datetime(2025, 1, day, hour, minute)


def rec(person, slot_start, contact=""):
    return AvailabilityRecord(person=person, slot_start=slot_start, contact=contact)


@pytest.fixture
def alice_bob_records():
    return [
        rec("Alice", at(9, 0), "alice@example.com"),
        rec("Bob", at(9, 0), "bob@example.com"),
        rec("Alice", at(9, 30)),
        rec("Bob", at(10, 0)),
    ]


@pytest.fixture
def alice_bob(alice_bob_records):
    return build_index(alice_bob_records)


@pytest.fixture
def team_index():
    """세 명, 이틀치 데이터"""
    records = [
        rec("Carol", at(14, 0, day=14)),
        rec("Alice", at(9, 0)),
        rec("Bob", at(9, 0)),
        rec("Carol", at(9, 0)),
        rec("Alice", at(9, 30)),
        rec("Bob", at(9, 30)),
        rec("Alice", at(10, 0)),
        rec("Bob", at(10, 0)),
        rec("Carol", at(10, 0)),
        rec("Alice", at(14, 0, day=14)),
        rec("Bob", at(14, 30, day=14)),
    ]
    return build_index(records)
