import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from itertools import combinations
from typing import Iterable

from config import SLOT_MINUTES
from schemas import (
    AvailabilityIndex,
    AvailabilityRecord,
    CommonAvailability,
    OverlapCell,
    OverlapMatrix,
    TimeBlock,
)

logger = logging.getLogger(__name__)


# =============================================================================
# 0. 인덱스 구성
# =============================================================================

def build_index(
    records: Iterable[AvailabilityRecord],
    slot_minutes: int = SLOT_MINUTES,
) -> AvailabilityIndex:
    """
    레코드 목록을 명단과 시간별 조회 구조로 정리합니다.

    같은 사람이 같은 슬롯에 여러 번 있으면 한 번으로 취급합니다.
    명단은 처음 등장한 순서를 유지합니다 (이름순 정렬 X).
    """
    roster: list[str] = []
    contacts: dict[str, str] = {}
    unique_records: list[AvailabilityRecord] = []
    availability: dict[datetime, list[str]] = {}
    seen: set[tuple[str, datetime]] = set()

    for record in records:
        if record.person not in contacts:
            roster.append(record.person)
            contacts[record.person] = ""
        if record.contact and not contacts[record.person]:
            contacts[record.person] = record.contact

        key = (record.person, record.slot_start)
        if key in seen:
            continue
        seen.add(key)
        unique_records.append(record)
        availability.setdefault(record.slot_start, []).append(record.person)

    logger.debug(
        "인덱스 생성: %d명, %d개 슬롯, %d개 레코드",
        len(roster), len(availability), len(unique_records),
    )
    return {
        "roster": roster,
        "contacts": contacts,
        "records": unique_records,
        "availability": availability,
        "slot_minutes": slot_minutes,
    }


def _effective_selection(index: AvailabilityIndex, selected: Iterable[str]) -> list[str]:
    """명단에 없는 이름은 버리고, 명단 순서로 정렬한 선택 목록을 돌려줍니다."""
    wanted = set(selected)
    return [person for person in index["roster"] if person in wanted]


# =============================================================================
# 1. 전원 가능한 시간 찾기
# =============================================================================

def find_common_slots(index: AvailabilityIndex, selected: Iterable[str]) -> list[datetime]:
    """
    선택한 사람들이 모두 가능한 슬롯을 시간순으로 반환합니다.

    아무도 선택하지 않았으면 빈 리스트입니다.
    """
    participant_set = set(_effective_selection(index, selected))
    if not participant_set:
        return []

    common = [
        slot
        for slot, people in index["availability"].items()
        if len(participant_set.intersection(people)) == len(participant_set)
    ]
    return sorted(common)


# =============================================================================
# 2. 연속된 시간대 묶기 (날짜별)
# =============================================================================

def consolidate_slots(
    slots: Iterable[datetime],
    merge: bool = True,
    slot_minutes: int = SLOT_MINUTES,
) -> dict[date, list[TimeBlock]]:
    """
    슬롯들을 날짜별로 나누고, 날짜 안에서 이어지는 슬롯을 하나의 블록으로 묶습니다.

    Args:
        slots: datetime 리스트 (정렬되어 있지 않아도 됨)
        merge: False면 묶지 않고 슬롯마다 블록 하나
        slot_minutes: 슬롯 간격 (분)

    Returns:
        {date(2025, 1, 5): [TimeBlock, ...], ...} (날짜순)
    """
    step = timedelta(minutes=slot_minutes)

    # 날짜가 다르면 자정을 넘겨 이어지더라도 따로 묶는다
    grouped: dict[date, list[datetime]] = defaultdict(list)
    for slot in sorted(set(slots)):
        grouped[slot.date()].append(slot)

    result: dict[date, list[TimeBlock]] = {}
    for day, day_slots in grouped.items():
        if not merge:
            result[day] = [TimeBlock(start=s, end=s + step, slot_count=1) for s in day_slots]
            continue

        blocks = []
        start = day_slots[0]
        end = start + step
        count = 1

        for slot in day_slots[1:]:
            if slot == end:
                end = slot + step
                count += 1
            else:
                blocks.append(TimeBlock(start=start, end=end, slot_count=count))
                start = slot
                end = slot + step
                count = 1

        blocks.append(TimeBlock(start=start, end=end, slot_count=count))
        result[day] = blocks

    return result


def filter_short_blocks(
    grouped: dict[date, list[TimeBlock]],
    min_duration_minutes: int,
) -> dict[date, list[TimeBlock]]:
    """최소 길이보다 짧은 블록을 뺍니다. 블록이 하나도 안 남은 날짜는 제외합니다."""
    if min_duration_minutes <= 0:
        return dict(grouped)

    min_duration = timedelta(minutes=min_duration_minutes)
    result = {}
    for day, blocks in grouped.items():
        kept = [b for b in blocks if b.duration >= min_duration]
        if kept:
            result[day] = kept
    return result


def find_common_availability(
    index: AvailabilityIndex,
    selected: Iterable[str],
    merge: bool = True,
    min_duration_minutes: int = 0,
) -> CommonAvailability:
    """
    선택한 사람들이 모두 가능한 시간을 날짜별 블록으로 반환합니다.

    결과의 status로 "선택 없음"과 "겹치는 시간 없음"을 구분할 수 있습니다.
    """
    participants = _effective_selection(index, selected)
    slots = find_common_slots(index, participants)
    blocks = consolidate_slots(slots, merge, index["slot_minutes"])
    blocks = filter_short_blocks(blocks, min_duration_minutes)

    logger.debug("공통 시간 계산: %d명 선택, %d개 슬롯", len(participants), len(slots))
    return CommonAvailability(
        selected=tuple(participants),
        slot_count=len(slots),
        blocks=blocks,
    )


# =============================================================================
# 3. 전체 인원 겹침 표
# =============================================================================

def _time_of_day(slot: datetime) -> time:
    return time(slot.hour, slot.minute)


def build_overlap_matrix(index: AvailabilityIndex) -> OverlapMatrix:
    """
    날짜 × 시각 표를 만들어 칸마다 가능한 사람을 모읍니다.

    선택과 무관하게 전체 레코드를 사용합니다. 데이터에 없는 (날짜, 시각) 칸은 0명입니다.
    """
    records = index["records"]
    total = len(index["roster"])

    dates = sorted({r.slot_start.date() for r in records})
    times = sorted({_time_of_day(r.slot_start) for r in records})

    people: dict[date, dict[time, list[str]]] = {
        d: {t: [] for t in times} for d in dates
    }
    for record in records:
        people[record.slot_start.date()][_time_of_day(record.slot_start)].append(record.person)

    cells = {
        d: {
            t: OverlapCell(count=len(names), people=tuple(names), total=total)
            for t, names in row.items()
        }
        for d, row in people.items()
    }
    return OverlapMatrix(dates=dates, times=times, cells=cells)


def filter_matrix_people(matrix: OverlapMatrix, visible: Iterable[str]) -> OverlapMatrix:
    """표시할 사람만 남긴 새 표를 반환합니다. total은 그대로 둡니다."""
    visible_set = set(visible)
    cells = {}
    for d, row in matrix.cells.items():
        cells[d] = {}
        for t, cell in row.items():
            shown = tuple(p for p in cell.people if p in visible_set)
            cells[d][t] = OverlapCell(count=len(shown), people=shown, total=cell.total)
    return OverlapMatrix(dates=list(matrix.dates), times=list(matrix.times), cells=cells)


# =============================================================================
# 4. 대안 제시
# =============================================================================

def find_alternatives(
    index: AvailabilityIndex,
    selected: Iterable[str],
    max_missing: int = 1,
    merge: bool = True,
) -> dict[tuple[str, ...], dict[date, list[TimeBlock]]]:
    """
    전원이 안 될 때, N-1명 (또는 N-max_missing명) 가능한 시간을 찾습니다.

    Args:
        index: AvailabilityIndex
        selected: 원하는 참가자 리스트
        max_missing: 최대 빠질 수 있는 인원 수
        merge: 연속 슬롯을 묶을지 여부

    Returns:
        {
            ("빠지는 사람",): {
                date(2025, 1, 5): [TimeBlock, ...],
                ...
            },
            ...
        }
    """
    participants = _effective_selection(index, selected)
    alternatives = {}

    # 최소 한 명은 남긴다
    for i in range(1, min(max_missing + 1, len(participants))):
        for missing in combinations(participants, i):
            remaining = [p for p in participants if p not in missing]
            slots = find_common_slots(index, remaining)

            if slots:  # 가능한 시간이 있는 경우만
                alternatives[missing] = consolidate_slots(slots, merge, index["slot_minutes"])

    return alternatives


def find_who_blocks(index: AvailabilityIndex, selected: Iterable[str]) -> dict[str, int]:
    """
    누가 가장 많은 시간대를 막고 있는지 분석합니다.

    Returns:
        {"이름": 해당 인원 제외시 추가되는 슬롯 수, ...} (내림차순 정렬)
    """
    participants = _effective_selection(index, selected)
    base_slots = set(find_common_slots(index, participants))
    blockers = {}

    for person in participants:
        remaining = [p for p in participants if p != person]
        new_slots = set(find_common_slots(index, remaining))
        added_slots = len(new_slots - base_slots)

        if added_slots > 0:
            blockers[person] = added_slots

    # 내림차순 정렬
    return dict(sorted(blockers.items(), key=lambda x: -x[1]))
