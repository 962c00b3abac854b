from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Dict, List, NamedTuple, Tuple, TypedDict


@dataclass(frozen=True)
class AvailabilityRecord:
    person: str                              # 참가자 이름 (그룹핑 키)
    slot_start: datetime                     # 슬롯 시작 시각
    contact: str = ""                        # 이메일 등, 계산에는 쓰지 않음


@dataclass(frozen=True)
class TimeBlock:
    start: datetime                          # 첫 슬롯 시작
    end: datetime                            # 마지막 슬롯 시작 + 슬롯 길이 (미포함)
    slot_count: int = 1                      # 합쳐진 슬롯 수

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class OverlapCell:
    count: int = 0                           # 가능한 인원 수
    people: Tuple[str, ...] = field(default_factory=tuple)
    total: int = 0                           # 전체 인원 수


class AvailabilityIndex(TypedDict):
    roster: List[str]                        # 전체 인원 (처음 등장한 순서)
    contacts: Dict[str, str]                 # {이름: 연락처}
    records: List[AvailabilityRecord]        # 중복 제거된 원본 레코드
    availability: Dict[datetime, List[str]]  # {시간: [가능한 사람들]}
    slot_minutes: int                        # 슬롯 간격 (분)


class LoadedEvent(TypedDict):
    source: str                              # 'zcal' | 'when2meet' | 'timepick'
    name: str                                # 이벤트 이름
    slot_minutes: int                        # 슬롯 간격 (분)
    records: List[AvailabilityRecord]


class OverlapMatrix(NamedTuple):
    dates: List[date]
    times: List[time]
    cells: Dict[date, Dict[time, OverlapCell]]


@dataclass(frozen=True)
class CommonAvailability:
    selected: Tuple[str, ...]                # 명단에 있는 선택 인원
    slot_count: int                          # 전원 가능한 슬롯 수 (합치기 전)
    blocks: Dict[date, List[TimeBlock]]      # {날짜: [시간 블록]}

    @property
    def status(self) -> str:
        if not self.selected:
            return "no_selection"
        if self.slot_count == 0:
            return "no_overlap"
        return "available"
