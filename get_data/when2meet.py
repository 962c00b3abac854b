"""
When2meet 데이터 추출 모듈

"""

import logging
import re
from datetime import datetime

import requests

from config import REQUEST_HEADERS, REQUEST_TIMEOUT_SECONDS, WHEN2MEET_SLOT_MINUTES
from schemas import AvailabilityRecord, LoadedEvent

logger = logging.getLogger(__name__)


def _get_html(url: str) -> str:
    """When2meet 페이지의 HTML을 가져옵니다."""
    response = requests.get(url, headers=REQUEST_HEADERS, timeout=REQUEST_TIMEOUT_SECONDS)
    response.raise_for_status()
    return response.text


def _parse_people(html: str) -> dict[int, str]:
    """
    참가자 정보를 추출합니다.
    Returns: {id: name} 형태의 딕셔너리 (페이지에 나온 순서)
    """
    pattern = r"PeopleNames\[(\d+)\]\s*=\s*'([^']+)';\s*PeopleIDs\[\1\]\s*=\s*(\d+);"
    return {int(pid): name for _, name, pid in re.findall(pattern, html)}


def _parse_time_slots(html: str) -> dict[int, int]:
    """
    타임슬롯 정보를 추출합니다.
    Returns: {slot_index: unix_timestamp} 형태의 딕셔너리
    """
    pattern = r"TimeOfSlot\[(\d+)\]=(\d+);"
    return {int(idx): int(timestamp) for idx, timestamp in re.findall(pattern, html)}


def _parse_availability(html: str) -> dict[int, list[int]]:
    """
    가용성 정보를 추출합니다.
    Returns: {slot_index: [person_id, ...]} 형태의 딕셔너리
    """
    pattern = r"AvailableAtSlot\[(\d+)\]\.push\((\d+)\);"

    availability: dict[int, list[int]] = {}
    for slot_idx, person_id in re.findall(pattern, html):
        availability.setdefault(int(slot_idx), []).append(int(person_id))

    return availability


def _parse_event_name(html: str) -> str:
    """이벤트 이름을 추출합니다."""
    pattern = r"<title>(.+?)\s*-\s*When2meet</title>"
    match = re.search(pattern, html)
    return match.group(1) if match else "Unknown Event"


def parse_when2meet_html(html: str) -> LoadedEvent:
    """HTML 문자열에서 이벤트 이름과 레코드를 추출합니다."""
    people = _parse_people(html)  # {id: name}
    time_slots = _parse_time_slots(html)  # {slot_idx: timestamp}
    raw_availability = _parse_availability(html)  # {slot_idx: [person_ids]}

    # 정규화: slot_idx → datetime, person_id → name
    records = []
    for slot_idx, timestamp in sorted(time_slots.items(), key=lambda x: x[1]):
        slot_start = datetime.fromtimestamp(timestamp)
        for pid in raw_availability.get(slot_idx, []):
            if pid in people:
                records.append(AvailabilityRecord(person=people[pid], slot_start=slot_start))

    return {
        "source": "when2meet",
        "name": _parse_event_name(html),
        "slot_minutes": WHEN2MEET_SLOT_MINUTES,
        "records": records,
    }


def get_when2meet_data(url: str) -> LoadedEvent:
    """
    When2meet URL에서 데이터를 추출하고 정규화된 형태로 반환합니다.

    Args:
        url: When2meet 이벤트 URL

    Returns:
        LoadedEvent
    """
    event = parse_when2meet_html(_get_html(url))
    logger.info("When2meet '%s': 레코드 %d개", event["name"], len(event["records"]))
    return event
