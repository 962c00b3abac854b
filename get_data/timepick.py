"""
Timepick 데이터 추출 모듈
"""

import logging
from datetime import datetime, timedelta

import requests

from config import REQUEST_TIMEOUT_SECONDS, TIMEPICK_SLOT_MINUTES
from schemas import AvailabilityRecord, LoadedEvent

logger = logging.getLogger(__name__)


def _get_api_url(url: str) -> str:
    """Timepick 링크에서 API URL 추출"""
    schedule_id = url.strip("/").split("/")[-1]
    return f"https://backend.timepick.net/api/event/{schedule_id}/"


def _fetch_data(api_url: str) -> dict:
    """API에서 JSON 데이터 가져오기"""
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json"
    }
    response = requests.get(api_url, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS)
    response.raise_for_status()
    return response.json()


def _parse_dates(dates_str: str) -> list[str]:
    """쉼표로 구분된 날짜 문자열을 리스트로 변환합니다."""
    return [d.strip() for d in dates_str.split(",") if d.strip()]


def _generate_slots(
    dates: list[str],
    start_hour: int,
    end_hour: int,
    slot_minutes: int = TIMEPICK_SLOT_MINUTES,
) -> list[datetime]:
    """
    날짜와 시간 범위로 모든 타임슬롯을 생성합니다.

    Args:
        dates: ["2025-12-18", "2025-12-19", ...]
        start_hour: 시작 시간
        end_hour: 종료 시간 (0이면 자정)
        slot_minutes: 슬롯 간격 (분)
    """
    if end_hour == 0:
        end_hour = 24

    slots = []
    for date_str in dates:
        day = datetime.strptime(date_str, "%Y-%m-%d")

        current_time = day.replace(hour=start_hour, minute=0)
        end_time = day + timedelta(hours=end_hour)

        while current_time < end_time:
            slots.append(current_time)
            current_time += timedelta(minutes=slot_minutes)

    return slots


def _parse_availability(
    group_availability: dict[str, str],
    slots: list[datetime]
) -> list[AvailabilityRecord]:
    """
    availability 문자열을 레코드로 변환

    Args:
        group_availability: {"이름": "111100001111...", ...}
        slots: [datetime, datetime, ...]

    Returns:
        [AvailabilityRecord, ...] (사람 순서, 그 안에서 시간 순서)
    """
    records = []
    for name, avail_str in group_availability.items():
        for slot, bit in zip(slots, avail_str):
            if bit == "1":
                records.append(AvailabilityRecord(person=name, slot_start=slot))

    return records


def parse_timepick_payload(raw_data: dict) -> LoadedEvent:
    """API 응답 JSON을 LoadedEvent로 변환합니다."""
    try:
        dates = _parse_dates(raw_data["dates"])
        slots = _generate_slots(dates, raw_data["startTime"], raw_data["endTime"])
        group_availability = raw_data["groupAvailability"]
    except KeyError as exc:
        raise ValueError(f"Timepick 응답에 {exc} 항목이 없습니다.") from exc

    return {
        "source": "timepick",
        "name": raw_data.get("name", "Unknown Event"),
        "slot_minutes": TIMEPICK_SLOT_MINUTES,
        "records": _parse_availability(group_availability, slots),
    }


def get_timepick_data(url: str) -> LoadedEvent:
    """
    Timepick URL에서 데이터를 추출하고 정규화된 형태로 반환합니다.

    Args:
        url: Timepick 이벤트 URL 또는 API URL

    Returns:
        LoadedEvent
    """
    # URL 형식 처리
    if "backend.timepick.net" in url:
        api_url = url
    else:
        api_url = _get_api_url(url)

    event = parse_timepick_payload(_fetch_data(api_url))
    logger.info("Timepick '%s': 레코드 %d개", event["name"], len(event["records"]))
    return event
