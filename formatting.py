"""화면/텍스트 출력용 포맷 함수 모음."""

from datetime import date, datetime, time, timedelta

import pandas as pd

from config import PERSON_COLORS, SLOT_MINUTES
from schemas import OverlapMatrix, TimeBlock

WEEKDAYS = ["월", "화", "수", "목", "금", "토", "일"]


def format_duration(duration: timedelta) -> str:
    """timedelta를 "2시간 30분" 형태로 바꿉니다."""
    total_minutes = int(duration.total_seconds()) // 60
    hours, minutes = divmod(total_minutes, 60)

    duration_str = ""
    if hours > 0:
        duration_str += f"{hours}시간"
    if minutes > 0:
        duration_str += f" {minutes}분" if hours > 0 else f"{minutes}분"

    return duration_str.strip() or "0분"


def format_time_range(start: datetime, end: datetime) -> str:
    """시간 범위를 보기 좋게 포맷팅합니다."""
    return f"{start.strftime('%H:%M')} ~ {end.strftime('%H:%M')} ({format_duration(end - start)})"


def format_block(block: TimeBlock) -> str:
    return format_time_range(block.start, block.end)


def format_date_heading(day: date) -> str:
    """예: 2025-01-05 (일)"""
    return f"{day.isoformat()} ({WEEKDAYS[day.weekday()]})"


def format_calendar_date(day: date) -> str:
    """표 머리글용 짧은 날짜. 예: 1/5 (일)"""
    return f"{day.month}/{day.day} ({WEEKDAYS[day.weekday()]})"


def format_time_row(t: time, slot_minutes: int = SLOT_MINUTES) -> str:
    """표 행 머리글. 예: 09:00 ~ 09:30"""
    start = datetime.combine(date.min, t)
    end = start + timedelta(minutes=slot_minutes)
    return f"{start.strftime('%H:%M')} ~ {end.strftime('%H:%M')}"


def person_initials(name: str) -> str:
    """이름의 단어별 첫 글자를 최대 두 개까지 대문자로."""
    return "".join(word[0] for word in name.split()).upper()[:2]


def person_color(roster: list[str], person: str) -> str:
    """명단 순서에 따라 색을 고릅니다. 색이 모자라면 처음부터 다시 씁니다."""
    return PERSON_COLORS[roster.index(person) % len(PERSON_COLORS)]


def matrix_to_frame(matrix: OverlapMatrix, slot_minutes: int = SLOT_MINUTES) -> pd.DataFrame:
    """
    겹침 표를 DataFrame으로 변환합니다.

    행은 시각, 열은 날짜이고 칸에는 가능한 사람들의 이니셜이 들어갑니다.
    """
    data = {
        format_calendar_date(d): [
            " ".join(person_initials(p) for p in matrix.cells[d][t].people) or "—"
            for t in matrix.times
        ]
        for d in matrix.dates
    }
    index = [format_time_row(t, slot_minutes) for t in matrix.times]
    return pd.DataFrame(data, index=index)


def count_frame(matrix: OverlapMatrix, slot_minutes: int = SLOT_MINUTES) -> pd.DataFrame:
    """칸마다 가능한 인원 수만 담은 DataFrame (히트맵용)."""
    data = {
        format_calendar_date(d): [matrix.cells[d][t].count for t in matrix.times]
        for d in matrix.dates
    }
    index = [format_time_row(t, slot_minutes) for t in matrix.times]
    return pd.DataFrame(data, index=index)


def generate_text_output(event_name: str, participants: list[str], blocks: dict[date, list[TimeBlock]]) -> str:
    """선택 결과를 복사하기 좋은 텍스트로 변환합니다."""
    lines = []
    lines.append(f"📅 {event_name} 가능한 시간")
    lines.append("=" * 40)
    lines.append(f"참여: {', '.join(participants)}")
    lines.append("")

    for day, day_blocks in blocks.items():
        lines.append(format_date_heading(day))
        for block in day_blocks:
            lines.append(f"   {format_block(block)}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
