"""
zcal 투표 결과 CSV 추출 모듈

CSV 형식: 첫 줄은 헤더, 이후 각 줄이 (이름, 이메일, 시간) 한 개
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import IO, Union

import pandas as pd

from config import SLOT_MINUTES
from schemas import AvailabilityRecord, LoadedEvent

logger = logging.getLogger(__name__)

COLUMNS = ["person", "contact", "time"]


def _read_frame(source: Union[str, Path, IO]) -> pd.DataFrame:
    """CSV를 읽어 앞의 세 열만 (이름, 연락처, 시간)으로 남깁니다."""
    frame = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    if frame.shape[1] < len(COLUMNS):
        raise ValueError(
            f"CSV에 열이 {frame.shape[1]}개뿐입니다. 이름, 이메일, 시간 세 열이 필요합니다."
        )
    frame = frame.iloc[:, : len(COLUMNS)].copy()
    frame.columns = COLUMNS
    for column in COLUMNS:
        frame[column] = frame[column].str.strip()
    return frame


def _parse_timestamp(value: str) -> datetime | None:
    """시간 문자열을 datetime으로 바꿉니다. 해석할 수 없으면 None."""
    if not value:
        return None
    try:
        parsed = pd.Timestamp(value)
    except (ValueError, TypeError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def parse_records(frame: pd.DataFrame) -> list[AvailabilityRecord]:
    """
    DataFrame 행을 AvailabilityRecord로 변환합니다.

    이름이 비었거나 시간을 해석할 수 없는 행은 버립니다.
    UTC 오프셋 유무가 첫 번째 정상 행과 다른 행도 버립니다 (서로 비교할 수 없음).
    """
    records = []
    dropped = 0
    mismatched = 0
    aware = None

    for row in frame.itertuples(index=False):
        slot_start = _parse_timestamp(row.time)
        if not row.person or slot_start is None:
            dropped += 1
            continue

        is_aware = slot_start.utcoffset() is not None
        if aware is None:
            aware = is_aware
        elif is_aware != aware:
            mismatched += 1
            continue

        records.append(AvailabilityRecord(person=row.person, slot_start=slot_start, contact=row.contact))

    if dropped:
        logger.warning("잘못된 행 %d개를 건너뛰었습니다", dropped)
    if mismatched:
        logger.warning("시간대 표기가 다른 행 %d개를 건너뛰었습니다", mismatched)
    return records


def load_zcal_csv(source: Union[str, Path, IO], name: str | None = None) -> LoadedEvent:
    """
    zcal CSV 파일에서 데이터를 추출합니다.

    Args:
        source: 파일 경로 또는 파일 객체 (업로드된 파일 포함)
        name: 이벤트 이름. 없으면 파일 이름을 씁니다.

    Returns:
        LoadedEvent
    """
    if name is None:
        filename = source if isinstance(source, (str, Path)) else getattr(source, "name", "zcal")
        name = Path(filename).stem

    records = parse_records(_read_frame(source))
    logger.info("zcal CSV '%s': 레코드 %d개", name, len(records))

    return {
        "source": "zcal",
        "name": name,
        "slot_minutes": SLOT_MINUTES,
        "records": records,
    }
