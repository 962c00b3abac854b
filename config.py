"""공통 설정값. 알고리즘 코드를 건드리지 말고 여기서 값을 바꾸세요."""

from __future__ import annotations

import logging
import os

# ---------------------------------------------------------------------------
# 슬롯 설정
# ---------------------------------------------------------------------------
SLOT_MINUTES = 30  # zcal 투표 결과 기본 슬롯 길이
WHEN2MEET_SLOT_MINUTES = 15
TIMEPICK_SLOT_MINUTES = 15

# ---------------------------------------------------------------------------
# 데이터 로드
# ---------------------------------------------------------------------------
CACHE_TTL_SECONDS = 3600  # 같은 URL/파일은 1시간 캐시
REQUEST_TIMEOUT_SECONDS = 30
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
}

# ---------------------------------------------------------------------------
# 화면 표시
# ---------------------------------------------------------------------------
PERSON_COLORS = [  # 명단 순서대로 돌아가며 사용
    "#fee2e2",
    "#ffedd5",
    "#fef9c3",
    "#dcfce7",
    "#dbeafe",
    "#e0e7ff",
    "#f3e8ff",
    "#fce7f3",
]

# ---------------------------------------------------------------------------
# 로깅
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("AVAILABILITY_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """루트 로거를 설정합니다. 이미 핸들러가 있으면 레벨만 바꿉니다."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
    logging.getLogger().setLevel(level or LOG_LEVEL)
