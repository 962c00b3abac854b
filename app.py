import io

import streamlit as st

from analyze import (
    build_index,
    build_overlap_matrix,
    filter_matrix_people,
    find_alternatives,
    find_common_availability,
    find_who_blocks,
)
from config import CACHE_TTL_SECONDS, configure_logging
from formatting import (
    count_frame,
    format_block,
    format_date_heading,
    generate_text_output,
    matrix_to_frame,
    person_color,
    person_initials,
)
from get_data.timepick import get_timepick_data
from get_data.when2meet import get_when2meet_data
from get_data.zcal import load_zcal_csv

configure_logging()
st.set_page_config(page_title="가능한 시간 찾기", page_icon="📅", layout="wide")


# =============================================================================
# 캐싱된 데이터 로드 함수 (같은 URL/파일은 캐시 사용)
# =============================================================================
@st.cache_data(show_spinner=False, ttl=CACHE_TTL_SECONDS)
def load_when2meet(url: str):
    return get_when2meet_data(url)


@st.cache_data(show_spinner=False, ttl=CACHE_TTL_SECONDS)
def load_timepick(url: str):
    return get_timepick_data(url)


@st.cache_data(show_spinner=False, ttl=CACHE_TTL_SECONDS)
def load_csv(content: bytes, filename: str):
    return load_zcal_csv(io.BytesIO(content), name=filename.rsplit(".", 1)[0])


def detect_source(url: str) -> str | None:
    """URL에서 플랫폼을 자동 감지합니다."""
    if not url:
        return None
    if "when2meet.com" in url:
        return "when2meet"
    if "timepick.net" in url:
        return "timepick"
    return None


def show_blocks(blocks) -> None:
    for day, day_blocks in blocks.items():
        with st.expander(f"📅 {format_date_heading(day)}", expanded=True):
            for block in day_blocks:
                st.write(f"  🕐 {format_block(block)}")


st.title("📅 가능한 시간 찾기")

# =============================================================================
# 상단: 데이터 불러오기
# =============================================================================
if "event" not in st.session_state:
    st.session_state.event = None

if "uploader_key" not in st.session_state:
    st.session_state.uploader_key = 0

if "loaded_file_id" not in st.session_state:
    st.session_state.loaded_file_id = None

tab_csv, tab_url = st.tabs(["📄 zcal CSV", "🔗 when2meet / timepick"])

with tab_csv:
    uploaded = st.file_uploader(
        "zcal 투표 결과 CSV", type=["csv"], key=f"uploader_{st.session_state.uploader_key}"
    )
    # 새 파일이 올라왔을 때만 읽는다 (다른 위젯을 건드려도 다시 덮어쓰지 않음)
    if uploaded is not None and uploaded.file_id != st.session_state.loaded_file_id:
        st.session_state.loaded_file_id = uploaded.file_id
        try:
            st.session_state.event = load_csv(uploaded.getvalue(), uploaded.name)
        except ValueError as e:
            st.error(f"❌ CSV 오류: {e}")

with tab_url:
    col1, col2 = st.columns([4, 1])
    with col1:
        url = st.text_input(
            "🔗 일정 링크",
            placeholder="when2meet 또는 timepick 링크를 붙여넣으세요",
            label_visibility="collapsed",
        )
    with col2:
        load_button = st.button("불러오기", type="primary", use_container_width=True)

    if load_button and url:
        source = detect_source(url)
        if source is None:
            st.error("❌ 올바른 when2meet 또는 timepick 링크를 입력해주세요!")
        else:
            with st.spinner("데이터 불러오는 중..."):
                try:
                    if source == "when2meet":
                        st.session_state.event = load_when2meet(url)
                    else:
                        st.session_state.event = load_timepick(url)
                    st.success(f"✅ '{st.session_state.event['name']}' 로드 완료!")
                except Exception as e:
                    st.error(f"❌ 오류: {e}")

if st.button("🗑️ 데이터 지우기", disabled=st.session_state.event is None, key="clear"):
    st.session_state.event = None
    st.session_state.loaded_file_id = None
    st.session_state.uploader_key += 1  # 업로더 초기화
    st.rerun()

# =============================================================================
# 메인 UI
# =============================================================================
event = st.session_state.event

if event is None:
    st.info("CSV 파일을 올리거나 when2meet / timepick 링크를 붙여넣어 주세요~")
    st.stop()

index = build_index(event["records"], event["slot_minutes"])
roster = index["roster"]

if not roster:
    st.warning("가능한 시간이 입력된 사람이 없습니다.")
    st.stop()

st.caption(f"**{event['name']}** · {len(roster)}명 · {event['slot_minutes']}분 단위")

# -----------------------------------------------------------------------------
# 전체 인원 겹침 표
# -----------------------------------------------------------------------------
st.divider()
st.subheader("🗓️ 전체 가능 인원")

visible = st.multiselect("표에 표시할 사람", options=roster, default=roster, key="visible")
matrix = filter_matrix_people(build_overlap_matrix(index), visible)

view = st.radio("보기", ["이니셜", "인원 수"], horizontal=True, label_visibility="collapsed")
if view == "이니셜":
    st.dataframe(matrix_to_frame(matrix, index["slot_minutes"]), use_container_width=True)
else:
    st.dataframe(count_frame(matrix, index["slot_minutes"]), use_container_width=True)

legend = " ".join(
    f"<span style='background:{person_color(roster, p)};padding:2px 6px;border-radius:4px'>"
    f"{person_initials(p)}</span> {p}"
    for p in roster
)
st.markdown(legend, unsafe_allow_html=True)

contacts = {p: c for p, c in index["contacts"].items() if c}
if contacts:
    with st.expander("✉️ 연락처"):
        for person, contact in contacts.items():
            st.code(f"{person} <{contact}>", language=None)

# -----------------------------------------------------------------------------
# 선택 인원 공통 시간
# -----------------------------------------------------------------------------
st.divider()
st.subheader("👥 공통 가능 시간")

col1, col2 = st.columns([3, 1])
with col1:
    selected = st.multiselect("참여 인원 선택", options=roster, default=roster, key="selected")
with col2:
    merge = st.checkbox("연속 슬롯 합치기", value=True)
    min_duration = st.number_input(
        "최소 길이 (분)", min_value=0, step=index["slot_minutes"], value=0
    )

result = find_common_availability(index, selected, merge=merge, min_duration_minutes=int(min_duration))

if result.status == "no_selection":
    st.info("한 명 이상 선택하면 가능한 시간을 보여드려요.")
elif result.status == "no_overlap":
    st.warning("😢 전원 가능한 시간이 없습니다!")

    st.subheader("🚫 안 되는 사람")
    blockers = find_who_blocks(index, result.selected)
    if blockers:
        for name, count in blockers.items():
            st.write(f"- **{name}**: 제외 시 +{count}개 슬롯 확보")
    else:
        st.write("분석 불가")

    st.subheader("💡 대안 (1명 제외 시)")
    alternatives = find_alternatives(index, result.selected, max_missing=1, merge=merge)
    for missing, blocks in alternatives.items():
        with st.expander(f"📌 {', '.join(missing)} 제외"):
            for day, day_blocks in blocks.items():
                st.write(f"**{format_date_heading(day)}**")
                for block in day_blocks:
                    st.write(f"  🕐 {format_block(block)}")
elif not result.blocks:
    st.warning(f"최소 {int(min_duration)}분 이상 이어지는 공통 시간이 없습니다.")
else:
    st.success(f"✅ {len(result.selected)}명 전원 가능한 슬롯 {result.slot_count}개")
    show_blocks(result.blocks)

    if st.button("📝 결과 텍스트로 보기", use_container_width=True):
        text_output = generate_text_output(event["name"], list(result.selected), result.blocks)
        st.code(text_output, language=None)
