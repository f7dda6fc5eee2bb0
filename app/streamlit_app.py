from __future__ import annotations

from pathlib import Path
import sys
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

import streamlit as st

from src.agent.pipeline import generate, make_request, prepare_media
from src.config.settings import Settings
from src.errors import MathTutorError
from src.media.files import decode_media, render_pdf_preview
from src.render.markdown_math import render
from src.schemas import (
    MAX_PROBLEM_COUNT,
    FileType,
    GenerationMode,
    GenerationResult,
    MediaPayload,
    RenderBlock,
)
from src.ui.session import clear_file, init_state, sync_upload
from src.utils.logger import get_logger


# UI styling

_PAGE_CSS = """
<style>
div[data-testid="stButton"] > button[kind="primary"] {
  background: #059669 !important;
  border: 1px solid #059669 !important;
  color: #ffffff !important;
  font-weight: 700;
}
div[data-testid="stButton"] > button[kind="primary"]:hover {
  background: #047857 !important;
  border: 1px solid #047857 !important;
}

/* Result panel: consistent paragraph spacing */
.stMarkdown p {
  margin-bottom: 1rem;
  line-height: 1.65;
}

.mt-card {
  border-radius: 14px;
  padding: 14px 18px;
  background: #312e81;
  color: #e0e7ff;
}
.mt-card h4 {
  color: #ffffff;
  margin: 0 0 0.4rem 0;
}
</style>
"""

_ZOOM_MIN = 0.5
_ZOOM_MAX = 3.0
_ZOOM_STEP = 0.25
_PREVIEW_BASE_WIDTH = 480


def _load_cfg() -> Settings:
    return Settings.load(PROJECT_ROOT / "config.yaml")


def _clamp_zoom(level: float) -> float:
    return max(_ZOOM_MIN, min(_ZOOM_MAX, level))


@st.cache_data(show_spinner=False)
def _pdf_preview(data: bytes, zoom: float) -> bytes:
    return render_pdf_preview(data, zoom=zoom)


def _on_upload(uploaded, cfg: Settings) -> None:
    sig = (uploaded.name, uploaded.size) if uploaded is not None else None
    if not sync_upload(st.session_state, sig):
        return

    try:
        st.session_state.media = prepare_media(
            uploaded.getvalue(),
            mime_type=uploaded.type,
            filename=uploaded.name,
            cfg=cfg,
        )
    except MathTutorError as exc:
        logger.warning("Upload rejected: %s", exc)
        st.session_state.error = exc.user_message


def _run_generation(mode: GenerationMode, count: int, custom: str, cfg: Settings) -> None:
    media: Optional[MediaPayload] = st.session_state.media
    if media is None:
        return

    st.session_state.error = None

    try:
        request = make_request(mode, count, media, custom)
    except MathTutorError as exc:
        st.session_state.error = exc.user_message
        return

    with st.spinner("AI đang phân tích và giải toán..."):
        result = generate(request, cfg=cfg)

    if result.ok:
        st.session_state.result = result
    else:
        st.session_state.result = None
        st.session_state.error = result.error


# Math rendering

def render_answer(blocks: List[RenderBlock]) -> None:
    for block in blocks:
        if block.kind == "latex":
            st.latex(block.content)
        else:
            st.markdown(block.content)


def _show_preview(media: MediaPayload, cfg: Settings) -> None:
    zoom = st.session_state.zoom

    tools = st.columns([1, 1, 1, 2, 2])
    with tools[0]:
        if st.button("➖", help="Thu nhỏ", use_container_width=True):
            st.session_state.zoom = _clamp_zoom(zoom - _ZOOM_STEP)
            st.rerun()
    with tools[1]:
        if st.button("➕", help="Phóng to", use_container_width=True):
            st.session_state.zoom = _clamp_zoom(zoom + _ZOOM_STEP)
            st.rerun()
    with tools[2]:
        if st.button("↺", help="Đặt lại kích thước", use_container_width=True):
            st.session_state.zoom = 1.0
            st.rerun()
    with tools[3]:
        st.caption(f"{round(zoom * 100)}%")
    with tools[4]:
        if st.button("🗑️ Xóa file", use_container_width=True):
            clear_file(st.session_state)
            st.rerun()

    width = int(_PREVIEW_BASE_WIDTH * zoom)

    try:
        raw = decode_media(media)
        if media.file_type == FileType.PDF:
            st.image(_pdf_preview(raw, cfg.pdf_preview_zoom), width=width, caption=media.filename)
        else:
            st.image(raw, width=width, caption=media.filename)
    except MathTutorError as exc:
        logger.warning("Preview failed: %s", exc)
        st.info(f"📄 {media.filename or 'PDF'}")


init_state(st.session_state)
cfg = _load_cfg()
logger = get_logger("math_tutor.app", cfg.log_level)

st.set_page_config(
    page_title="Bồi dưỡng học sinh giỏi toán",
    page_icon="🧮",
    layout="wide",
)

st.markdown(_PAGE_CSS, unsafe_allow_html=True)

st.markdown(
    """
    <h1 style="text-align: center; margin-bottom: 0.2em;">Bồi dưỡng học sinh giỏi toán</h1>
    <p style="text-align: center; color: #666; font-size: 1.05em;">
      Tải lên bài toán của bạn, AI sẽ hỗ trợ giải chi tiết hoặc tạo đề luyện tập.
    </p>
    """,
    unsafe_allow_html=True,
)

left, right = st.columns(2, gap="large")

with left:
    st.subheader("Upload Bài Toán")

    uploaded = st.file_uploader(
        f"PNG, JPG, PDF (Max {cfg.max_upload_mb}MB)",
        type=["png", "jpg", "jpeg", "pdf"],
        key=f"uploader_{st.session_state.uploader_key}",
    )
    _on_upload(uploaded, cfg)

    media: Optional[MediaPayload] = st.session_state.media
    if media is not None:
        _show_preview(media, cfg)

    if st.session_state.error:
        st.error(f"⚠️ {st.session_state.error}")

    custom = st.text_area(
        "Yêu cầu bổ sung (Prompt):",
        placeholder="Ví dụ: Chỉ viết đáp án, không cần lời giải chi tiết. Hoặc: Giải bằng cách lập phương trình...",
        height=90,
    )

    count = st.number_input(
        f"Số lượng bài (Max {MAX_PROBLEM_COUNT}):",
        min_value=1,
        max_value=MAX_PROBLEM_COUNT,
        value=1,
        step=1,
    )

    disabled = media is None

    if st.button("📖 Giải Chi Tiết Bài Gốc", type="primary", disabled=disabled, use_container_width=True):
        _run_generation(GenerationMode.ORIGINAL, 1, custom, cfg)
        st.rerun()

    st.caption("Hoặc tạo đề luyện tập")

    col_a, col_b = st.columns(2)
    with col_a:
        if st.button("🔁 Tạo Bài Tương Tự", disabled=disabled, use_container_width=True):
            _run_generation(GenerationMode.SIMILAR, int(count), custom, cfg)
            st.rerun()
    with col_b:
        if st.button("⚡ Tạo Bài Nâng Cao", disabled=disabled, use_container_width=True):
            _run_generation(GenerationMode.ADVANCED, int(count), custom, cfg)
            st.rerun()

    st.write("")
    st.markdown(
        """
<div class="mt-card">
  <h4>Hướng dẫn</h4>
  <ol>
    <li>Tải lên ảnh hoặc PDF bài toán.</li>
    <li>Nhập yêu cầu cụ thể (nếu có) vào ô Prompt.</li>
    <li>Chọn chế độ giải hoặc tạo bài tập để bắt đầu.</li>
  </ol>
</div>
""",
        unsafe_allow_html=True,
    )

with right:
    st.subheader("Kết Quả")

    result: Optional[GenerationResult] = st.session_state.result
    if result is None:
        st.info("✨ Kết quả sẽ hiển thị ở đây")
    else:
        if result.is_fallback:
            st.warning(result.text)
        else:
            render_answer(render(result.text))

            st.divider()
            st.download_button(
                "📋 Copy sang Word (.md)",
                data=result.text.encode("utf-8"),
                file_name="ket_qua.md",
                mime="text/markdown",
            )
            with st.expander("Văn bản gốc để sao chép"):
                st.code(result.text, language="markdown")
