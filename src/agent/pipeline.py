from __future__ import annotations

from typing import Optional, Union

from src.agent.prompts import build_prompt
from src.config.settings import Settings
from src.errors import (
    AI_SERVICE_ERROR_MESSAGE,
    EMPTY_RESULT_MESSAGE,
    MathTutorError,
)
from src.llm.base import VisionModel
from src.llm.factory import get_vision_model
from src.media.files import encode_media, guess_mime_type
from src.schemas import GenerationMode, GenerationRequest, GenerationResult, MediaPayload, parse_mode
from src.utils.logger import get_logger


logger = get_logger(__name__)


def prepare_media(
    data: bytes,
    mime_type: Optional[str] = None,
    filename: Optional[str] = None,
    cfg: Optional[Settings] = None,
) -> MediaPayload:
    cfg = cfg or Settings.load()

    mime = mime_type or (guess_mime_type(filename) if filename else None)
    return encode_media(data, mime, filename=filename, max_bytes=cfg.max_upload_bytes)


def make_request(
    mode: Union[str, GenerationMode],
    problem_count: int,
    media: MediaPayload,
    custom_instruction: Optional[str] = "",
) -> GenerationRequest:
    return GenerationRequest(
        mode=parse_mode(mode),
        problem_count=problem_count,
        custom_instruction=custom_instruction or "",
        media=media,
    )


def generate(
    request: GenerationRequest,
    *,
    model: Optional[VisionModel] = None,
    cfg: Optional[Settings] = None,
) -> GenerationResult:
    """Run one generation. Never raises; failures come back as `result.error`."""
    cfg = cfg or Settings.load()

    payload = build_prompt(
        request.mode,
        request.problem_count,
        request.custom_instruction,
    )

    logger.info(
        "Generating | mode=%s | count=%d | mime=%s | override=%s",
        request.mode.value,
        request.problem_count,
        request.media.mime_type,
        bool(request.custom_instruction.strip()),
    )

    try:
        llm = model or get_vision_model(cfg)
        text = llm.generate(request.media, payload, temperature=cfg.temperature)
    except Exception:
        logger.exception("AI service call failed")
        return GenerationResult(error=AI_SERVICE_ERROR_MESSAGE)

    if not text or not text.strip():
        logger.warning("AI service returned an empty result")
        return GenerationResult(text=EMPTY_RESULT_MESSAGE, is_fallback=True)

    return GenerationResult(text=text)


def solve(
    data: bytes,
    mode: Union[str, GenerationMode],
    *,
    problem_count: int = 1,
    custom_instruction: Optional[str] = "",
    mime_type: Optional[str] = None,
    filename: Optional[str] = None,
    model: Optional[VisionModel] = None,
    cfg: Optional[Settings] = None,
) -> GenerationResult:
    cfg = cfg or Settings.load()

    try:
        media = prepare_media(data, mime_type, filename, cfg)
        request = make_request(mode, problem_count, media, custom_instruction)
    except MathTutorError as exc:
        logger.warning("Request rejected before AI call: %s", exc)
        return GenerationResult(error=exc.user_message)

    return generate(request, model=model, cfg=cfg)
