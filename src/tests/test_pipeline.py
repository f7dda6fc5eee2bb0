from typing import List

import pytest

from src.agent.pipeline import generate, make_request, prepare_media, solve
from src.agent.prompts import SYSTEM_INSTRUCTION
from src.config.settings import Settings
from src.errors import (
    AI_SERVICE_ERROR_MESSAGE,
    EMPTY_RESULT_MESSAGE,
    INVALID_MODE_MESSAGE,
    UNSUPPORTED_MEDIA_MESSAGE,
    InvalidModeError,
)
from src.schemas import MediaPayload, PromptPayload

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class FakeModel:
    def __init__(self, reply: str = "**Lời giải chi tiết**: $x = 2$") -> None:
        self.reply = reply
        self.calls: List[tuple] = []

    def generate(self, media: MediaPayload, payload: PromptPayload, *, temperature: float) -> str:
        self.calls.append((media, payload, temperature))
        return self.reply


class BrokenModel:
    def generate(self, media: MediaPayload, payload: PromptPayload, *, temperature: float) -> str:
        raise RuntimeError("401 invalid api key")


@pytest.fixture()
def cfg() -> Settings:
    return Settings(openai_api_key=None, gemini_api_key=None)


def test_generate_sends_prompt_media_and_temperature(cfg: Settings) -> None:
    model = FakeModel()
    media = prepare_media(PNG_BYTES, "image/png", "bai.png", cfg)
    request = make_request("similar", 3, media)

    result = generate(request, model=model, cfg=cfg)

    assert result.ok
    assert result.text == model.reply
    assert not result.is_fallback

    sent_media, payload, temperature = model.calls[0]
    assert sent_media == media
    assert payload.system_instruction == SYSTEM_INSTRUCTION
    assert "Tạo ra đúng 3 bài toán" in payload.user_prompt
    assert temperature == 0.4


def test_original_mode_ignores_count(cfg: Settings) -> None:
    model = FakeModel()
    media = prepare_media(PNG_BYTES, "image/png", cfg=cfg)

    generate(make_request("original", 6, media), model=model, cfg=cfg)

    assert "Tạo ra đúng" not in model.calls[0][1].user_prompt


def test_empty_reply_becomes_fallback(cfg: Settings) -> None:
    media = prepare_media(PNG_BYTES, "image/png", cfg=cfg)
    result = generate(make_request("similar", 1, media), model=FakeModel("  "), cfg=cfg)

    assert result.ok
    assert result.is_fallback
    assert result.text == EMPTY_RESULT_MESSAGE


def test_ai_failure_gives_one_generic_message(cfg: Settings) -> None:
    media = prepare_media(PNG_BYTES, "image/png", cfg=cfg)
    result = generate(make_request("advanced", 2, media), model=BrokenModel(), cfg=cfg)

    assert not result.ok
    assert result.error == AI_SERVICE_ERROR_MESSAGE
    assert result.text == ""


def test_missing_api_key_is_an_ai_error(cfg: Settings) -> None:
    media = prepare_media(PNG_BYTES, "image/png", cfg=cfg)
    result = generate(make_request("similar", 1, media), cfg=cfg)

    assert result.error == AI_SERVICE_ERROR_MESSAGE


def test_unsupported_file_never_reaches_model(cfg: Settings) -> None:
    model = FakeModel()
    result = solve(b"GIF89a", "similar", mime_type="image/gif", model=model, cfg=cfg)

    assert result.error == UNSUPPORTED_MEDIA_MESSAGE
    assert model.calls == []


def test_mime_inferred_from_filename(cfg: Settings) -> None:
    model = FakeModel()
    result = solve(PNG_BYTES, "original", filename="de_bai.png", model=model, cfg=cfg)

    assert result.ok
    assert model.calls[0][0].mime_type == "image/png"


def test_unknown_mode(cfg: Settings) -> None:
    model = FakeModel()
    media = prepare_media(PNG_BYTES, "image/png", cfg=cfg)

    with pytest.raises(InvalidModeError):
        make_request("harder", 2, media)

    result = solve(PNG_BYTES, "harder", mime_type="image/png", model=model, cfg=cfg)
    assert result.error == INVALID_MODE_MESSAGE
    assert model.calls == []
