from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from src.errors import InvalidModeError


MIN_PROBLEM_COUNT = 1
MAX_PROBLEM_COUNT = 10


class GenerationMode(str, Enum):
    ORIGINAL = "original"
    SIMILAR = "similar"
    ADVANCED = "advanced"


class FileType(str, Enum):
    IMAGE = "image"
    PDF = "pdf"


def parse_mode(value: Union[str, GenerationMode]) -> GenerationMode:
    if isinstance(value, GenerationMode):
        return value
    try:
        return GenerationMode(str(value).strip().lower())
    except ValueError as exc:
        raise InvalidModeError(f"Unknown generation mode: {value!r}") from exc


def clamp_count(count: Any) -> int:
    try:
        n = int(count)
    except OverflowError:
        # +/- infinity
        n = MAX_PROBLEM_COUNT if count > 0 else MIN_PROBLEM_COUNT
    except (TypeError, ValueError):
        n = MIN_PROBLEM_COUNT
    return max(MIN_PROBLEM_COUNT, min(MAX_PROBLEM_COUNT, n))


class MediaPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    mime_type: str
    base64_data: str
    filename: Optional[str] = None

    @property
    def file_type(self) -> FileType:
        return FileType.PDF if self.mime_type == "application/pdf" else FileType.IMAGE

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: GenerationMode
    problem_count: int = MIN_PROBLEM_COUNT
    custom_instruction: str = ""
    media: MediaPayload

    @model_validator(mode="before")
    @classmethod
    def _normalize_count(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        mode = data.get("mode")
        if mode is not None:
            mode = parse_mode(mode)
            data["mode"] = mode

        if mode == GenerationMode.ORIGINAL:
            data["problem_count"] = 1
        else:
            data["problem_count"] = clamp_count(data.get("problem_count", MIN_PROBLEM_COUNT))

        data["custom_instruction"] = data.get("custom_instruction") or ""
        return data


class PromptPayload(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_instruction: str
    user_prompt: str


class GenerationResult(BaseModel):
    text: str = ""
    error: Optional[str] = None
    is_fallback: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class RenderBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["markdown", "latex"]
    content: str
