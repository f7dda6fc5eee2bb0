from __future__ import annotations

from typing import Optional

from src.config.settings import Settings
from src.errors import AIServiceError
from src.llm.base import VisionModel


def get_vision_model(cfg: Optional[Settings] = None) -> VisionModel:
    cfg = cfg or Settings.load()

    if cfg.llm_provider == "gemini":
        from src.llm.gemini_client import GeminiClient

        return GeminiClient(cfg)

    if cfg.llm_provider == "openai":
        from src.llm.openai_client import OpenAIClient

        return OpenAIClient(cfg)

    raise AIServiceError(f"Unknown LLM provider: {cfg.llm_provider!r}")
