from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


Provider = Literal["openai", "gemini"]


class ModelsCfg(BaseModel):
    provider: Provider = "openai"
    openai_model: str = "gpt-4.1-mini"
    gemini_model: str = "gemini-2.5-flash"


class GenerationCfg(BaseModel):
    temperature: float = 0.4


class MediaCfg(BaseModel):
    max_upload_mb: int = 10
    pdf_preview_zoom: float = 1.5


class YamlCfg(BaseModel):
    models: ModelsCfg = Field(default_factory=ModelsCfg)
    generation: GenerationCfg = Field(default_factory=GenerationCfg)
    media: MediaCfg = Field(default_factory=MediaCfg)
    log_level: str = "INFO"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    llm_provider: Provider = "openai"
    openai_model: str = "gpt-4.1-mini"
    gemini_model: str = "gemini-2.5-flash"

    temperature: float = 0.4

    max_upload_mb: int = 10
    pdf_preview_zoom: float = 1.5

    log_level: str = "INFO"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def load(cls, config_path: Path | str = "config.yaml") -> "Settings":
        path = Path(config_path)

        if not path.exists():
            return cls()

        text = path.read_text(encoding="utf-8").strip()
        if not text:
            return cls()

        raw: dict[str, Any] = yaml.safe_load(text) or {}
        cfg = YamlCfg(**raw)

        return cls(
            llm_provider=cfg.models.provider,
            openai_model=cfg.models.openai_model,
            gemini_model=cfg.models.gemini_model,
            temperature=cfg.generation.temperature,
            max_upload_mb=cfg.media.max_upload_mb,
            pdf_preview_zoom=cfg.media.pdf_preview_zoom,
            log_level=cfg.log_level,
        )
