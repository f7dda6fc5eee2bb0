from __future__ import annotations

from typing import Any, Dict, List, Optional

from openai import OpenAI

from src.config.settings import Settings
from src.errors import AIServiceError
from src.schemas import FileType, MediaPayload, PromptPayload


def _media_part(media: MediaPayload) -> Dict[str, Any]:
    if media.file_type == FileType.PDF:
        return {
            "type": "file",
            "file": {
                "filename": media.filename or "problem.pdf",
                "file_data": media.data_url,
            },
        }
    return {"type": "image_url", "image_url": {"url": media.data_url}}


class OpenAIClient:
    """Thin wrapper around the OpenAI chat API with image/PDF input."""

    def __init__(self, cfg: Optional[Settings] = None) -> None:
        self.cfg = cfg or Settings.load()
        if not self.cfg.openai_api_key:
            raise AIServiceError("OPENAI_API_KEY is not set")
        self.client = OpenAI(api_key=self.cfg.openai_api_key)

    def generate(
        self,
        media: MediaPayload,
        payload: PromptPayload,
        *,
        temperature: float,
    ) -> str:
        """Single-turn multimodal completion."""
        content: List[Dict[str, Any]] = [
            _media_part(media),
            {"type": "text", "text": payload.user_prompt},
        ]
        resp = self.client.chat.completions.create(
            model=self.cfg.openai_model,
            temperature=temperature,
            messages=[
                {"role": "system", "content": payload.system_instruction},
                {"role": "user", "content": content},
            ],
        )
        return resp.choices[0].message.content or ""
