"""Gemini client for multimodal problem generation."""

from __future__ import annotations

from typing import Optional

from google import genai
from google.genai import types

from src.config.settings import Settings
from src.errors import AIServiceError
from src.media.files import decode_media
from src.schemas import MediaPayload, PromptPayload


class GeminiClient:
    def __init__(self, cfg: Optional[Settings] = None) -> None:
        self.cfg = cfg or Settings.load()
        if not self.cfg.gemini_api_key:
            raise AIServiceError("GEMINI_API_KEY is not set")
        self.client = genai.Client(api_key=self.cfg.gemini_api_key)
        self.model = self.cfg.gemini_model

    def generate(
        self,
        media: MediaPayload,
        payload: PromptPayload,
        *,
        temperature: float,
    ) -> str:
        # Media part first, then the instruction text
        contents = [
            types.Part.from_bytes(data=decode_media(media), mime_type=media.mime_type),
            payload.user_prompt,
        ]
        response = self.client.models.generate_content(
            model=self.model,
            contents=contents,
            config=types.GenerateContentConfig(
                system_instruction=payload.system_instruction,
                temperature=temperature,
            ),
        )
        return response.text or ""
