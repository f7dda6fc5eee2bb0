from __future__ import annotations

from typing import Protocol

from src.schemas import MediaPayload, PromptPayload


class VisionModel(Protocol):
    def generate(
        self,
        media: MediaPayload,
        payload: PromptPayload,
        *,
        temperature: float,
    ) -> str: ...
