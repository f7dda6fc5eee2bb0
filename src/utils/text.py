from __future__ import annotations

import re
from typing import Iterable


_CRLF_RE = re.compile(r"\r\n?")


def normalize_newlines(text: str) -> str:
    if not text:
        return ""
    return _CRLF_RE.sub("\n", text)


def join_nonempty(parts: Iterable[str], sep: str = "\n") -> str:
    items = [p.strip() for p in parts if p and p.strip()]
    return sep.join(items)
