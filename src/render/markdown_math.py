"""Split a model answer into markdown and display-math blocks.

Markdown blocks keep inline `$...$` math for Streamlit's KaTeX support;
`$$...$$` and `\\[...\\]` spans become separate LaTeX blocks. Malformed
delimiters are escaped so they show up as literal text instead of
swallowing the rest of the answer.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from src.schemas import RenderBlock
from src.utils.text import normalize_newlines


_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_BLOCK_DOLLAR_LINE = re.compile(r"^\s*\$\$([^$]+?)\$\$\s*$")
_BLOCK_SQUARE_LINE = re.compile(r"^\s*\\\[((?:(?!\\\]).)+?)\\\]\s*$")

_INLINE_TOKEN = re.compile(
    r"(?P<code>`[^`\n]*`)"
    r"|(?P<escaped>\\\$)"
    r"|(?P<display>\$\$[^$\n]+?\$\$)"
    r"|(?P<inline>\$(?!\s)[^$\n]+?(?<!\s)\$)"
    r"|(?P<lone>\$)"
)


def _escape_lone_dollars(line: str) -> str:
    def repl(m: re.Match) -> str:
        if m.group("lone") is not None:
            return r"\$"
        return m.group(0)

    return _INLINE_TOKEN.sub(repl, line)


def _escape_all_dollars(line: str) -> str:
    return re.sub(r"(?<!\\)\$", r"\\$", line)


def _single_line_math(line: str) -> Optional[str]:
    for pattern in (_BLOCK_DOLLAR_LINE, _BLOCK_SQUARE_LINE):
        m = pattern.match(line)
        if m and m.group(1).strip():
            return m.group(1).strip()
    return None


def _opening(line: str) -> Optional[Tuple[str, str]]:
    s = line.strip()
    if s.startswith("$$"):
        closer, head = "$$", s[2:]
    elif s.startswith("\\["):
        closer, head = "\\]", s[2:]
    else:
        return None

    # "$$x$$ and more" closes on the same line; leave it to inline handling
    if closer in head:
        return None
    return closer, head


def _collect_block(lines: List[str], start: int, closer: str, head: str) -> Tuple[Optional[str], int]:
    """Gather a multi-line math block; returns (latex, next_index) or (None, start) if unclosed."""
    body: List[str] = [head] if head.strip() else []

    for j in range(start + 1, len(lines)):
        s = lines[j].rstrip()
        if s.endswith(closer):
            tail = s[: -len(closer)]
            if tail.strip():
                body.append(tail)
            return "\n".join(body).strip(), j + 1
        body.append(lines[j])

    return None, start


def render(raw_text: Optional[str]) -> List[RenderBlock]:
    """Project raw model text into display blocks. Never raises."""
    lines = normalize_newlines(raw_text or "").split("\n")

    blocks: List[RenderBlock] = []
    buffer: List[str] = []

    def flush_buffer() -> None:
        text = "\n".join(buffer).strip("\n")
        if text.strip():
            blocks.append(RenderBlock(kind="markdown", content=text))
        buffer.clear()

    in_fence = False
    i = 0
    while i < len(lines):
        line = lines[i]

        if _FENCE_RE.match(line):
            in_fence = not in_fence
            buffer.append(line)
            i += 1
            continue

        if in_fence:
            buffer.append(line)
            i += 1
            continue

        latex = _single_line_math(line)
        if latex is not None:
            flush_buffer()
            blocks.append(RenderBlock(kind="latex", content=latex))
            i += 1
            continue

        opening = _opening(line)
        if opening is not None:
            closer, head = opening
            latex, next_i = _collect_block(lines, i, closer, head)
            if latex:
                flush_buffer()
                blocks.append(RenderBlock(kind="latex", content=latex))
                i = next_i
                continue
            if latex is None:
                # Unclosed display math: show the opening line literally
                buffer.append(_escape_all_dollars(line))
                i += 1
                continue
            # Empty "$$ $$" pair
            i = next_i
            continue

        buffer.append(_escape_lone_dollars(line))
        i += 1

    flush_buffer()
    return blocks
