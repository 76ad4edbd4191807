"""Text processing utilities."""

from __future__ import annotations

import re


# 模型常把 SRT 包在 ```srt ... ``` 里返回
CODE_FENCE_OPEN = re.compile(r'^```[\w-]*[ \t]*\n?')
CODE_FENCE_CLOSE = re.compile(r'\n?```\s*$')


def normalize_newlines(text: str) -> str:
    """Convert Windows and old Mac line endings to ``\\n``."""
    return text.replace('\r\n', '\n').replace('\r', '\n')


def strip_code_fences(text: str) -> str:
    """
    Remove a Markdown code fence wrapped around a model reply.

    Only a fence that opens the reply is removed; inline backticks
    are left untouched.

    Args:
        text: Raw reply text

    Returns:
        Reply without the surrounding fence
    """
    if not text or not isinstance(text, str):
        return ""

    clean = text.strip()
    if not clean.startswith("```"):
        return clean

    clean = CODE_FENCE_OPEN.sub('', clean, count=1)
    clean = CODE_FENCE_CLOSE.sub('', clean, count=1)
    return clean.strip()


def truncate_text(text: str, max_length: int, suffix: str = "...") -> str:
    """
    Truncate text to maximum length with suffix.

    Args:
        text: Text to truncate
        max_length: Maximum length including suffix
        suffix: Suffix to append if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix
