"""SRT file parsing and saving utilities."""

from __future__ import annotations

import re
import logging
from pathlib import Path
from typing import List, Sequence, Optional, Union

from .models import SrtEntry
from .text_utils import normalize_newlines

logger = logging.getLogger(__name__)

# 一个或多个空行（允许只含空白字符的行）
BLOCK_SEPARATOR = re.compile(r"\n\s*\n")

MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB


def parse_srt(content: Optional[str]) -> List[SrtEntry]:
    """
    Parse SRT content into a list of SrtEntry objects.

    Blocks with fewer than three non-empty lines are dropped without error,
    so the result may be shorter than the number of blocks in the input.
    Label and timing lines are kept as opaque strings.

    Args:
        content: Raw SRT content as string

    Returns:
        List of parsed SrtEntry objects
    """
    if not content or not content.strip():
        return []

    content = normalize_newlines(content).lstrip('\ufeff').strip('\n')

    entries: List[SrtEntry] = []
    dropped = 0

    for block in BLOCK_SEPARATOR.split(content):
        # 序号和时间行原样保留，只去掉空行
        lines = [line for line in block.split('\n') if line.strip()]
        if len(lines) < 3:
            dropped += 1
            continue
        text = " ".join(line.strip() for line in lines[2:])
        entries.append(SrtEntry(lines[0], lines[1], text))

    if dropped:
        logger.debug(f"Skipped {dropped} malformed block(s)")

    return entries


def format_srt(entries: Sequence[SrtEntry]) -> str:
    """Serialize entries: three lines each, separated by a single blank line."""
    return "\n\n".join(e.to_srt() for e in entries)


def validate_srt_file(path: Path) -> Optional[str]:
    """
    Validate SRT file before processing.

    Args:
        path: Path to SRT file

    Returns:
        Error message if invalid, None if valid
    """
    if not path.exists():
        return f"File not found: {path}"

    if not path.is_file():
        return f"Not a file: {path}"

    suffix = path.suffix.lower()
    if suffix != '.srt':
        return f"Invalid file extension: {suffix} (expected .srt)"

    # 检查文件大小
    size = path.stat().st_size
    if size == 0:
        return "File is empty"
    if size > MAX_FILE_SIZE:
        return f"File too large: {size / 1024 / 1024:.1f}MB (max 50MB)"

    return None


def read_srt(path: Path) -> str:
    """Read an SRT file as text, tolerating a UTF-8 BOM."""
    return path.read_text(encoding="utf-8-sig")


def save_srt(entries: Union[Sequence[SrtEntry], str], path: Path) -> None:
    """
    Save entries (or already serialized SRT text) to a file.

    Args:
        entries: Sequence of SrtEntry objects, or serialized SRT content
        path: Output file path
    """
    # 确保父目录存在
    path.parent.mkdir(parents=True, exist_ok=True)

    content = entries if isinstance(entries, str) else format_srt(entries)

    with path.open("w", encoding="utf-8") as f:
        f.write(content)
        if content and not content.endswith("\n"):
            f.write("\n")

    logger.info(f"Saved {path}")
