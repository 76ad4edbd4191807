"""Configuration and constants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .batcher import DEFAULT_MAX_BATCH_CHARS, resolve_batch_size

# Load environment variables once
load_dotenv()

DEFAULT_BASE_URL = "http://localhost:1234/v1"
DEFAULT_TARGET_LANGUAGE = "Japanese"

# 本地服务器（LM Studio 等）不校验 key，但 SDK 要求非空
PLACEHOLDER_API_KEY = "lm-studio"


def _env_api_key() -> Optional[str]:
    return os.environ.get("SRT_TRANSLATOR_API_KEY") or os.environ.get("OPENAI_API_KEY")


@dataclass
class TranslatorConfig:
    """Configuration for subtitle translator."""

    # API settings
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model_name: Optional[str] = None
    timeout: float = 120.0

    # Translation settings
    target_language: str = DEFAULT_TARGET_LANGUAGE
    max_batch_chars: int = DEFAULT_MAX_BATCH_CHARS

    # Output settings
    output_prefix: str = "translated_"

    def __post_init__(self):
        """Fill unset values from the environment."""
        if not self.api_key:
            self.api_key = _env_api_key() or PLACEHOLDER_API_KEY
        if not self.base_url:
            self.base_url = os.environ.get("SRT_TRANSLATOR_BASE_URL", DEFAULT_BASE_URL)
        if not self.model_name:
            self.model_name = os.environ.get("SRT_TRANSLATOR_MODEL", "")
        self.max_batch_chars = resolve_batch_size(self.max_batch_chars)

    @classmethod
    def from_args(cls, args) -> "TranslatorConfig":
        """Create config from argparse namespace."""
        return cls(
            api_key=getattr(args, 'api_key', None),
            base_url=getattr(args, 'base_url', None),
            model_name=getattr(args, 'model_name', None),
            timeout=getattr(args, 'timeout', 120.0),
            target_language=getattr(args, 'target_language', DEFAULT_TARGET_LANGUAGE),
            max_batch_chars=getattr(args, 'max_batch_chars', None),
        )

    def validate(self) -> Optional[str]:
        """
        Validate configuration.

        Returns:
            Error message if invalid, None if valid
        """
        if not self.base_url or not self.base_url.startswith(("http://", "https://")):
            return f"Invalid base URL: {self.base_url!r}"

        if not self.target_language or not self.target_language.strip():
            return "Target language must not be empty"

        if self.timeout <= 0:
            return f"Timeout must be positive, got {self.timeout}"

        return None

