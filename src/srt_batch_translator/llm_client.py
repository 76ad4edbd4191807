"""LLM API client utilities."""

from __future__ import annotations

import logging
from typing import List, Dict, Optional
from enum import Enum

from openai import (
    AsyncOpenAI,
    APIConnectionError,
    RateLimitError,
    AuthenticationError,
    BadRequestError,
    APIStatusError,
)

from .orchestrator import TranslateFunc
from .text_utils import strip_code_fences, truncate_text

logger = logging.getLogger(__name__)


class TranslationRequestError(Exception):
    """A completion request failed or produced no usable content."""

    def __init__(self, message: str, error_type: "APIErrorType | None" = None):
        super().__init__(message)
        self.error_type = error_type


class APIErrorType(Enum):
    """API 错误类型分类。"""
    RATE_LIMIT = "rate_limit"      # 429
    CONNECTION = "connection"       # 网络问题
    AUTH = "auth"                   # 401
    BAD_REQUEST = "bad_request"     # 400
    SERVER = "server"               # 500+
    EMPTY = "empty"                 # 返回内容为空
    UNKNOWN = "unknown"


def classify_error(error: Exception) -> APIErrorType:
    """分类 API 错误。"""
    if isinstance(error, RateLimitError):
        return APIErrorType.RATE_LIMIT
    elif isinstance(error, APIConnectionError):
        return APIErrorType.CONNECTION
    elif isinstance(error, AuthenticationError):
        return APIErrorType.AUTH
    elif isinstance(error, BadRequestError):
        return APIErrorType.BAD_REQUEST
    elif isinstance(error, APIStatusError):
        if getattr(error, 'status_code', 0) >= 500:
            return APIErrorType.SERVER
        return APIErrorType.UNKNOWN
    else:
        return APIErrorType.UNKNOWN


def build_system_prompt(target_language: str) -> str:
    """System prompt asking for a structure-preserving SRT translation."""
    return (
        f"You are a subtitle translator. Translate the given SRT subtitle text to {target_language}.\n"
        "IMPORTANT: Translate EACH subtitle entry independently, line by line. "
        "Do NOT consider the overall context or try to make the subtitles flow together.\n"
        "Each numbered subtitle block should be translated on its own without reference to other blocks.\n"
        "Keep the exact same SRT format: number, timestamp, and translated text.\n"
        "Return only the translated SRT text without any explanation."
    )


async def call_llm_async(
    client: AsyncOpenAI,
    model: str,
    messages: List[Dict[str, str]],
    temperature: float = 0.3,
    max_tokens: Optional[int] = None,
) -> str:
    """
    Make a single async call to the chat completion API.

    Args:
        client: AsyncOpenAI client instance
        model: Model name to use
        messages: List of message dictionaries
        temperature: Sampling temperature
        max_tokens: Optional completion token limit

    Returns:
        Response content, stripped

    Raises:
        TranslationRequestError: If the request fails or the reply is empty
    """
    params: Dict = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
    }
    if max_tokens:
        params["max_tokens"] = max_tokens

    try:
        response = await client.chat.completions.create(**params)
    except Exception as e:
        error_type = classify_error(e)
        logger.debug(f"Completion request failed ({error_type.value}): {e}")
        raise TranslationRequestError(f"{error_type.value}: {e}", error_type) from e

    content = response.choices[0].message.content if response.choices else None
    if not content or not content.strip():
        raise TranslationRequestError("empty response from model", APIErrorType.EMPTY)

    return content.strip()


def make_translate_func(
    client: AsyncOpenAI,
    model: str,
    target_language: str,
    temperature: float = 0.3,
    max_tokens: Optional[int] = None,
) -> TranslateFunc:
    """
    Bind a client, model and target language into a translate function.

    The returned coroutine function takes serialized SRT text and returns
    the model's SRT reply with any Markdown fence removed.
    """
    system_prompt = build_system_prompt(target_language)

    async def translate(payload: str) -> str:
        reply = await call_llm_async(
            client,
            model,
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": payload},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        logger.debug(f"Model reply: {truncate_text(reply, 200)}")
        return strip_code_fences(reply)

    return translate


async def list_models(client: AsyncOpenAI) -> List[str]:
    """
    List model ids available on the server.

    Raises:
        TranslationRequestError: If the server cannot be queried
    """
    try:
        page = await client.models.list()
    except Exception as e:
        error_type = classify_error(e)
        raise TranslationRequestError(f"{error_type.value}: {e}", error_type) from e

    return [model.id for model in page.data]


def create_client(
    api_key: str,
    base_url: str = "http://localhost:1234/v1",
    timeout: float = 120.0
) -> AsyncOpenAI:
    """
    Create an AsyncOpenAI client.

    Args:
        api_key: API key for authentication
        base_url: API base URL
        timeout: Default timeout for requests

    Returns:
        Configured AsyncOpenAI client
    """
    return AsyncOpenAI(
        api_key=api_key,
        base_url=base_url,
        timeout=timeout,
        max_retries=0,
    )
