"""Tests for configuration."""

import argparse

import pytest

from srt_batch_translator.batcher import DEFAULT_MAX_BATCH_CHARS
from srt_batch_translator.config import (
    DEFAULT_BASE_URL,
    PLACEHOLDER_API_KEY,
    TranslatorConfig,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "SRT_TRANSLATOR_API_KEY",
        "OPENAI_API_KEY",
        "SRT_TRANSLATOR_BASE_URL",
        "SRT_TRANSLATOR_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestTranslatorConfig:

    def test_defaults(self):
        config = TranslatorConfig()
        assert config.api_key == PLACEHOLDER_API_KEY
        assert config.base_url == DEFAULT_BASE_URL
        assert config.model_name == ""
        assert config.max_batch_chars == DEFAULT_MAX_BATCH_CHARS
        assert config.validate() is None

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        monkeypatch.setenv("SRT_TRANSLATOR_MODEL", "qwen")
        config = TranslatorConfig()
        assert config.api_key == "sk-openai"
        assert config.model_name == "qwen"

    def test_specific_key_wins(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        monkeypatch.setenv("SRT_TRANSLATOR_API_KEY", "sk-specific")
        assert TranslatorConfig().api_key == "sk-specific"

    @pytest.mark.parametrize("value", [None, "abc", "0", "-10"])
    def test_invalid_batch_size_falls_back(self, value):
        assert TranslatorConfig(max_batch_chars=value).max_batch_chars == DEFAULT_MAX_BATCH_CHARS

    def test_from_args(self):
        args = argparse.Namespace(
            api_key="k",
            base_url="http://example.com/v1",
            model_name="m",
            timeout=30.0,
            target_language="French",
            max_batch_chars="1500",
        )
        config = TranslatorConfig.from_args(args)
        assert config.api_key == "k"
        assert config.base_url == "http://example.com/v1"
        assert config.model_name == "m"
        assert config.target_language == "French"
        assert config.max_batch_chars == 1500

    def test_validate_bad_url(self):
        assert "base URL" in TranslatorConfig(base_url="localhost:1234").validate()

    def test_validate_empty_language(self):
        assert "Target language" in TranslatorConfig(target_language=" ").validate()

    def test_validate_timeout(self):
        assert "Timeout" in TranslatorConfig(timeout=0).validate()
