"""
SRT Batch Translator - Async LLM-powered subtitle translator.

Features:
- Lenient SRT parsing and serialization
- Size-bounded batching of subtitle entries
- Sequential batch translation through any OpenAI-compatible server
- Structural reconciliation with per-entry provenance
"""

__version__ = "1.0.0"

from .models import (
    SrtEntry,
    Batch,
    Provenance,
    BatchStatus,
    RunState,
    TranslationOutcome,
    BatchReport,
    TranslationRun,
)
from .parser import parse_srt, format_srt, read_srt, save_srt, validate_srt_file
from .batcher import make_batches, estimate_entry_size, resolve_batch_size, DEFAULT_MAX_BATCH_CHARS
from .orchestrator import translate_srt, translate_batch, TranslateFunc
from .llm_client import create_client, make_translate_func, list_models, TranslationRequestError
from .text_utils import strip_code_fences
from .config import TranslatorConfig

__all__ = [
    # Models
    "SrtEntry",
    "Batch",
    "Provenance",
    "BatchStatus",
    "RunState",
    "TranslationOutcome",
    "BatchReport",
    "TranslationRun",
    "TranslatorConfig",
    # Parsing
    "parse_srt",
    "format_srt",
    "read_srt",
    "save_srt",
    "validate_srt_file",
    # Batching
    "make_batches",
    "estimate_entry_size",
    "resolve_batch_size",
    "DEFAULT_MAX_BATCH_CHARS",
    # Translation
    "translate_srt",
    "translate_batch",
    "TranslateFunc",
    # LLM client
    "create_client",
    "make_translate_func",
    "list_models",
    "TranslationRequestError",
    # Utils
    "strip_code_fences",
]
