"""Command-line interface for SRT Batch Translator."""

from __future__ import annotations

import asyncio
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .config import DEFAULT_TARGET_LANGUAGE, TranslatorConfig
from .llm_client import (
    TranslationRequestError,
    create_client,
    list_models,
    make_translate_func,
)
from .models import BatchReport, Provenance, TranslationRun
from .orchestrator import TranslateFunc, translate_srt
from .parser import read_srt, save_srt, validate_srt_file


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="srt-batch-translator",
        description="Translate SRT subtitles in size-bounded batches with an OpenAI-compatible LLM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s video.srt                          # Translate with the first available model
  %(prog)s video.srt -o output.srt            # Specify output
  %(prog)s a.srt b.srt -t French              # Several files, other language
  %(prog)s video.srt --batch-size 1000        # Smaller requests
  %(prog)s --list-models                      # Show models on the server
        """
    )

    # Positional arguments
    parser.add_argument("input_paths", nargs="*", help="Input SRT file path(s)")
    parser.add_argument("-o", "--output", dest="output_path", help="Output SRT file path (single input only)")

    # Translation options
    parser.add_argument("-t", "--target-language", dest="target_language", default=DEFAULT_TARGET_LANGUAGE)
    parser.add_argument(
        "--batch-size", dest="max_batch_chars", default=None,
        help="Approximate characters per request (default 2000)",
    )

    # API options
    parser.add_argument("--api-key", help="API key (or set SRT_TRANSLATOR_API_KEY / OPENAI_API_KEY)")
    parser.add_argument("--base-url", default=None, help="API base URL (default http://localhost:1234/v1)")
    parser.add_argument("--model", dest="model_name", default=None, help="Model id (default: first listed)")
    parser.add_argument("--timeout", type=float, default=120.0, help="Request timeout in seconds")
    parser.add_argument("--list-models", action="store_true", help="List available models and exit")

    # Misc
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    return parser


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def resolve_output_path(in_path: Path, output_path: Optional[str], prefix: str) -> Path:
    """Explicit output path, or ``<prefix><name>`` next to the input."""
    if output_path:
        return Path(output_path).expanduser()
    return in_path.with_name(f"{prefix}{in_path.name}")


async def translate_file(
    in_path: Path,
    out_path: Path,
    translate_func: TranslateFunc,
    max_batch_chars: int,
) -> Optional[TranslationRun]:
    """
    Translate one SRT file and write the result.

    Returns:
        The completed run, or None if the file was rejected
    """
    logger = logging.getLogger(__name__)

    error = validate_srt_file(in_path)
    if error:
        logger.error(error)
        return None

    logger.info(f"Reading: {in_path}")
    try:
        content = read_srt(in_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {in_path}: {e}")
        return None

    with tqdm(desc=in_path.name, unit="batch") as bar:
        def on_batch_done(report: BatchReport, run: TranslationRun) -> None:
            bar.total = run.total_batches
            bar.set_postfix(status=report.status.value)
            bar.update(1)

        run = await translate_srt(content, translate_func, max_batch_chars, on_batch_done)

    if not run.outcomes:
        logger.error(f"No valid subtitle entries found in {in_path}")
        return None

    save_srt(run.text, out_path)

    counts = run.provenance_counts()
    logger.info(
        f"Done! {counts[Provenance.TRANSLATED]}/{run.total_entries} translated, "
        f"{counts[Provenance.RECOVERED_PARTIAL]} recovered, "
        f"{counts[Provenance.ORIGINAL]} kept original. Saved to {out_path}"
    )
    return run


async def main_async(args: argparse.Namespace) -> int:
    """Main async workflow."""
    logger = logging.getLogger(__name__)
    config = TranslatorConfig.from_args(args)

    # 验证配置
    error = config.validate()
    if error:
        logger.error(error)
        return 1

    if not args.list_models and not args.input_paths:
        logger.error("No input files given")
        return 1

    if args.output_path and len(args.input_paths) > 1:
        logger.error("--output can only be used with a single input file")
        return 1

    client = create_client(config.api_key, config.base_url, config.timeout)

    # 选择模型
    if args.list_models or not config.model_name:
        try:
            models = await list_models(client)
        except TranslationRequestError as e:
            logger.error(f"Failed to fetch models from {config.base_url}: {e}")
            return 1

        if args.list_models:
            for model_id in models:
                print(model_id)
            return 0

        if not models:
            logger.error("No models available on the server")
            return 1
        config.model_name = models[0]
        logger.info(f"Using model: {config.model_name}")

    translate_func = make_translate_func(client, config.model_name, config.target_language)

    failed = 0
    # 逐个文件处理，一个文件失败不影响其余文件
    for raw_path in args.input_paths:
        in_path = Path(raw_path).expanduser().resolve()
        out_path = resolve_output_path(in_path, args.output_path, config.output_prefix)
        run = await translate_file(in_path, out_path, translate_func, config.max_batch_chars)
        if run is None:
            failed += 1

    if failed:
        logger.error(f"{failed}/{len(args.input_paths)} file(s) could not be processed")
        return 1
    return 0


def main() -> None:
    """CLI entry point."""
    args = parse_arguments()
    setup_logging(args.verbose)

    try:
        exit_code = asyncio.run(main_async(args))
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        sys.exit(130)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
