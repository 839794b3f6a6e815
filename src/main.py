# src/main.py - v2
"""CLI entry point: generate and library commands.

Usage:
    draftmodels generate <file>... [--batch-size N] [--stagger MS] [--yes | --review | --dry-run]
    draftmodels library [--library PATH]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from draftmodels.version import __version__

if TYPE_CHECKING:
    from draftmodels.batch.models import ProgressEvent, RunState
    from draftmodels.config.settings import Settings
    from draftmodels.review.session import ReviewSession

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from draftmodels.config.settings import ConfigurationError, load_settings
    from pydantic import ValidationError

    try:
        settings = load_settings(**_settings_overrides(args))
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="draftmodels",
        description=f"draftmodels v{__version__}: bulk generation of reusable drafting models",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--library", type=Path, default=None,
        help="Library JSON file (default: LIBRARY_PATH)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- generate ---
    p_gen = subparsers.add_parser(
        "generate", help="Generate models from documents",
    )
    p_gen.add_argument("files", type=Path, nargs="+", help="Documents (.txt, .md, .pdf, .docx)")
    p_gen.add_argument(
        "--batch-size", type=int, default=None,
        help="Files processed concurrently per batch (default: BATCH_SIZE)",
    )
    p_gen.add_argument(
        "--stagger", type=int, default=None, metavar="MS",
        help="Delay between task starts within a batch, e.g. 0, 300, 500, 1000",
    )
    p_gen.add_argument(
        "--style", default=None,
        help="Writing-style hint appended to the prompt",
    )
    mode = p_gen.add_mutually_exclusive_group()
    mode.add_argument(
        "--yes", dest="mode", action="store_const", const="yes",
        help="Commit every generated model without asking",
    )
    mode.add_argument(
        "--review", dest="mode", action="store_const", const="review",
        help="Ask for each model whether to keep it (default)",
    )
    mode.add_argument(
        "--dry-run", dest="mode", action="store_const", const="dry-run",
        help="Show the result and discard it",
    )
    p_gen.set_defaults(func=_cmd_generate, mode="review")

    # --- library ---
    p_lib = subparsers.add_parser("library", help="List models in the library")
    p_lib.set_defaults(func=_cmd_library)

    return parser


def _settings_overrides(args: argparse.Namespace) -> dict[str, object]:
    overrides: dict[str, object] = {}
    if args.library is not None:
        overrides["library_path"] = args.library
    if getattr(args, "batch_size", None) is not None:
        overrides["batch_size"] = args.batch_size
    if getattr(args, "stagger", None) is not None:
        overrides["stagger_delay_ms"] = args.stagger
    if getattr(args, "style", None) is not None:
        overrides["generation_style_hints"] = args.style
    return overrides


async def _cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    """Run the pipeline on the given files, then review and commit."""
    from draftmodels.api.facade import build_pipeline
    from draftmodels.batch.progress import CallbackProgressSink, LoggingProgressSink
    from draftmodels.batch.queue import BatchValidationError
    from draftmodels.review.session import ReviewSession

    try:
        controller = build_pipeline(
            args.files, settings,
            sinks=[LoggingProgressSink(), CallbackProgressSink(_print_progress)],
        )
    except BatchValidationError as exc:
        logger.error("%s", exc)
        return 2

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, controller.cancel)
    except (NotImplementedError, RuntimeError):
        logger.debug("SIGINT handler not supported here; Ctrl+C aborts immediately")

    try:
        state = await controller.run()
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass

    assert controller.library_store is not None
    session = ReviewSession.from_run(state, controller.library_store)
    _print_run_summary(state, session)

    if args.mode == "dry-run":
        session.discard_all()
        print("\nDry run: nothing saved.")
        return 0

    if args.mode == "review":
        _interactive_review(session)

    persisted = await session.commit()
    print(f"\nSaved {len(persisted)} model(s) to the library.")
    return 0


async def _cmd_library(args: argparse.Namespace, settings: Settings) -> int:
    """Print the models stored in the library."""
    from draftmodels.library.json_store import JsonLibraryStore

    store = JsonLibraryStore(settings.library_path)
    models = await store.list_models()
    print(f"\nLibrary {store.path}: {len(models)} model(s)")
    for model in models:
        category = f" [{model.category}]" if model.category else ""
        print(f"  {model.id}  {model.title}{category}")
    return 0


def _print_progress(event: ProgressEvent) -> None:
    if event.terminal:
        return
    print(
        f"  [{event.processed_count}/{event.total_count}] "
        f"batch {event.current_batch}/{event.total_batches}",
        file=sys.stderr,
    )


def _print_run_summary(state: RunState, session: ReviewSession) -> None:
    """Print models and per-file errors of a finished run."""
    print(f"\nRun {state.phase}:")
    print(f"  Files processed: {state.processed_count}/{state.total_files}")
    print(f"  Models:          {len(session.models)}")
    for idx, model in enumerate(session.models, 1):
        line = f"  {idx:>3}. {model.title} ({model.source_file})"
        if model.similarity_info is not None:
            info = model.similarity_info
            line += (
                f"  ~{info.similarity:.0%} similar to {info.similar_model.origin} "
                f"model '{info.similar_model.title}'"
            )
        print(line)
    if session.errors:
        print(f"  Errors:          {len(session.errors)}")
        for error in session.errors:
            print(f"    - {error.file_name} ({error.stage}): {error.reason}")


def _interactive_review(session: ReviewSession) -> None:
    """Ask about each model; answering 'n' removes it from the commit."""
    if not sys.stdin.isatty():
        return
    for model in session.models:
        answer = input(f"Keep '{model.title}'? [Y/n] ").strip().lower()
        if answer in ("n", "no"):
            session.remove_model(model.id)


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from draftmodels.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
