import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, Sequence, Union
from uuid import uuid4

from dotenv import load_dotenv

from translation_router.cache import CacheManager
from translation_router.config import Config
from translation_router.orchestrator import TranslationService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _format_error(exc: Exception) -> str:
    return f"{type(exc).__name__}: {exc}"


def _log_context(run_id: str, command: Optional[Union[int, str]] = None) -> str:
    command_value = "-" if command is None else command
    return f"run_id={run_id} command={command_value}"


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Cached, multi-provider text translation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  translation-router translate "Hola mundo" --target en
  translation-router translate "Bonjour" --source fr --target de --context campaign-42
  translation-router detect "Der Hund ist in dem Haus"
  translation-router cache cleanup   # run daily from cron
  translation-router cache prune --max-entries 5000
  translation-router cache export backup.json
        """,
    )
    parser.add_argument(
        "--provider",
        help="Default translation provider (openai, anthropic, google, deepl)",
    )
    parser.add_argument(
        "--cache-type",
        choices=["memory", "sqlite", "file", "hybrid"],
        help="Type of cache to use (default: hybrid)",
    )
    parser.add_argument(
        "--cache-ttl-days",
        type=int,
        help="Cache TTL in days (default: 30)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    translate = commands.add_parser("translate", help="Translate a text")
    translate.add_argument("text", help="Text to translate")
    translate.add_argument("--target", required=True, help="Target language code (e.g., en, de)")
    translate.add_argument("--source", help="Source language code (detected when omitted)")
    translate.add_argument("--context", help="Context id selecting provider and API key overrides")

    detect = commands.add_parser("detect", help="Detect the language of a text")
    detect.add_argument("text", help="Text to analyze")
    detect.add_argument(
        "--remote",
        action="store_true",
        help="Ask the remote detection API when pattern matching is inconclusive",
    )

    cache = commands.add_parser("cache", help="Cache maintenance")
    cache_commands = cache.add_subparsers(dest="cache_command", required=True)
    cache_commands.add_parser("stats", help="Show cache statistics")
    cache_commands.add_parser("cleanup", help="Remove expired entries")
    cache_commands.add_parser("clear", help="Remove every entry")
    prune = cache_commands.add_parser("prune", help="Remove the oldest entries above a limit")
    prune.add_argument(
        "--max-entries",
        type=int,
        default=10000,
        help="Number of entries to keep (default: 10000)",
    )
    export = cache_commands.add_parser("export", help="Export entries to a JSON file")
    export.add_argument("path", help="Output JSON file")
    import_ = cache_commands.add_parser("import", help="Import entries from a JSON file")
    import_.add_argument("path", help="Input JSON file")
    import_.add_argument(
        "--replace",
        action="store_true",
        help="Replace the cache content instead of merging",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    config = Config.from_env()
    if args.provider:
        config.default_provider = args.provider.lower()
    if args.cache_type:
        config.cache_type = args.cache_type
    if args.cache_ttl_days is not None:
        config.cache_ttl_days = args.cache_ttl_days
    return config


async def run_cache_command(args: argparse.Namespace, service: TranslationService, run_id: str) -> None:
    manager = CacheManager(service.cache)
    command = args.cache_command
    if command == "stats":
        await manager.print_stats()
    elif command == "cleanup":
        removed = await service.cleanup_cache()
        logger.info("%s event=cache_cleanup removed=%s", _log_context(run_id, command), removed)
    elif command == "clear":
        await service.clear_cache()
        logger.info("%s event=cache_cleared", _log_context(run_id, command))
    elif command == "prune":
        removed = await service.cache.prune(args.max_entries)
        logger.info("%s event=cache_pruned removed=%s", _log_context(run_id, command), removed)
    elif command == "export":
        exported = await manager.export_cache(args.path)
        logger.info("%s event=cache_exported entries=%s", _log_context(run_id, command), exported)
    elif command == "import":
        imported = await manager.import_cache(args.path, merge=not args.replace)
        logger.info("%s event=cache_imported entries=%s", _log_context(run_id, command), imported)


async def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    load_dotenv()
    args = parse_arguments(argv)
    run_id = uuid4().hex[:12]

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    service = TranslationService.from_config(build_config(args))
    try:
        if args.command == "translate":
            translated = await service.translate(
                args.text,
                args.target,
                source_lang=args.source,
                context_id=args.context,
            )
            print(translated)
        elif args.command == "detect":
            language = await service.detector.detect(args.text, allow_remote_fallback=args.remote)
            ranked = service.detector.detect_multiple(args.text)
            print(json.dumps({"language": language, "scores": dict(ranked)}, ensure_ascii=False))
        elif args.command == "cache":
            await run_cache_command(args, service, run_id)
    except Exception as exc:
        logger.error("%s event=run_failed error=%s", _log_context(run_id, args.command), _format_error(exc))
        raise
    finally:
        await service.close()


def run() -> None:
    try:
        asyncio.run(main())
    except Exception:
        sys.exit(1)


if __name__ == "__main__":
    run()
