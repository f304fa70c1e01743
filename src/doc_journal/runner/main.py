"""
CLI main entry point.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from ..config import Config, create_default_config, load_config
from ..pipeline import DocumentPipeline, analyze_file
from ..rules import RulesFileError
from ..schemas import DocumentInput

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="doc-journal",
        description="Extract fields from financial documents and suggest journal entries",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Analyze one pre-OCR'd text file")
    analyze_parser.add_argument("file", type=Path, help="Text file with the document contents")
    analyze_parser.add_argument(
        "--name",
        type=str,
        help="File name used for classification (default: the text file's name)",
    )
    analyze_parser.add_argument(
        "--category",
        type=str,
        help="Category hint, e.g. travel or utilities",
    )

    # batch command
    batch_parser = subparsers.add_parser("batch", help="Analyze several text files")
    batch_parser.add_argument("files", type=Path, nargs="+", help="Text files to analyze")

    # init-config command
    init_parser = subparsers.add_parser("init-config", help="Write a default config file")
    init_parser.add_argument("path", type=Path, help="Where to write the config")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file",
    )

    return parser


def _print_json(data: dict) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_analyze(
    config: Config,
    path: Path,
    name: str | None = None,
    category: str | None = None,
) -> int:
    """Analyze a single document and print the result as JSON."""
    if not path.exists():
        print(f"❌ File not found: {path}", file=sys.stderr)
        return 1

    pipeline = DocumentPipeline(config)
    outcome = analyze_file(path, pipeline, file_name=name, category_hint=category)
    _print_json(outcome.to_dict())
    return 0 if outcome.success else 1


def cmd_batch(config: Config, paths: list[Path]) -> int:
    """Analyze several documents and print the batch result as JSON."""
    items = []
    for path in paths:
        if not path.exists():
            print(f"❌ File not found: {path}", file=sys.stderr)
            return 1
        items.append(
            DocumentInput(
                file_name=path.name,
                text=path.read_text(encoding="utf-8", errors="replace"),
            )
        )

    result = DocumentPipeline(config).analyze_batch(items)
    _print_json(result.to_dict())
    return 0 if result.failed == 0 else 1


def cmd_init_config(path: Path, force: bool = False) -> int:
    """Write the default configuration file."""
    if path.exists() and not force:
        print(f"❌ {path} already exists (use --force to overwrite)", file=sys.stderr)
        return 1

    create_default_config(path)
    print(f"✓ Wrote default config to {path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.path, parsed.force)

    # Load config
    try:
        config = load_config(parsed.config)
    except Exception as e:
        print(f"❌ Failed to load config: {e}", file=sys.stderr)
        return 1

    # Route to command
    try:
        if parsed.command == "analyze":
            return cmd_analyze(config, parsed.file, parsed.name, parsed.category)
        elif parsed.command == "batch":
            return cmd_batch(config, parsed.files)
    except RulesFileError as e:
        print(f"❌ Failed to load rules: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
