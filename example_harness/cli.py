"""Command line entry point for the example harness.

Usage::

    example-harness examples --filter 'rust' --target-path /tmp/examples-test
    example-harness examples --skip-instructions --report report.json
    example-harness app --target-path /tmp/examples
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from rich.markup import escape

from .catalog.registry import DirectoryCatalog
from .config import HarnessConfig
from .errors import HarnessError
from .tester.app_loop import AppComponentLoop
from .tester.runner import ExampleTestRunner, compile_filter
from .utils import console

EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="example-harness",
        description="Instantiate example templates and verify their instructions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  example-harness examples\n"
            "  example-harness examples -f minimal --skip-instructions\n"
            "  example-harness app --target-path ./examples\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    examples_parser = subparsers.add_parser(
        "examples", help="generate every standalone example and run its instructions"
    )
    examples_parser.add_argument(
        "--filter", "-f",
        default=None,
        help="Only test examples whose name contains a match for this regex",
    )
    examples_parser.add_argument(
        "--skip-instructions",
        action="store_true",
        help="Do not run the rendered instructions",
    )
    examples_parser.add_argument(
        "--skip-instantiate",
        action="store_true",
        help="Do not (re)create the component directories",
    )
    examples_parser.add_argument(
        "--target-path",
        type=Path,
        default=None,
        help="Directory the examples are generated into (default: examples-test)",
    )
    examples_parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Example catalog directory (default: templates)",
    )
    examples_parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Also write the results as JSON to this file",
    )

    app_parser = subparsers.add_parser(
        "app", help="add generated components to each language's composable app"
    )
    app_parser.add_argument(
        "--target-path",
        type=Path,
        default=None,
        help="Base directory of the app; components go to <path>/app-default (default: examples)",
    )
    app_parser.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Example catalog directory (default: templates)",
    )

    return parser


def _build_config(args: argparse.Namespace) -> HarnessConfig:
    overrides: dict[str, Path] = {}
    if args.catalog is not None:
        overrides["catalog_dir"] = args.catalog
    if args.target_path is not None:
        key = "examples_target_path" if args.command == "examples" else "app_target_path"
        overrides[key] = args.target_path
    return HarnessConfig(**overrides)


def _handle_examples(args: argparse.Namespace, config: HarnessConfig) -> int:
    name_filter = compile_filter(args.filter)
    runner = ExampleTestRunner(
        DirectoryCatalog(config.catalog_dir),
        config,
        skip_instantiate=args.skip_instantiate,
        skip_instructions=args.skip_instructions,
    )
    summary = runner.run(name_filter)
    if args.report is not None:
        summary.save(args.report)
        console.print(f"[dim]Results saved to {escape(str(args.report))}[/dim]")
    return summary.exit_code


def _handle_app(args: argparse.Namespace, config: HarnessConfig) -> int:
    loop = AppComponentLoop(DirectoryCatalog(config.catalog_dir), config)
    loop.run()
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``example-harness`` and ``python -m example_harness``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _build_config(args)

    try:
        if args.command == "examples":
            exit_code = _handle_examples(args, config)
        else:
            exit_code = _handle_app(args, config)
    except (HarnessError, OSError) as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(EXIT_FATAL)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
