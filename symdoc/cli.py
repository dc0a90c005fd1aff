"""CLI entrypoints for symdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .logging import configure_logging
from .models import SelectionRequest
from .orchestrator import Orchestrator
from .package import PackageDescriptionError
from .selection import SelectionError
from .symbolgraphs import SymbolGraphOverrides


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_package_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the package root (defaults to current directory).",
    )
    parser.add_argument(
        "--package-description",
        type=Path,
        default=None,
        help="Read `swift package describe --type json` output from this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symdoc",
        description="Generate and assemble Swift symbol graphs for Swift-DocC.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate symbol graphs for the selected targets.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_package_options(generate_parser)
    generate_parser.add_argument(
        "--product",
        dest="products",
        action="append",
        default=[],
        metavar="NAME",
        help="Document the source module targets of this product. May be repeated.",
    )
    generate_parser.add_argument(
        "--target",
        dest="targets",
        action="append",
        default=[],
        metavar="NAME",
        help="Document this target. May be repeated.",
    )
    generate_parser.add_argument(
        "--symbol-graph-minimum-access-level",
        dest="minimum_access_level",
        default=None,
        metavar="LEVEL",
        help="Include symbols with this access level or more permissive.",
    )
    generate_parser.add_argument(
        "--skip-synthesized-symbols",
        action="store_true",
        help="Exclude synthesized symbols from the generated symbol graphs.",
    )
    extended = generate_parser.add_mutually_exclusive_group()
    extended.add_argument(
        "--include-extended-types",
        dest="include_extended_types",
        action="store_const",
        const=True,
        default=None,
        help="Document extensions to types from other modules (Swift 5.8+).",
    )
    extended.add_argument(
        "--exclude-extended-types",
        dest="include_extended_types",
        action="store_const",
        const=False,
        help="Leave extensions to types from other modules undocumented (Swift 5.8+).",
    )
    generate_parser.add_argument(
        "--disable-snippet-extraction",
        action="store_true",
        help="Do not merge snippet symbol graphs into the output.",
    )
    generate_parser.add_argument(
        "--jobs",
        type=int,
        default=None,
        help="Number of targets processed concurrently.",
    )

    list_parser = subparsers.add_parser(
        "list-targets",
        help="List the targets that can be documented.",
    )
    _add_verbose_option(list_parser, suppress_default=True)
    _add_package_options(list_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for symdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    orchestrator = Orchestrator()

    if args.command == "generate":
        request = SelectionRequest.from_names(args.products, args.targets)
        overrides = SymbolGraphOverrides(
            minimum_access_level=args.minimum_access_level,
            skip_synthesized_symbols=bool(args.skip_synthesized_symbols),
            include_extended_types=args.include_extended_types,
        )
        try:
            report = orchestrator.run(
                args.path,
                request,
                overrides,
                snippets=not args.disable_snippet_extraction,
                jobs=args.jobs,
                package_description=args.package_description,
            )
        except (SelectionError, PackageDescriptionError) as exc:
            parser.exit(1, f"error: {exc}\n")
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"symdoc generate failed: {exc}\nRun with --verbose for more details.\n")

        for outcome in report.outcomes:
            if outcome.succeeded:
                print(f"{outcome.target.name}: {_relativize(outcome.result.unified_directory)}")
            else:
                print(f"{outcome.target.name}: failed ({outcome.error})", file=sys.stderr)
        if not report.succeeded:
            parser.exit(1, f"{len(report.failures)} target(s) failed\n")
    elif args.command == "list-targets":
        try:
            targets = orchestrator.documentable_targets(
                args.path, package_description=args.package_description
            )
        except PackageDescriptionError as exc:
            parser.exit(1, f"error: {exc}\n")
        for target in targets:
            print(f"{target.name} ({target.module_kind.value})")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
