"""CLI entrypoints for dtsdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .logging import configure_logging
from .orchestrator import DEFAULT_OUTPUT, BuildOutcome, Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Log unresolved references and other debug details.",
    }
    kwargs["default"] = argparse.SUPPRESS if suppress_default else False
    parser.add_argument("-v", "--verbose", **kwargs)


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help=f"Where to write the page map JSON (defaults to config output or {DEFAULT_OUTPUT}).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .dtsdoc.yml or the directory containing it.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when generated links point at missing pages or anchors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dtsdoc",
        description="Flatten TypeDoc declaration trees into linked documentation pages.",
    )
    _add_verbose_option(parser)
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Parse .d.ts files with TypeDoc and write the flattened pages.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_output_options(build_parser)
    build_parser.add_argument("sources", nargs="+", help="Declaration files to document.")

    convert_parser = subparsers.add_parser(
        "convert",
        help="Flatten an existing TypeDoc --json project file.",
    )
    _add_verbose_option(convert_parser, suppress_default=True)
    _add_output_options(convert_parser)
    convert_parser.add_argument("project", type=Path, help="TypeDoc JSON output.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP transform service (requires the service extra).",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for dtsdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=args.quiet, log_file=args.log_file)

    if args.command == "serve":
        from .service import run_service

        try:
            run_service(host=args.host, port=args.port)
        except RuntimeError as exc:
            parser.exit(1, f"{exc}\n")
        return

    orchestrator = Orchestrator()
    try:
        if args.command == "build":
            outcome = orchestrator.run_build(
                args.sources, config_path=args.config, output=args.output
            )
        elif args.command == "convert":
            outcome = orchestrator.run_convert(
                args.project, config_path=args.config, output=args.output
            )
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except RuntimeError as exc:
        parser.exit(1, f"dtsdoc {args.command} failed: {exc}\nRun with --verbose for more details.\n")

    _report(outcome)
    if args.strict and outcome.issues:
        parser.exit(1, f"{len(outcome.issues)} broken link(s) found\n")


def _report(outcome: BuildOutcome) -> None:
    if outcome.output is not None:
        print(f"{len(outcome.pages)} pages written to {_relativize(outcome.output)}")
    if outcome.issues:
        print(f"{len(outcome.issues)} link issue(s) reported above")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
