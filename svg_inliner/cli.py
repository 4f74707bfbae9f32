from __future__ import annotations

"""Command-line interface: inline SVG references in HTML files."""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from svg_inliner.core.exceptions import (
    ConfigurationError,
    LoadError,
    StreamNotSupportedError,
    UnresolvedReferenceError,
)
from svg_inliner.core.services import InlineService
from svg_inliner.logging_config import setup_logging

logger = logging.getLogger(__name__)


@dataclass
class CliError(Exception):
    message: str
    exit_code: int = 1
    hint: Optional[str] = None


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="svg-inliner",
        description="Inline SVG files referenced from HTML documents.",
    )
    parser.add_argument("inputs", nargs="+", metavar="INPUT", help="HTML file(s) to transform")

    out = parser.add_mutually_exclusive_group()
    out.add_argument("-o", "--output", help="Output file (single input only)")
    out.add_argument("--out-dir", help="Write results into this directory")
    out.add_argument("--stdout", action="store_true", help="Write results to stdout")

    parser.add_argument("--root", help="Directory SVG references are resolved against")
    parser.add_argument(
        "--selector",
        action="append",
        dest="selectors",
        metavar="CSS",
        help="CSS selector of elements to inline (repeatable)",
    )
    parser.add_argument("--attrs", help="Pattern of attribute names copied onto the inlined <svg>")
    parser.add_argument("--decode-entities", action="store_true", help="Emit decoded characters")
    parser.add_argument("--spritesheet", action="store_true", help="Build a <symbol> sprite sheet")
    parser.add_argument("--spritesheet-class", help="CSS class of the sprite sheet container")
    parser.add_argument("--debug", action="store_true")
    return parser


def _options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    if args.root is not None:
        options["root"] = args.root
    if args.selectors:
        options["selectors"] = args.selectors
    if args.attrs is not None:
        options["attrs"] = args.attrs
    if args.decode_entities:
        options["decode_entities"] = True
    if args.spritesheet:
        options["create_spritesheet"] = True
    if args.spritesheet_class is not None:
        options["spritesheet_class"] = args.spritesheet_class
    return options


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    if isinstance(exc, ConfigurationError):
        return CliError(str(exc), exit_code=2, hint="Check the command-line options.")
    if isinstance(exc, (UnresolvedReferenceError, LoadError)):
        return CliError(str(exc), exit_code=3, hint="Check --root and the src attributes of the document.")
    if isinstance(exc, StreamNotSupportedError):
        return CliError(str(exc), exit_code=2)
    if isinstance(exc, FileNotFoundError):
        return CliError(str(exc), exit_code=2)
    if isinstance(exc, OSError):
        return CliError(f"failed to write output: {exc}", exit_code=4)
    return CliError(str(exc) or exc.__class__.__name__, exit_code=1, hint="Re-run with --debug to see the log.")


def _emit_error(err: CliError) -> None:
    sys.stderr.write(f"error: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def _run(args: argparse.Namespace) -> int:
    if args.output and len(args.inputs) > 1:
        raise CliError("--output can only be used with a single input", exit_code=2,
                       hint="Use --out-dir for several inputs.")

    service = InlineService(_options_from_args(args))

    for raw in args.inputs:
        source = Path(raw)
        if args.stdout:
            if not source.is_file():
                raise FileNotFoundError(f"Input file not found: {source}")
            result = service.process_buffer(source.read_text(encoding=service.encoding))
            sys.stdout.write(result)
            continue

        if args.output:
            destination: Optional[Path] = Path(args.output)
        elif args.out_dir:
            destination = Path(args.out_dir) / source.name
        else:
            destination = None
        written = service.process_file(source, destination)
        print(f"Wrote {written}")
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv: List[str] = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    try:
        args = parser.parse_args(raw_argv)
    except UsageError as exc:
        _emit_error(CliError(str(exc), exit_code=2))
        return 2

    setup_logging(debug=args.debug)

    try:
        return _run(args)
    except Exception as exc:
        err = _error_from_exception(exc)
        logger.debug("Command failed", exc_info=True)
        _emit_error(err)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
