"""
VeriBound CLI — seal and verify classification reports.

Commands:
    veribound verify <sealed.json>           — Verify a sealed record
    veribound verify basel <input.json>      — Compute, seal, persist, verify

Exit codes:
    0 — verified
    1 — usage error
    2 — validation, configuration, or verification failure
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ..config import load_boundary_config, load_settings
from ..errors import VeriBoundError
from .pipeline import run_basel_report, verify_sealed_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILED = 2


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

class UsageError(Exception):
    """Raised instead of argparse's own exit so every bad invocation exits 1."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message)


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = _Parser(
        prog="veribound",
        description="VeriBound — verified boundary classification and sealed reports",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        parser_class=_Parser,
    )

    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a sealed record, or run and seal a Basel report",
        usage=(
            "veribound verify <sealed.json>\n"
            "       veribound verify basel <input.json> "
            "[--output-dir DIR] [--boundaries FILE]"
        ),
    )
    verify_parser.add_argument(
        "targets",
        nargs="+",
        metavar="TARGET",
        help="<sealed.json> or: basel <input.json>",
    )
    verify_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the sealed Basel report",
    )
    verify_parser.add_argument(
        "--boundaries",
        type=Path,
        default=None,
        help="Boundary configuration used to classify the CET1 ratio",
    )

    return parser


def configure_logging(verbose: bool, level_name: str) -> None:
    level = logging.getLevelName(level_name)
    if verbose:
        level = logging.DEBUG
    elif not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_verify_sealed(path: Path) -> int:
    """Verify a sealed record on disk."""
    try:
        verdict = verify_sealed_file(path)
    except VeriBoundError as e:
        print(f"INVALID: {e}", file=sys.stderr)
        return EXIT_FAILED

    print(verdict.message)
    return EXIT_OK if verdict.ok else EXIT_FAILED


def cmd_verify_basel(
    input_path: Path,
    output_dir: Path,
    boundaries_path: Optional[Path] = None,
) -> int:
    """Compute, seal, persist, and immediately re-verify a Basel report."""
    try:
        boundaries = None
        if boundaries_path is not None:
            boundaries = load_boundary_config(boundaries_path)

        result = run_basel_report(input_path, output_dir, boundaries)
    except VeriBoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILED

    print(f"Wrote sealed report: {result.output_path}")

    classification = result.record.results.get("classification")
    if classification is not None:
        category = classification["category"] or "UNCLASSIFIED"
        print(f"CET1 band: {category} ({classification['value']:.4f}%)")

    print(result.verdict.message)
    return EXIT_OK if result.ok else EXIT_FAILED


def dispatch(args: argparse.Namespace, results_dir: Path) -> int:
    targets = args.targets
    logger.debug("Dispatching verify %s", targets)

    if len(targets) == 1 and targets[0] != "basel":
        if args.output_dir is not None or args.boundaries is not None:
            raise UsageError("--output-dir and --boundaries apply only to 'verify basel'")
        return cmd_verify_sealed(Path(targets[0]))

    if len(targets) == 2 and targets[0] == "basel":
        output_dir = args.output_dir if args.output_dir is not None else results_dir
        return cmd_verify_basel(Path(targets[1]), output_dir, args.boundaries)

    raise UsageError("expected <sealed.json> or: basel <input.json>")


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    settings = load_settings()

    try:
        args = parser.parse_args(argv)
        if args.command is None:
            raise UsageError("a command is required")

        configure_logging(args.verbose, settings.log_level)
        return dispatch(args, settings.results_dir)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"veribound: error: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
