"""Command-line interface for codescout."""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys

import tqdm

from codescout.config import create_default_config
from codescout.exceptions import ConfigurationError, ScanError
from codescout.models import DEFAULT_PHASES, ProgressEvent, ScanPhase
from codescout.reporting import format_size, generate_summary, result_to_dict
from codescout.scanner import Scanner
from codescout.settings import get_settings

logger = logging.getLogger(__name__)


class ProgressBar:
    """Shows phase progress events on a tqdm bar, one bar per phase."""

    def __init__(self, disable: bool = False):
        self.disable = disable
        self._bar: tqdm.tqdm | None = None
        self._phase: ScanPhase | None = None

    def __call__(self, event: ProgressEvent) -> None:
        if event.phase is not self._phase:
            self.close()
            self._phase = event.phase
            self._bar = tqdm.tqdm(
                total=100, desc=event.phase.value, unit="%", disable=self.disable, leave=False
            )
        self._bar.n = min(event.percentage, 100)
        self._bar.set_postfix_str(event.message, refresh=False)
        self._bar.refresh()

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    def __enter__(self) -> ProgressBar:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codescout",
        description=(
            "Inventory a source repository: find its modules, classify their "
            "ecosystems and report scan coverage."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("directory", help="The repository root to scan.")
    parser.add_argument(
        "--phases",
        nargs="+",
        choices=[p.value for p in ScanPhase],
        default=[p.value for p in DEFAULT_PHASES],
        help="Scan phases to run, in order.",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum directory depth to enumerate (defaults to settings).",
    )
    parser.add_argument(
        "--max-files",
        type=int,
        default=None,
        help="Abort when this many files have been enumerated (defaults to settings).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of a text summary.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the report to this file instead of stdout.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed processing information.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the codescout CLI."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    start_path = pathlib.Path(args.directory).resolve()
    if not start_path.is_dir():
        print(f"Error: Directory not found: {args.directory}", file=sys.stderr)
        sys.exit(1)

    overrides = {}
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    if args.max_files is not None:
        overrides["max_files"] = args.max_files
    try:
        config = create_default_config(performance_limits=overrides, settings=settings)
    except ConfigurationError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)

    phases = [ScanPhase(p) for p in args.phases]
    print(f"📂 Scanning directory: {start_path}", file=sys.stderr)

    try:
        with ProgressBar(disable=not sys.stderr.isatty()) as progress:
            result = Scanner(config=config).scan(start_path, phases=phases, progress=progress)
    except ScanError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        if e.phase_record is not None:
            print(f"   Failed phase: {e.phase_record.phase.value}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        report = json.dumps(result_to_dict(result), indent=2) + "\n"
    else:
        report = generate_summary(result)

    if args.output:
        output_path = pathlib.Path(args.output).resolve()
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(report, encoding="utf-8")
        except OSError as e:
            print(f"\n❌ Error: Could not write to {output_path}: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"📄 Output: {output_path}", file=sys.stderr)
    else:
        sys.stdout.write(report)

    stats = result.statistics
    print(
        f"\n✅ Success! Found {stats.modules_found} modules in {stats.total_files} files "
        f"({format_size(stats.total_size)}, {stats.coverage:.1f}% scanned)",
        file=sys.stderr,
    )


if __name__ == "__main__":
    main()
