# cli.py

import argparse
import logging
import sys
from pathlib import Path

from config import DEFAULT_CONFIG_PATH, ScanConfig, SystemConfig
from core.detector import DuplicateDetector
from core.errors import PhotoDedupError
from core.models import RunStats
from utils.logging_config import setup_logging
from utils.report_generator import DuplicateReportGenerator

logger = logging.getLogger(__name__)


def print_summary(stats: RunStats, config: ScanConfig):
    """Print the end-of-run summary"""
    print("\n--- Duplicate Photo Detection Summary ---")
    print(f"Total files scanned: {stats.total_files}")
    print(f"Valid images found: {stats.images_found}")
    print(f"Duplicates found: {stats.duplicate_groups}")
    print(f"Files moved: {stats.files_moved}")
    if config.dry_run:
        print(f"Files that would be moved: {len(stats.planned_moves)}")
    if stats.failed_moves:
        print(f"Failed moves: {len(stats.failed_moves)}")
    if stats.duplicate_groups > 0:
        print(f"Output directory: {config.output_dir}")


def duplicate_command(args) -> int:
    """Scan a directory and move duplicate photos aside"""
    system = SystemConfig.load(args.config)

    level = "DEBUG" if args.verbose else system.log_level
    try:
        setup_logging(level, log_dir=args.log_dir or system.log_dir)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    input_dir = Path(args.dir)
    if not input_dir.exists():
        print(f"Error accessing directory: {input_dir}", file=sys.stderr)
        return 1
    if not input_dir.is_dir():
        print(f"Input path is not a directory: {input_dir}", file=sys.stderr)
        return 1

    try:
        config = ScanConfig.from_system(
            system,
            input_dir=str(input_dir),
            output_dir=args.output,
            thumbnail_size=args.thumbsize,
            verbose=args.verbose,
            n_workers=args.workers,
            best_effort=True if args.best_effort else None,
            dry_run=args.dry_run,
            show_progress=args.progress
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    if config.verbose:
        print(f"Input Directory: {config.input_dir}")
        print(f"Output Directory: {config.output_dir}")
        print(f"Thumbnail Size: {config.thumbnail_size}")
        print("Starting duplicate photo detection...")

    detector = DuplicateDetector(config)
    try:
        stats = detector.run()
    except PhotoDedupError as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"Error during detection: {e}", file=sys.stderr)
        return 1

    print_summary(stats, config)

    if args.report:
        report_path = DuplicateReportGenerator().generate_report(stats, config, args.report)
        print(f"Report saved to: {report_path}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-dedup",
        description="Find visually identical photos and move lower-resolution copies aside"
    )
    parser.add_argument('--dir', default='.',
                        help='Directory to scan for duplicate photos')
    parser.add_argument('--output', default=None,
                        help="Output directory for duplicate photos (default: '<dir>/duplicates')")
    parser.add_argument('--thumbsize', type=int, default=None,
                        help='Thumbnail size for signature generation in pixels (default: 200)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose output')
    parser.add_argument('-w', '--workers', type=int, default=None,
                        help='Number of threads used to compute signatures')
    parser.add_argument('--best-effort', action='store_true',
                        help='Log failed moves and keep going instead of aborting')
    parser.add_argument('-n', '--dry-run', action='store_true',
                        help='Report what would be moved without moving anything')
    parser.add_argument('--progress', action='store_true', default=None,
                        help='Show a progress bar while scanning')
    parser.add_argument('-c', '--config', default=DEFAULT_CONFIG_PATH,
                        help=f'YAML configuration file (default: {DEFAULT_CONFIG_PATH})')
    parser.add_argument('-r', '--report', default=None,
                        help='Write a JSON report of the run to this path')
    parser.add_argument('--log-dir', default=None,
                        help='Also write rotating log files to this directory')
    parser.set_defaults(func=duplicate_command)
    return parser


def main_cli(argv=None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main_cli())
