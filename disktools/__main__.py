#!/usr/bin/env python3
"""
disktools - CLI Entry Point
===========================

Usage:
    python -m disktools fit -s 700m ~/music
    python -m disktools fit -s 4700m -r -l /tmp/disks ~/photos
    python -m disktools mvtodate -f %Y/%m *.jpg
    python -m disktools shuffle -p ~/music -e .flac mpv --no-video
"""

import argparse
import random
import sys

from .config import FitConfig, MoveConfig, ShuffleConfig
from .executor import check_disk_count, count, format_count, materialize, report
from .mover import DEFAULT_FORMAT, list_directory_files, move_files_to_date
from .packing import pack, validate_disks
from .scanner import catalog
from .shuffle import find_matching_files, play_files, shuffled
from .utils import clean_path, parse_size, print_error, print_success, print_warning


class CLIParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def disk_size(value: str) -> int:
    """argparse type for -s: a positive size with an optional unit."""
    try:
        size = parse_size(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))

    if size <= 0:
        raise argparse.ArgumentTypeError(f"disk size must be positive: '{value}'")
    return size


# =============================================================================
# Subcommands
# =============================================================================

def cmd_fit(args) -> int:
    """Fit command - pack files onto disks and print, count or link them."""
    config = FitConfig.from_args(args)

    try:
        files = catalog(config.paths, config.recursive, config.disk_size)
        if not files:
            print_error("no files found.")
            return 1

        try:
            disks = pack(files, config.disk_size)
            validate_disks(files, disks, config.disk_size)
        except ValueError as e:
            print_error(f"Internal error: {e}")
            return 1
        check_disk_count(disks)
    except RuntimeError as e:
        print_error(str(e))
        return 1

    if config.count_only:
        print(format_count(count(disks)))
        return 0

    if config.dest_dir is not None:
        try:
            materialize(disks, clean_path(config.dest_dir), progress=sys.stderr.isatty())
        except RuntimeError as e:
            print_error(str(e))
            return 1
        return 0

    sys.stdout.write(report(disks, config.disk_size))
    return 0


def cmd_mvtodate(args) -> int:
    """Mvtodate command - move files into date named directories."""
    config = MoveConfig.from_args(args)

    try:
        paths = [str(p) for p in args.files] if args.files else list_directory_files(".")
        if not paths:
            print_warning("No files to move")
            return 0

        moved = move_files_to_date(paths, config, progress=sys.stderr.isatty())
    except RuntimeError as e:
        print_error(str(e))
        return 1

    if config.dry_run:
        print("\n[NOTE] This was a DRY-RUN. No files were actually moved.")
    else:
        print_success(f"Moved {len(moved)} files")
    return 0


def cmd_shuffle(args) -> int:
    """Shuffle command - run a command on matching files in random order."""
    config = ShuffleConfig.from_args(args)
    rng = random.Random(config.seed)

    if config.verbose:
        print("Searching for files...", end="", flush=True)

    try:
        files = find_matching_files(config.root, config.extension, config.media_type)
    except RuntimeError as e:
        print_error(str(e))
        return 1

    if not files:
        if config.verbose:
            print("no files found.")
        return 1

    if config.verbose:
        print(f"{len(files)} files found.")

    try:
        play_files(shuffled(files, rng), config.command, config.verbose)
    except RuntimeError as e:
        print_error(str(e))
        return 1

    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = CLIParser(
        prog="disktools",
        description="disktools - pack files onto disks, sort files by date, shuffle media",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- FIT command ---
    fit_parser = subparsers.add_parser("fit", help="Fit files onto fixed size disks")
    fit_parser.add_argument("-s", "--size", type=disk_size, required=True, metavar="SIZE",
                            help="Disk size, optionally with a unit: b, k, m, g or t (1000-based)")
    fit_parser.add_argument("-l", "--link-dir", metavar="DESTDIR",
                            help="Directory to link the disks into; if omitted just print the disks")
    fit_parser.add_argument("-n", "--count", action="store_true",
                            help="Only show the number of disks it takes")
    fit_parser.add_argument("-r", "--recursive", action="store_true",
                            help="Recurse into subdirectories")
    fit_parser.add_argument("paths", nargs="+", metavar="path",
                            help="Files or directories to fit")
    fit_parser.set_defaults(func=cmd_fit)

    # --- MVTODATE command ---
    mv_parser = subparsers.add_parser("mvtodate", help="Move files into directories named by date")
    mv_parser.add_argument("-f", "--format", default=DEFAULT_FORMAT, metavar="FMT",
                           help=f"strftime format for directory names (default: {DEFAULT_FORMAT.replace('%', '%%')})")
    mv_parser.add_argument("-d", "--dest", default=".", metavar="DIR",
                           help="Directory to create the date directories in (default: .)")
    mv_parser.add_argument("--exif", action="store_true",
                           help="Use the EXIF capture date of images when present")
    mv_parser.add_argument("--dry-run", action="store_true",
                           help="Show the moves without moving anything")
    mv_parser.add_argument("files", nargs="*",
                           help="Files to move (default: all files in the current directory)")
    mv_parser.set_defaults(func=cmd_mvtodate)

    # --- SHUFFLE command ---
    shuffle_parser = subparsers.add_parser("shuffle", help="Run a command on matching files in random order")
    shuffle_parser.add_argument("-p", "--path", default=".",
                                help="Start the search from this path (default: .)")
    match_group = shuffle_parser.add_mutually_exclusive_group(required=True)
    match_group.add_argument("-e", "--extension",
                             help="Search for files with this extension")
    match_group.add_argument("-m", "--media-type",
                             help="Search for files with this media type, e.g. audio/")
    shuffle_parser.add_argument("-v", "--verbose", action="store_true",
                                help="Show what's being done")
    shuffle_parser.add_argument("--seed", type=int,
                                help="Seed for the random order")
    shuffle_parser.add_argument("player", nargs=argparse.REMAINDER, metavar="command",
                                help="The command to execute for each file")
    shuffle_parser.set_defaults(func=cmd_shuffle, subparser=shuffle_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "shuffle" and not args.player:
        args.subparser.error("a command to run is required")

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\n[ABORT] Operation cancelled by user")
        return 130


def fit_main() -> int:
    return main(["fit", *sys.argv[1:]])


def mvtodate_main() -> int:
    return main(["mvtodate", *sys.argv[1:]])


def shuffle_main() -> int:
    return main(["shuffle", *sys.argv[1:]])


if __name__ == "__main__":
    sys.exit(main())
