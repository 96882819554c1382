"""
Result output for disktools.

Prints packed disks, counts them, or links their files into a directory
per disk.
"""

import os
from typing import Sequence

from tqdm import tqdm

from .packing import Disk
from .utils import clean_path, format_size, make_dirs, relative_link_name

# Disk directories are named with exactly 4 digits
MAX_DISKS = 9999


class MaterializeError(RuntimeError):
    """Disks can't be written out."""


def check_disk_count(disks: Sequence[Disk]) -> None:
    """Refuse packings that need more disks than the directory names allow."""
    if len(disks) > MAX_DISKS:
        raise MaterializeError(f"Fitting takes too many ({len(disks)}) disks.")


def report(disks: Sequence[Disk], capacity: int) -> str:
    """
    Render a human-readable listing of every disk and its files.

    Each disk gets a header framed by dash lines, then one line per file
    with the right-aligned size, then a blank line.
    """
    lines = []
    for disk in disks:
        header = f"Disk #{disk.id}, {disk.free * 100 // capacity}% ({format_size(disk.free)}) free:"
        rule = "-" * len(header)
        lines.extend([rule, header, rule])

        for f in disk.files:
            lines.append(f"{format_size(f.size):>10} {f.path}")

        lines.append("")

    return "".join(line + "\n" for line in lines)


def count(disks: Sequence[Disk]) -> int:
    return len(disks)


def format_count(n: int) -> str:
    return f"{n} disk{'s' if n > 1 else ''}."


def disk_dir(destination_root: str, disk: Disk) -> str:
    """Directory a disk is linked into: <root>/<4-digit id>."""
    if disk.id > MAX_DISKS:
        raise MaterializeError(f"Disk #{disk.id} is too big a number for a 4 digit directory name.")
    return clean_path(f"{destination_root}/{disk.id:04d}")


def _link_file(src: str, dst: str) -> None:
    try:
        make_dirs(os.path.dirname(dst))
    except OSError as e:
        raise MaterializeError(f"Can't make directory for '{dst}': {e.strerror or e}") from e

    try:
        os.link(src, dst)
    except OSError as e:
        raise MaterializeError(f"Can't link '{src}' to '{dst}': {e.strerror}.") from e


def materialize(disks: Sequence[Disk], destination_root: str, progress: bool = False) -> int:
    """
    Hard-link the files of every disk into <destination_root>/NNNN.

    Prints a "source -> disk directory" line per file. Nothing is rolled
    back on failure, already created links stay in place.

    Args:
        disks: Packed disks in creation order.
        destination_root: Directory to create the disk directories in.
        progress: Show a progress bar on stderr.

    Returns:
        The number of links created.

    Raises:
        MaterializeError: If there are too many disks, or a directory or
            link can't be created.
    """
    check_disk_count(disks)

    linked = 0
    for disk in tqdm(disks, unit="disk", disable=not progress):
        path = disk_dir(destination_root, disk)

        for f in disk.files:
            dst = clean_path(f"{path}/{relative_link_name(f.path)}")
            _link_file(f.path, dst)
            tqdm.write(f"{f.path} -> {path}")
            linked += 1

    return linked
