"""
disktools
=========

Small command-line tools for personal file management: fit files onto
fixed size disks, move files into date named directories, and play
matching files in random order.
"""

__version__ = "1.0.0"

from .scanner import FileRecord, catalog
from .packing import Disk, pack, validate_disks
from .executor import report, count, format_count, materialize, MAX_DISKS
from .utils import parse_size, format_size

__all__ = [
    "FileRecord",
    "catalog",
    "Disk",
    "pack",
    "validate_disks",
    "report",
    "count",
    "format_count",
    "materialize",
    "MAX_DISKS",
    "parse_size",
    "format_size",
]
