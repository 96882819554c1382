"""
Utility functions for disktools.

Includes:
- Console/UI helpers
- Human-readable size parsing and formatting
- Path cleaning and directory creation
"""

import os
import re

from rich.console import Console
from rich.markup import escape

# Global console instance. Diagnostics go to stderr, stdout is kept for
# command output.
console = Console(stderr=True)

KB = 1000
MB = KB * KB
GB = MB * KB
TB = GB * KB

SIZE_UNITS = {
    "b": 1,
    "k": KB,
    "m": MB,
    "g": GB,
    "t": TB,
}

_SIZE_PATTERN = re.compile(r"^\s*([+-]?\d+)([a-z]*)$", re.IGNORECASE)


def print_error(msg: str):
    console.print(f"[bold red]ERROR:[/bold red] {escape(msg)}", highlight=False, soft_wrap=True)

def print_warning(msg: str):
    console.print(f"[bold yellow]WARNING:[/bold yellow] {escape(msg)}", highlight=False, soft_wrap=True)

def print_success(msg: str):
    console.print(f"[bold green]SUCCESS:[/bold green] {escape(msg)}", highlight=False, soft_wrap=True)


# -----------------------------------------------------------------------------
# Sizes
# -----------------------------------------------------------------------------

def parse_size(size_str: str) -> int:
    """
    Parse a size like '700m' or '4g' into bytes.

    Units are single letters (b, k, m, g, t), case-insensitive and
    1000-based. A bare number is taken as bytes.

    Args:
        size_str: The size string from the command line.

    Returns:
        The size in bytes.

    Raises:
        ValueError: If the string is not a number or the unit is unknown.
    """
    match = _SIZE_PATTERN.match(size_str)
    if not match:
        raise ValueError(f"Can't convert string '{size_str}' to a number.")

    num = int(match.group(1))
    unit = match.group(2).lower()
    if not unit:
        return num

    if unit not in SIZE_UNITS:
        raise ValueError(f"Unknown unit: '{match.group(2)}'")

    return num * SIZE_UNITS[unit]


def format_size(num: float) -> str:
    """
    Format a byte count for humans: '512B', '1.50K', '4.70G'.

    Divides by 1000 while the value is larger than 1000 and a bigger unit
    is left. Whole bytes get no decimals.
    """
    units = ["B", "K", "M", "G", "T"]
    i = 0
    num = float(num)
    while num > KB and i < len(units) - 1:
        num /= KB
        i += 1

    decimals = 0 if i == 0 else 2
    return f"{num:.{decimals}f}{units[i]}"


# -----------------------------------------------------------------------------
# Paths
# -----------------------------------------------------------------------------

def clean_path(path: str) -> str:
    """
    Collapse repeated slashes and drop a trailing slash.

    The root path '/' is kept as is. Nothing else is normalized, so '.'
    and '..' components survive.
    """
    cleaned = re.sub(r"/+", "/", path)
    if len(cleaned) > 1 and cleaned.endswith("/"):
        cleaned = cleaned[:-1]
    return cleaned


def relative_link_name(path: str) -> str:
    """
    Turn a catalog path into a name that stays below a destination directory.

    Leading slashes and '.'/'..' components are dropped:
    '../music/a.mp3' -> 'music/a.mp3', '/srv/x' -> 'srv/x'.
    """
    parts = [p for p in path.split("/") if p not in ("", ".", "..")]
    return "/".join(parts)


def make_dirs(path: str) -> None:
    """
    Create a directory and its parents with mode 0700.

    An existing directory is fine.

    Raises:
        NotADirectoryError: If the path exists but is not a directory.
        OSError: If a directory can't be created.
    """
    if os.path.exists(path) and not os.path.isdir(path):
        raise NotADirectoryError(f"'{path}' is not a directory.")
    os.makedirs(path, mode=0o700, exist_ok=True)


def has_extension(filename: str, extension: str) -> bool:
    """Case-sensitive suffix check on a file name."""
    return filename.endswith(extension)
