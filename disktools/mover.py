"""
Date-based moves for disktools.

Moves files into directories named after their modification date,
e.g. with the default format "%Y%m":

    notes.txt (modified Jan 31 2025) -> 202501/notes.txt
"""

import os
import shutil
import stat
import time
from datetime import datetime
from pathlib import Path

from tqdm import tqdm

from .config import MoveConfig
from .scanner import IMAGE_EXTENSIONS, get_exif_date
from .utils import make_dirs

DEFAULT_FORMAT = "%Y%m"


class MoveError(RuntimeError):
    """A file can't be moved to its date directory."""


def date_dir_for(path: str, fmt: str = DEFAULT_FORMAT, use_exif: bool = False,
                 st: os.stat_result | None = None) -> str:
    """
    Name of the date directory for a file.

    Uses the local modification time, or the EXIF capture date for images
    when `use_exif` is set and the image has one.

    Raises:
        MoveError: If the format yields an empty name.
    """
    if st is None:
        st = os.stat(path)

    when = time.localtime(st.st_mtime)
    if use_exif and Path(path).suffix.lower() in IMAGE_EXTENSIONS:
        taken = get_exif_date(Path(path))
        if taken:
            # Cameras write placeholders like 0000:00:00 00:00:00
            try:
                when = datetime.fromisoformat(taken).timetuple()
            except ValueError:
                pass

    try:
        datestr = time.strftime(fmt, when)
    except ValueError as e:
        raise MoveError(f"bad format: {fmt} ({e})") from e

    if not datestr:
        raise MoveError(f"bad format: {fmt}")

    return datestr


def move_to_date(src: str, fmt: str = DEFAULT_FORMAT, dest_root: str = ".",
                 use_exif: bool = False, dry_run: bool = False) -> Path:
    """
    Move a regular file into <dest_root>/<date>/<basename>.

    Args:
        src: The file to move. A symlink to a regular file is moved
            itself, dated by the file it points to.
        fmt: strftime format for the directory name.
        dest_root: Directory the date directories live in.
        use_exif: Prefer the EXIF capture date for images.
        dry_run: Only work out the target, don't touch anything.

    Returns:
        The target path.

    Raises:
        MoveError: If the source is missing or not a regular file, the
            target already exists, or the directory or move fails.
    """
    try:
        st = os.stat(src)
    except OSError as e:
        raise MoveError(f"stat({src}): {e.strerror}.") from e

    if not stat.S_ISREG(st.st_mode):
        raise MoveError(f"{src} is not a regular file.")

    directory = Path(dest_root) / date_dir_for(src, fmt, use_exif, st)
    target = directory / os.path.basename(src.rstrip("/"))

    if dry_run:
        return target

    try:
        make_dirs(str(directory))
    except OSError as e:
        raise MoveError(f"mkdir({directory}): {e.strerror or e}.") from e

    if target.exists():
        raise MoveError(f"rename({src}, {target}): destination exists.")

    try:
        shutil.move(src, str(target))
    except OSError as e:
        raise MoveError(f"rename({src}, {target}): {e.strerror}.") from e

    return target


def list_directory_files(directory: str = ".") -> list[str]:
    """
    Entries of a directory that aren't directories, sorted by name.

    Paths are joined onto `directory` unless it is ".".

    Raises:
        MoveError: If the directory or an entry can't be read.
    """
    try:
        names = sorted(os.listdir(directory))
    except OSError as e:
        raise MoveError(f"{directory}: {e.strerror}.") from e

    files = []
    for name in names:
        path = name if directory == "." else os.path.join(directory, name)
        try:
            if os.path.isdir(path):
                continue
            os.stat(path)
        except OSError as e:
            raise MoveError(f"{path}: {e.strerror}.") from e
        files.append(path)

    return files


def move_files_to_date(paths: list[str], config: MoveConfig,
                       progress: bool = False) -> list[tuple[str, Path]]:
    """
    Move files into date directories, stopping at the first failure.

    Returns:
        (source, target) pairs for the files handled, in order.
    """
    moved = []
    for src in tqdm(paths, unit="file", disable=not progress):
        target = move_to_date(src, config.fmt, config.dest_root, config.use_exif, config.dry_run)
        if config.dry_run:
            tqdm.write(f"  [WOULD MOVE] {src} -> {target}")
        moved.append((src, target))

    return moved
