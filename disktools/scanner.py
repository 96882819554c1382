"""
Directory scanning and file cataloging.

Functions for walking input paths and building the list of files to pack,
plus EXIF date lookup for images.
"""

import os
import stat
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import TAGS

from .utils import format_size

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.tiff', '.webp', '.heic'}


class CatalogError(RuntimeError):
    """An input path can't be cataloged."""


@dataclass(frozen=True)
class FileRecord:
    """
    One input file to be packed.

    The catalog list owns these; disks only hold references to them.
    """
    path: str
    size: int


def get_exif_date(filepath: Path) -> str | None:
    """Extract the 'DateTimeOriginal' from an image's EXIF data."""
    try:
        with Image.open(filepath) as img:
            exif = img.getexif()
            if not exif:
                return None

            # Prefer DateTimeOriginal, fall back to DateTime
            for wanted in ('DateTimeOriginal', 'DateTime'):
                for tag_id in exif:
                    if TAGS.get(tag_id, tag_id) != wanted:
                        continue
                    date_str = exif.get(tag_id)
                    # Format is usually "YYYY:MM:DD HH:MM:SS"
                    if isinstance(date_str, str) and len(date_str) >= 19:
                        return date_str[:10].replace(':', '-') + 'T' + date_str[11:19]

    except (UnidentifiedImageError, OSError):
        pass
    return None


def _stat(path: str) -> os.stat_result:
    try:
        return os.stat(path)
    except (OSError, ValueError) as e:
        reason = e.strerror if isinstance(e, OSError) else str(e)
        raise CatalogError(f"Can't access '{path}': {reason}.") from e


def _record(path: str, st: os.stat_result, capacity: int) -> FileRecord:
    if not stat.S_ISREG(st.st_mode):
        raise CatalogError(f"'{path}' is not a regular file.")

    if st.st_size > capacity:
        raise CatalogError(f"Can never fit '{path}' ({format_size(st.st_size)}).")

    return FileRecord(path, st.st_size)


def _walk_error(error: OSError):
    raise CatalogError(f"Can't access '{error.filename}': {error.strerror}.") from error


def scan_directory(root: str, recursive: bool = False):
    """
    Walk a directory and yield (path, stat) for every non-directory entry.

    Entries are visited in name order. Symlinks are followed, but a
    directory already walked (a symlink loop or a second link to the same
    directory) is not entered again. Without `recursive` only the direct
    children of `root` are visited.

    Raises:
        CatalogError: If a directory can't be read or an entry can't be stat-ed.
    """
    root_st = _stat(root)
    seen = {(root_st.st_dev, root_st.st_ino)}

    for dirpath, dirnames, filenames in os.walk(root, onerror=_walk_error, followlinks=True):
        dirnames.sort()
        if not recursive:
            dirnames[:] = []

        # Pruned in place so os.walk never descends twice into one directory
        unseen = []
        for dirname in dirnames:
            dir_st = _stat(os.path.join(dirpath, dirname))
            key = (dir_st.st_dev, dir_st.st_ino)
            if key not in seen:
                seen.add(key)
                unseen.append(dirname)
        dirnames[:] = unseen

        for filename in sorted(filenames):
            filepath = os.path.join(dirpath, filename)
            yield filepath, _stat(filepath)


def catalog(paths: list[str], recursive: bool, capacity: int) -> list[FileRecord]:
    """
    Build the list of files to pack from the given paths.

    Args:
        paths: Files and/or directories, as given on the command line.
        recursive: Descend into subdirectories of the given directories.
        capacity: The disk size; larger files are rejected.

    Returns:
        FileRecords in discovery order.

    Raises:
        CatalogError: On an inaccessible path, a non-regular file or a file
            that can never fit on a disk. Nothing is returned in that case.
    """
    files: list[FileRecord] = []

    for path in paths:
        path = str(path)
        st = _stat(path)

        if stat.S_ISDIR(st.st_mode):
            for filepath, entry_st in scan_directory(path, recursive):
                files.append(_record(filepath, entry_st, capacity))
        else:
            files.append(_record(path, st, capacity))

    return files
