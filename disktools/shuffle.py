"""
Random playback for disktools.

Finds files by extension or media type and runs a command on each of them
in random order, one at a time.
"""

import os
import random
import subprocess
from typing import Sequence

from .utils import has_extension


class ShuffleError(RuntimeError):
    """A file search or command run failed."""


def find_matching_files(root: str = ".", extension: str | None = None,
                        media_type: str | None = None) -> list[str]:
    """
    Recursively find regular files matching an extension or media type.

    Symlinks are not followed or matched. If both are given the extension
    wins.

    Args:
        root: Where to start searching.
        extension: File name suffix to match, case-sensitive (e.g. ".mp3").
        media_type: MIME type prefix to match (e.g. "audio/" or "video/mp4").

    Returns:
        Matching paths in walk order.

    Raises:
        ValueError: If neither extension nor media type is given.
        ShuffleError: If libmagic can't identify a file.
    """
    if extension is None and media_type is None:
        raise ValueError("Extension or media type is not set.")

    detector = None
    if extension is None:
        # libmagic is only needed for media type searches
        import magic
        detector = magic.Magic(mime=True)

    matches = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            filepath = os.path.join(dirpath, filename)

            if os.path.islink(filepath) or not os.path.isfile(filepath):
                continue

            if extension is not None:
                playable = has_extension(filename, extension)
            else:
                try:
                    file_type = detector.from_file(filepath)
                except (OSError, magic.MagicException) as e:
                    raise ShuffleError(f"Can't identify '{filepath}': {e}") from e
                playable = file_type.startswith(media_type)

            if playable:
                matches.append(filepath)

    return matches


def shuffled(files: Sequence[str], rng: random.Random) -> list[str]:
    """Return a shuffled copy of `files` using the given random source."""
    result = list(files)
    rng.shuffle(result)
    return result


def play_files(files: Sequence[str], command: Sequence[str], verbose: bool = False) -> int:
    """
    Run `command <file>` for every file, waiting for each to finish.

    The command's exit status is not checked, playback goes on with the
    next file.

    Returns:
        The number of files played.

    Raises:
        ShuffleError: If the command can't be started.
    """
    played = 0
    for filename in files:
        if verbose:
            print(f'Playing "{filename}".')

        try:
            subprocess.run([*command, filename], check=False)
        except OSError as e:
            raise ShuffleError(f"Can't execute '{command[0]}': {e.strerror}.") from e
        played += 1

    return played
