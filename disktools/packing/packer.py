"""
First-fit descending disk packing.

Files are sorted by size, largest first, and each one goes onto the first
disk that still has room for it. When no disk has room a new one is made.
Big files rapidly fill the disks while the smaller remaining files usually
make a good final fit. This is not optimal packing and doesn't try to be.
"""

from dataclasses import dataclass, field
from typing import Iterable

from ..scanner import FileRecord


class PackingError(RuntimeError):
    """A packing invariant was violated."""


@dataclass
class Disk:
    """
    A disk with `free` space left, holding references to catalog files.

    `id` is 1-based and follows creation order within a packing run.
    """
    id: int
    capacity: int
    free: int = field(init=False)
    files: list[FileRecord] = field(default_factory=list, init=False)

    def __post_init__(self):
        self.free = self.capacity

    @property
    def used(self) -> int:
        return self.capacity - self.free

    def add(self, file: FileRecord) -> bool:
        """Add a file if it fits. Returns whether it was added."""
        if file.size > self.free:
            return False

        self.files.append(file)
        self.free -= file.size
        return True


def pack(files: Iterable[FileRecord], capacity: int) -> list[Disk]:
    """
    Fit files onto disks of `capacity` bytes.

    Args:
        files: Catalog files in any order. Each must fit on an empty disk.
        capacity: Disk size in bytes.

    Returns:
        Disks in creation order, numbered 1..n.

    Raises:
        ValueError: If capacity is not positive.
        PackingError: If a file doesn't fit on a fresh disk, meaning an
            oversized file got past the catalog.
    """
    if capacity <= 0:
        raise ValueError(f"Disk capacity must be positive, got {capacity}")

    # Stable: equal sizes keep their catalog order
    ordered = sorted(files, key=lambda f: f.size, reverse=True)
    disks: list[Disk] = []

    for file in ordered:
        for disk in disks:
            if disk.add(file):
                break
        else:
            disk = Disk(id=len(disks) + 1, capacity=capacity)
            if not disk.add(file):
                raise PackingError(
                    f"Can't add '{file.path}' ({file.size} bytes) to an empty disk of {capacity} bytes"
                )
            disks.append(disk)

    return disks
