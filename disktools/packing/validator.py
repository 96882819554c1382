"""
Packing validation for disktools.

Checks that a packing result is sound before anything is printed or linked.
"""

from typing import Sequence

from ..scanner import FileRecord
from .packer import Disk


def validate_disks(files: Sequence[FileRecord], disks: Sequence[Disk], capacity: int) -> None:
    """
    Validate a packing result against the catalog it was made from.

    Checks for:
    - Disks numbered 1..n in order
    - Disks with a different capacity
    - Disks holding more than their capacity
    - Free space out of sync with the files on a disk
    - Files placed on more than one disk
    - Catalog files missing from every disk
    - Files on a disk that aren't in the catalog

    Args:
        files: The catalog that was packed.
        disks: The packer output.
        capacity: The configured disk size.

    Raises:
        ValueError: Listing every violation found.
    """
    problems = []

    # Identity, not equality: two files may share path and size
    catalog_ids = {id(f) for f in files}
    placed: dict[int, int] = {}  # id(file) -> disk id

    for index, disk in enumerate(disks, 1):
        if disk.id != index:
            problems.append(f"Disk #{disk.id} is at position {index}")

        if disk.capacity != capacity:
            problems.append(f"Disk #{disk.id} has capacity {disk.capacity}, expected {capacity}")

        used = sum(f.size for f in disk.files)
        if used > capacity:
            problems.append(f"Disk #{disk.id} holds {used} bytes, capacity is {capacity}")

        if disk.free != capacity - used:
            problems.append(f"Disk #{disk.id} reports {disk.free} free, expected {capacity - used}")

        for f in disk.files:
            key = id(f)
            if key in placed:
                problems.append(f"'{f.path}' is on disk #{placed[key]} and disk #{disk.id}")
                continue
            if key not in catalog_ids:
                problems.append(f"'{f.path}' on disk #{disk.id} is not in the catalog")
            placed[key] = disk.id

    missing = [f for f in files if id(f) not in placed]
    for f in missing[:5]:
        problems.append(f"'{f.path}' was not placed on any disk")
    if len(missing) > 5:
        problems.append(f"... and {len(missing) - 5} more unplaced files")

    if problems:
        raise ValueError("Packing is inconsistent:\n" + "\n".join(f"  - {p}" for p in problems))
