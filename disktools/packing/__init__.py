"""
Packing module for disktools.

Provides:
- First-fit descending disk packing
- Packing result validation
"""

from .packer import Disk, PackingError, pack
from .validator import validate_disks

__all__ = [
    "Disk",
    "PackingError",
    "pack",
    "validate_disks",
]
