"""
Run configuration for the disktools commands.

Each command builds one of these from its parsed arguments and passes it
on explicitly.
"""

from dataclasses import dataclass, field


@dataclass
class FitConfig:
    """Settings for a `fit` run."""
    disk_size: int
    paths: list[str] = field(default_factory=list)
    dest_dir: str | None = None  # link disks here instead of printing them
    count_only: bool = False
    recursive: bool = False

    @classmethod
    def from_args(cls, args) -> "FitConfig":
        """Create FitConfig from an argparse namespace."""
        return cls(
            disk_size=args.size,
            paths=[str(p) for p in args.paths],
            dest_dir=args.link_dir,
            count_only=args.count,
            recursive=args.recursive,
        )


@dataclass
class MoveConfig:
    """Settings for a `mvtodate` run."""
    fmt: str = "%Y%m"
    dest_root: str = "."
    use_exif: bool = False
    dry_run: bool = False

    @classmethod
    def from_args(cls, args) -> "MoveConfig":
        return cls(
            fmt=args.format,
            dest_root=args.dest,
            use_exif=args.exif,
            dry_run=args.dry_run,
        )


@dataclass
class ShuffleConfig:
    """Settings for a `shuffle` run."""
    command: list[str]
    root: str = "."
    extension: str | None = None
    media_type: str | None = None
    verbose: bool = False
    seed: int | None = None

    @classmethod
    def from_args(cls, args) -> "ShuffleConfig":
        return cls(
            command=list(args.player),
            root=args.path,
            extension=args.extension,
            media_type=args.media_type,
            verbose=args.verbose,
            seed=args.seed,
        )
