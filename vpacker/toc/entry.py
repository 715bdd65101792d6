"""
TOC entry value type.
"""
from __future__ import annotations

from dataclasses import dataclass

DIRECTORY_END_NAME = ".."


@dataclass(frozen=True)
class TOCEntry:
    """One line of an archive's table of contents.

    ``source_identity`` points back at the scanned path so the encoder can read
    the payload; it is never written to the archive.
    """

    size: int
    name: str
    timestamp_seconds: int = 0
    source_identity: str = ""
    is_directory: bool = False
    is_directory_end: bool = False

    @property
    def is_directory_begin(self) -> bool:
        return self.is_directory and not self.is_directory_end

    @property
    def is_file(self) -> bool:
        return not self.is_directory

    @classmethod
    def begin(cls, name: str, source_identity: str = "") -> "TOCEntry":
        return cls(size=0, name=name, source_identity=source_identity, is_directory=True)

    @classmethod
    def end(cls, source_identity: str = "") -> "TOCEntry":
        return cls(
            size=0,
            name=DIRECTORY_END_NAME,
            source_identity=source_identity,
            is_directory=True,
            is_directory_end=True,
        )

    @classmethod
    def file(cls, name: str, size: int, timestamp_seconds: int, source_identity: str) -> "TOCEntry":
        return cls(
            size=size,
            name=name,
            timestamp_seconds=timestamp_seconds,
            source_identity=source_identity,
        )


def payload_size(entries) -> int:
    """Sum of file sizes in *entries*; directory markers count as zero."""
    return sum(e.size for e in entries if e.is_file)
