"""
Split a linear TOC into size-bounded archive groups.

A group is closed as soon as the next file would push its payload past the
limit (or past the int32 range).  The next group starts with copies of every
directory-begin marker that is still open at that point, so each physical
archive carries the full directory context of its first file.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Tuple

from vpacker.archive.format import INT32_MAX
from vpacker.toc.entry import TOCEntry, payload_size


@dataclass(frozen=True)
class ArchiveGroup:
    """Entries of one physical archive.

    The first ``reopened`` entries are copies of directory-begin markers
    carried over from the previous group.
    """

    entries: Tuple[TOCEntry, ...]
    reopened: int = 0

    @property
    def payload_size(self) -> int:
        return payload_size(self.entries)

    @property
    def own_entries(self) -> Tuple[TOCEntry, ...]:
        """Entries without the carried-over markers."""
        return self.entries[self.reopened:]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)


class SplitObserver(Protocol):
    def group_closed(self, index: int, group: ArchiveGroup) -> None: ...


@dataclass
class _GroupBuilder:
    entries: List[TOCEntry] = field(default_factory=list)
    reopened: int = 0
    payload: int = 0
    holds_files: bool = False

    def would_overflow(self, size: int, limit: int) -> bool:
        proposed = self.payload + size
        return self.holds_files and (proposed > INT32_MAX or proposed > limit)

    def add(self, entry: TOCEntry):
        self.entries.append(entry)
        if entry.is_file:
            self.payload += entry.size
            self.holds_files = True

    def build(self) -> ArchiveGroup:
        return ArchiveGroup(tuple(self.entries), self.reopened)


def split(
    entries: Iterable[TOCEntry],
    max_payload_bytes: int,
    observer: Optional[SplitObserver] = None,
) -> List[ArchiveGroup]:
    """
    Partition *entries* into groups whose payload stays within
    *max_payload_bytes*.  Never fails and always returns at least one group.

    A single file larger than the limit cannot be split; it is placed in a
    group of its own (after the reopened markers) and the encoder decides
    whether that group still fits the format.
    """
    groups: List[ArchiveGroup] = []
    open_dirs: List[TOCEntry] = []
    builder = _GroupBuilder()

    def close(b: _GroupBuilder):
        group = b.build()
        if observer is not None:
            observer.group_closed(len(groups), group)
        groups.append(group)

    for entry in entries:
        if entry.is_file and builder.would_overflow(entry.size, max_payload_bytes):
            close(builder)
            builder = _GroupBuilder(entries=list(open_dirs), reopened=len(open_dirs))
        builder.add(entry)
        if entry.is_directory_end:
            if open_dirs:
                open_dirs.pop()
        elif entry.is_directory:
            open_dirs.append(entry)
    close(builder)
    return groups
