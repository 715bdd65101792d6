"""Filesystem capability consumed by the scanner and the encoder.

Only two operations are needed:

1. ``list_entries(path)`` – the immediate children of a directory, each with
   its name, whether it is a directory and, for files, size and mtime.
2. ``open_for_read(path)`` – a binary stream over a file's bytes.

Anything exposing those two methods can stand in for :class:`LocalFileSystem`
(tests use an in-memory fake).  Errors are propagated as ``OSError``; callers
translate them into project errors.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, List, Optional, Protocol


@dataclass(frozen=True)
class ListedEntry:
    """One child returned by :meth:`FileSystem.list_entries`."""

    name: str
    is_directory: bool
    size: Optional[int] = None
    modified_at: Optional[datetime] = None


class FileSystem(Protocol):
    def list_entries(self, path: str) -> List[ListedEntry]: ...

    def open_for_read(self, path: str) -> BinaryIO: ...

    def join(self, parent: str, name: str) -> str: ...


class LocalFileSystem:
    """:class:`FileSystem` backed by ``os.scandir``."""

    def list_entries(self, path: str) -> List[ListedEntry]:
        entries = []
        with os.scandir(path) as it:
            for child in it:
                if child.is_dir():
                    entries.append(ListedEntry(name=child.name, is_directory=True))
                    continue
                st = child.stat()
                entries.append(ListedEntry(
                    name=child.name,
                    is_directory=False,
                    size=int(st.st_size),
                    modified_at=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                ))
        return entries

    def open_for_read(self, path: str) -> BinaryIO:
        return open(path, "rb")

    @staticmethod
    def join(parent: str, name: str) -> str:
        return os.path.join(parent, name)
