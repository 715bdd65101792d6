"""
Tree scanner: builds an in-memory model of a directory tree.

The walk uses an explicit work stack rather than recursion so that very deep
trees do not run into the interpreter's recursion limit.  Listing order from
the filesystem is kept as-is; ordering is the linearizer's job.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from vpacker.exceptions import ScanError
from vpacker.utils.fs import FileSystem, ListedEntry, LocalFileSystem

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class FileSystemNode:
    """One file or directory observed during a scan."""

    identity: str
    is_directory: bool
    byte_size: int = 0
    modified_at: datetime = EPOCH
    children: Tuple["FileSystemNode", ...] = ()

    @property
    def name(self) -> str:
        return os.path.basename(self.identity.rstrip("/\\")) or self.identity

    @classmethod
    def file(cls, identity: str, byte_size: int, modified_at: Optional[datetime]) -> "FileSystemNode":
        return cls(
            identity=identity,
            is_directory=False,
            byte_size=byte_size,
            modified_at=modified_at or EPOCH,
        )

    @classmethod
    def directory(cls, identity: str, children=()) -> "FileSystemNode":
        return cls(identity=identity, is_directory=True, children=tuple(children))


def wrap_in_root(node: FileSystemNode, root_name: str) -> FileSystemNode:
    """Return a synthetic directory named *root_name* whose only child is *node*."""
    return FileSystemNode.directory(root_name, (node,))


def _list(fs: FileSystem, path: str) -> List[ListedEntry]:
    try:
        listed = list(fs.list_entries(path))
    except OSError as e:
        raise ScanError(f"cannot list {path}: {e}", path) from e
    seen = set()
    for entry in listed:
        if entry.name in seen:
            raise ScanError(f"duplicate entry {entry.name!r} in {path}", path)
        seen.add(entry.name)
        if not entry.is_directory and (entry.size is None or entry.size < 0):
            raise ScanError(f"no usable size for {fs.join(path, entry.name)}", path)
    return listed


def scan(path: str, fs: FileSystem | None = None) -> FileSystemNode:
    """
    Scan the directory at *path* and return its tree.

    Any listing or stat failure, at any depth, raises :class:`ScanError` and
    no partial tree is returned.
    """
    fs = fs or LocalFileSystem()

    # Pass 1: list every directory. A child is always discovered after its
    # parent, so walking `discovered` backwards visits children first.
    discovered: List[str] = []
    listings: Dict[str, List[ListedEntry]] = {}
    pending = [path]
    while pending:
        current = pending.pop()
        listed = _list(fs, current)
        discovered.append(current)
        listings[current] = listed
        for entry in listed:
            if entry.is_directory:
                pending.append(fs.join(current, entry.name))

    # Pass 2: assemble nodes bottom-up.
    built: Dict[str, FileSystemNode] = {}
    for directory in reversed(discovered):
        children = []
        for entry in listings[directory]:
            child_path = fs.join(directory, entry.name)
            if entry.is_directory:
                children.append(built.pop(child_path))
            else:
                children.append(FileSystemNode.file(child_path, entry.size, entry.modified_at))
        built[directory] = FileSystemNode.directory(directory, children)
    return built[path]


def format_tree(node: FileSystemNode) -> str:
    """Render *node* as indented ``dir:``/``file:`` lines (listing order)."""
    lines = []
    stack = [(node, 0)]
    while stack:
        current, level = stack.pop()
        indent = "  " * level
        if current.is_directory:
            lines.append(f"{indent}dir:  {current.identity}")
            for child in reversed(current.children):
                stack.append((child, level + 1))
        else:
            lines.append(f"{indent}file: {current.identity}")
    return "\n".join(lines)
