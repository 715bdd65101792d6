"""Shared fixtures: an in-memory stand-in for the filesystem capability."""

import io
from datetime import datetime, timezone

import pytest

from vpacker.utils.fs import ListedEntry


class MemoryFileSystem:
    """Filesystem built from nested dicts.

    Directories are dicts; files are ``(bytes, mtime_seconds)`` tuples.
    ``reverse_listing`` flips the listing order so tests can check that
    nothing depends on it.
    """

    def __init__(self, tree, reverse_listing=False):
        self.tree = tree
        self.reverse_listing = reverse_listing
        self.opened = []

    def _lookup(self, path):
        node = self.tree
        for part in [p for p in path.split("/") if p]:
            if not isinstance(node, dict) or part not in node:
                raise FileNotFoundError(path)
            node = node[part]
        return node

    def list_entries(self, path):
        node = self._lookup(path)
        if not isinstance(node, dict):
            raise NotADirectoryError(path)
        entries = []
        for name, child in node.items():
            if isinstance(child, dict):
                entries.append(ListedEntry(name=name, is_directory=True))
            else:
                data, mtime = child
                entries.append(ListedEntry(
                    name=name,
                    is_directory=False,
                    size=len(data),
                    modified_at=datetime.fromtimestamp(mtime, tz=timezone.utc),
                ))
        if self.reverse_listing:
            entries.reverse()
        return entries

    def open_for_read(self, path):
        node = self._lookup(path)
        if isinstance(node, dict):
            raise IsADirectoryError(path)
        self.opened.append(path)
        return io.BytesIO(node[0])

    @staticmethod
    def join(parent, name):
        return f"{parent.rstrip('/')}/{name}"


@pytest.fixture
def memory_fs():
    def make(tree, reverse_listing=False):
        return MemoryFileSystem(tree, reverse_listing=reverse_listing)
    return make


def reconstruct(entries):
    """Rebuild ``(name, children)`` nesting from a flat TOC list.

    Returns the top-level items and the depth left open at the end.
    """
    root = []
    stack = [root]
    for entry in entries:
        if entry.is_directory_end:
            stack.pop()
        elif entry.is_directory:
            children = []
            stack[-1].append((entry.name, children))
            stack.append(children)
        else:
            stack[-1].append(entry.name)
    return root, len(stack) - 1


@pytest.fixture
def rebuild():
    return reconstruct
