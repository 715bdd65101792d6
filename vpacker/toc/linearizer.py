"""
Flatten a scanned tree into an ordered list of TOC entries.

Directories become a begin marker, their children (sorted byte-wise by name),
and a closing ``..`` marker, so a reader can rebuild nesting from a flat list.
"""
from __future__ import annotations

import math
from typing import List, Optional

from vpacker.toc.entry import TOCEntry
from vpacker.tree.scanner import FileSystemNode


def sort_key(node: FileSystemNode) -> bytes:
    return node.name.encode("utf-8", "surrogateescape")


def unix_seconds(node: FileSystemNode) -> int:
    return int(math.floor(node.modified_at.timestamp()))


def linearize(node: FileSystemNode, display_name: Optional[str] = None) -> List[TOCEntry]:
    """
    Return the TOC entries for *node*, depth first.

    *display_name* replaces the name of *node* itself (not of its
    descendants).  Traversal uses an explicit stack; pending closing markers
    sit on the same stack as pending children.
    """
    out: List[TOCEntry] = []
    stack: list = [(node, display_name)]
    while stack:
        item = stack.pop()
        if isinstance(item, TOCEntry):
            out.append(item)
            continue
        current, name = item
        name = name or current.name
        if not current.is_directory:
            out.append(TOCEntry.file(name, current.byte_size, unix_seconds(current), current.identity))
            continue
        out.append(TOCEntry.begin(name, current.identity))
        stack.append(TOCEntry.end(current.identity))
        for child in sorted(current.children, key=sort_key, reverse=True):
            stack.append((child, None))
    return out
