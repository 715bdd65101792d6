"""
Archive encoder: writes one archive group as a VP container.

Every check that can fail on the group's own data (name widths, int32
ranges, total size) runs before the first byte is written, so a failing
group never leaves a header that describes the wrong size.
"""
from __future__ import annotations

from typing import BinaryIO, Callable, Iterable, List, Optional, Sequence

from vpacker.archive.format import (
    DEFAULT_MAGIC,
    DEFAULT_VERSION,
    HEADER,
    HEADER_LENGTH,
    MAX_NAME_BYTES,
    TOC_RECORD,
    encode_name,
    fits_int32,
)
from vpacker.exceptions import ArchiveOverflowError, NameTooLongError, ReadError, WriteError
from vpacker.toc.entry import TOCEntry
from vpacker.utils.fs import FileSystem

COPY_CHUNK_SIZE = 1024 * 1024


def payload_offsets(entries: Sequence[TOCEntry]) -> List[int]:
    """Offset written for each entry: the payload cursor when it is visited.

    The cursor starts at the header length and only moves past files, so
    directory markers share the offset of whatever file follows them.
    """
    offsets = []
    cursor = HEADER_LENGTH
    for entry in entries:
        offsets.append(cursor)
        if entry.is_file:
            cursor += entry.size
    return offsets


def check_group(entries: Sequence[TOCEntry]) -> int:
    """Validate *entries* against the format limits; return the payload size."""
    total = 0
    for entry in entries:
        name_bytes = encode_name(entry.name)
        if len(name_bytes) > MAX_NAME_BYTES:
            raise NameTooLongError(
                f"name {entry.name!r} is {len(name_bytes)} bytes, the limit is {MAX_NAME_BYTES}"
            )
        if b"\x00" in name_bytes:
            raise NameTooLongError(f"name {entry.name!r} contains a null byte")
        if entry.size < 0 or not fits_int32(entry.size):
            raise ArchiveOverflowError(f"size of {entry.source_identity} does not fit int32: {entry.size}")
        if not fits_int32(entry.timestamp_seconds):
            raise ArchiveOverflowError(
                f"timestamp of {entry.source_identity} does not fit int32: {entry.timestamp_seconds}"
            )
        if entry.is_file:
            total += entry.size
    if total < 0 or not fits_int32(total + HEADER_LENGTH):
        raise ArchiveOverflowError(f"overflowed total size: {total} payload bytes")
    if not fits_int32(len(entries)):
        raise ArchiveOverflowError(f"too many entries: {len(entries)}")
    return total


def _write(out: BinaryIO, data: bytes):
    try:
        out.write(data)
    except OSError as e:
        raise WriteError(f"failed writing archive: {e}") from e


def _copy_file(entry: TOCEntry, fs: FileSystem, out: BinaryIO, on_bytes=None):
    path = entry.source_identity
    try:
        src = fs.open_for_read(path)
    except OSError as e:
        raise ReadError(f"cannot open {path}: {e}") from e
    copied = 0
    with src:
        while True:
            try:
                chunk = src.read(COPY_CHUNK_SIZE)
            except OSError as e:
                raise ReadError(f"cannot read {path}: {e}") from e
            if not chunk:
                break
            copied += len(chunk)
            if copied > entry.size:
                break
            _write(out, chunk)
            if on_bytes is not None:
                on_bytes(len(chunk))
    if copied != entry.size:
        raise ReadError(f"{path} changed since it was scanned: expected {entry.size} bytes")


def encode(
    group: Iterable[TOCEntry],
    fs: FileSystem,
    out: BinaryIO,
    *,
    magic: bytes = DEFAULT_MAGIC,
    version: int = DEFAULT_VERSION,
    on_bytes: Optional[Callable[[int], None]] = None,
) -> int:
    """
    Write *group* to *out* and return the number of bytes written.

    *on_bytes* is called with the size of every payload chunk copied, which
    is what the CLI progress bars advance by.
    """
    entries = tuple(group)
    if len(magic) != 4:
        raise ValueError(f"magic must be 4 bytes, got {magic!r}")
    if not fits_int32(version):
        raise ArchiveOverflowError(f"version does not fit int32: {version}")
    total = check_group(entries)

    _write(out, HEADER.pack(magic, version, total + HEADER_LENGTH, len(entries)))

    for entry in entries:
        if entry.is_file:
            _copy_file(entry, fs, out, on_bytes)

    for offset, entry in zip(payload_offsets(entries), entries):
        _write(out, TOC_RECORD.pack(offset, entry.size, encode_name(entry.name), entry.timestamp_seconds))

    return HEADER_LENGTH + total + len(entries) * TOC_RECORD.size
