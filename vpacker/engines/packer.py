"""
Pack engine: turns every logical unit under ``<input>/data`` into VP archives.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from vpacker.archive.writer import archive_filenames, ensure_absent, write_archive
from vpacker.config.schema import AppConfig
from vpacker.exceptions import ScanError
from vpacker.toc.entry import TOCEntry
from vpacker.toc.linearizer import linearize
from vpacker.toc.splitter import ArchiveGroup, split
from vpacker.tree.scanner import FileSystemNode, scan, wrap_in_root
from vpacker.utils.fs import FileSystem, LocalFileSystem
from vpacker.utils.logging import get_logger


@dataclass(frozen=True)
class UnitPlan:
    """Everything needed to write one logical unit's archives."""

    name: str
    node: FileSystemNode
    entries: Tuple[TOCEntry, ...]
    groups: Tuple[ArchiveGroup, ...]
    paths: Tuple[str, ...]

    @property
    def payload_size(self) -> int:
        return sum(g.payload_size for g in self.groups)


class _LoggingSplitObserver:
    def __init__(self, logger, unit: str):
        self.logger = logger
        self.unit = unit

    def group_closed(self, index: int, group: ArchiveGroup) -> None:
        self.logger.debug(
            f"[{self.unit}] group {index + 1}: {len(group)} entries, "
            f"{group.payload_size:,} payload bytes, {group.reopened} reopened directories"
        )


class PackEngine:
    """Plan and write the archives for one input root.

    Every immediate child of ``<input_root>/<data_directory>`` is a logical
    unit.  Units are scanned, linearized (wrapped in the configured synthetic
    root) and split; each group then becomes one archive file.

    Example
    -------
    >>> engine = PackEngine(app_cfg, "game", "out")
    >>> engine.run()

    Planning is cached, so ``num_steps()`` followed by ``run()`` scans once.
    """

    def __init__(self,
                 cfg: AppConfig,
                 input_root: str,
                 output_dir: str,
                 fs: Optional[FileSystem] = None,
                 logger=None):
        self.cfg = cfg
        self.input_root = input_root
        self.output_dir = output_dir
        self.fs = fs or LocalFileSystem()
        self.logger = logger or get_logger("packer")
        self._plans: Optional[List[UnitPlan]] = None

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def _discover_units(self) -> List[FileSystemNode]:
        data_dir = self.fs.join(self.input_root, self.cfg.input.data_directory)
        try:
            listed = self.fs.list_entries(data_dir)
        except NotADirectoryError as e:
            raise ScanError(f"{data_dir} is not a directory", data_dir) from e
        except OSError as e:
            raise ScanError(f"cannot list {data_dir}: {e}", data_dir) from e

        units = []
        for entry in sorted(listed, key=lambda e: e.name.encode("utf-8", "surrogateescape")):
            path = self.fs.join(data_dir, entry.name)
            if entry.is_directory:
                units.append(scan(path, self.fs))
            else:
                units.append(FileSystemNode.file(path, entry.size, entry.modified_at))
        return units

    def _plan_unit(self, node: FileSystemNode) -> UnitPlan:
        archive_cfg = self.cfg.archive
        toc_root = wrap_in_root(node, archive_cfg.root_name) if archive_cfg.root_name else node
        entries = linearize(toc_root)
        groups = split(
            entries,
            archive_cfg.max_payload_bytes,
            observer=_LoggingSplitObserver(self.logger, node.name),
        )
        names = archive_filenames(node.name, len(groups), self.cfg.output.extension)
        paths = tuple(os.path.join(self.output_dir, n) for n in names)
        return UnitPlan(node.name, node, tuple(entries), tuple(groups), paths)

    def _prepare(self):
        if self._plans is not None:
            self.logger.debug("Using cached pack plan.")
            return
        self.logger.info(f"Scanning {self.input_root}")
        self._plans = [self._plan_unit(node) for node in self._discover_units()]
        for plan in self._plans:
            self.logger.info(
                f"Unit '{plan.name}': {len(plan.entries)} TOC entries, "
                f"{plan.payload_size:,} bytes, {len(plan.groups)} archive(s)"
            )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def plans(self) -> List[UnitPlan]:
        self._prepare()
        return list(self._plans)

    def num_steps(self) -> int:
        """Total payload bytes to copy across all units."""
        self._prepare()
        return sum(p.payload_size for p in self._plans)

    def layers(self) -> List[Tuple[str, int]]:
        """(unit name, payload bytes) pairs for the progress display."""
        self._prepare()
        return [(p.name, p.payload_size) for p in self._plans]

    def run(self, progress=None, dry_run: bool = False) -> List[str]:
        """Write every planned archive and return the paths written.

        The *progress* argument is the CLI's ``ProgressManager``; it must
        expose ``update(layer_name, advance)``.
        """
        self._prepare()
        written = []
        archive_cfg = self.cfg.archive
        for plan in self._plans:
            ensure_absent(plan.paths)
            if dry_run:
                for path, group in zip(plan.paths, plan.groups):
                    self.logger.info(f"[dry-run] {path}: {len(group)} entries, {group.payload_size:,} bytes")
                continue

            on_bytes = None
            if progress is not None:
                def on_bytes(n, _layer=plan.name):
                    progress.update(_layer, advance=n)

            for path, group in zip(plan.paths, plan.groups):
                size = write_archive(
                    path,
                    group,
                    self.fs,
                    magic=archive_cfg.magic_bytes,
                    version=archive_cfg.version,
                    on_bytes=on_bytes,
                )
                self.logger.info(f"Wrote {path} ({size:,} bytes, {len(group)} entries)")
                written.append(path)
        return written
