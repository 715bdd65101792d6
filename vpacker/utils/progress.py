"""
progress.py
--------------------------------

A Rich-powered byte progress display: one **aggregate** bar on top and one
bar per logical unit underneath, Docker-pull style.

ASCII-only fallback is used when stdout is not a terminal, when ``TERM`` is
``dumb``, or when forced::

    export VPACKER_PROGRESS_ASCII=1
"""

from __future__ import annotations

import os
import sys
from typing import List, Tuple

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TransferSpeedColumn,
)


def _build_columns(overall: bool = False, title: str = "Packing"):
    """Return the Rich columns for the overall bar or a unit bar."""
    if overall:
        return (
            TextColumn(f"[bold green][+] {title}", justify="right"),
            BarColumn(bar_width=None, complete_style="cyan"),
            DownloadColumn(binary_units=True),
            TimeElapsedColumn(),
        )
    return (
        SpinnerColumn(style="bold magenta"),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(bar_width=None),
        DownloadColumn(binary_units=True),
        TransferSpeedColumn(),
        TimeElapsedColumn(),
    )


class ProgressManager:
    """Multi-layer byte progress display.

    Parameters
    ----------
    layers : list[tuple[str, int]]
        (label, total bytes) pairs, one per logical unit.
    title : str
        Text shown next to the overall bar.
    ascii : bool
        Force the plain-text fallback.
    """

    def __init__(self,
                 layers: List[Tuple[str, int]],
                 *,
                 title: str = "Packing",
                 ascii: bool = False):
        self.console = Console()
        term_env = os.environ.get('TERM', '')
        rich_supported = self.console.is_terminal and term_env.lower() != 'dumb'
        ascii_env = os.environ.get('VPACKER_PROGRESS_ASCII', '').lower() in ('1', 'true', 'yes', 'y')
        self.use_rich = rich_supported and not ascii and not ascii_env
        self.title = title
        self.grand_total = sum(total for _, total in layers)
        self.layer_totals = dict(layers)
        self.layer_completed = {name: 0 for name, _ in layers}
        self.overall_completed = 0
        self.live = None
        if self.use_rich:
            self.overall = Progress(*_build_columns(overall=True, title=title), console=self.console)
            self.layers = Progress(*_build_columns(), console=self.console)
            self.total_task = self.overall.add_task("overall", total=self.grand_total)
            self.task_ids = {name: self.layers.add_task(name, total=total) for name, total in layers}
            self.layout = Group(self.overall, self.layers)

    def __enter__(self):
        if self.use_rich:
            self.live = Live(self.layout, console=self.console, refresh_per_second=10)
            self.live.__enter__()
        return self

    def update(self, layer_name: str, advance: int = 1):
        """Advance the given layer and the overall bar by *advance* bytes."""
        if layer_name not in self.layer_completed:
            raise KeyError(f"Unknown layer '{layer_name}'")
        self.layer_completed[layer_name] += advance
        self.overall_completed += advance
        if self.use_rich:
            self.layers.update(self.task_ids[layer_name], advance=advance)
            self.overall.update(self.total_task, advance=advance)
            return
        parts = [f"{self.title}: {self.overall_completed}/{self.grand_total}"]
        for name, total in self.layer_totals.items():
            parts.append(f"{name}: {self.layer_completed[name]}/{total}")
        sys.stdout.write("\r" + " | ".join(parts))
        sys.stdout.flush()

    @property
    def finished(self) -> bool:
        return self.overall_completed >= self.grand_total

    def __exit__(self, exc_type, exc, tb):
        if self.use_rich:
            if self.live:
                self.live.__exit__(exc_type, exc, tb)
        else:
            sys.stdout.write("\n")
            sys.stdout.flush()
