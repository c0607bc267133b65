"""Progress display for the batch ranking pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

PIPELINE_STAGES = ("Load", "Normalize", "Rank", "Suggestions", "Output")


@dataclass
class StageHandle:
    """One stage bar, counting the records it has processed."""

    owner: "PipelineProgress"
    task_id: TaskID
    name: str
    processed: int = 0
    expected: Optional[int] = None
    closed: bool = False

    def set_total(self, total: Optional[int]) -> None:
        self.expected = total
        self.owner.bar.update(self.task_id, total=total)

    def advance(self, amount: int = 1) -> None:
        if self.closed:
            raise RuntimeError(f"stage {self.name!r} is already closed")
        self.processed += amount
        self.owner.bar.advance(self.task_id, amount)

    def close(self) -> None:
        if self.closed:
            return
        # Stages that skipped records still show a full bar.
        if self.expected is not None and self.processed < self.expected:
            self.owner.bar.update(self.task_id, completed=self.expected)
        self.closed = True
        self.owner.stage_closed(self)

    def __enter__(self) -> "StageHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class PipelineProgress:
    """Bars for a fixed sequence of named stages, plus an overall bar.

    Stages must be opened by one of the names given at construction.
    Opening a stage closes the one before it. :attr:`counts` keeps how many
    records each closed stage processed.
    """

    def __init__(
        self,
        stages: Sequence[str] = PIPELINE_STAGES,
        console: Optional[Console] = None,
        enabled: bool = True,
    ) -> None:
        self.stages = tuple(stages)
        self.console = console or Console(stderr=True)
        self.bar = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(bar_width=None),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            disable=not enabled,
        )
        self.overall = self.bar.add_task("Feed pipeline", total=len(self.stages))
        self.counts: Dict[str, int] = {}
        self._open: Optional[StageHandle] = None

    def __enter__(self) -> "PipelineProgress":
        self.bar.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._open is not None:
            self._open.close()
        self.bar.stop()

    def stage(self, name: str, total: Optional[int] = None) -> StageHandle:
        if name not in self.stages:
            raise ValueError(f"unknown pipeline stage {name!r}; expected one of {', '.join(self.stages)}")
        if self._open is not None:
            self._open.close()
        handle = StageHandle(
            owner=self,
            task_id=self.bar.add_task(name, total=total),
            name=name,
            expected=total,
        )
        self.bar.update(self.overall, description=f"Feed pipeline: {name}")
        self._open = handle
        return handle

    def stage_closed(self, handle: StageHandle) -> None:
        self.counts[handle.name] = handle.processed
        self.bar.advance(self.overall, 1)
        if len(self.counts) == len(self.stages):
            self.bar.update(self.overall, description="Feed pipeline: done")
        if self._open is handle:
            self._open = None


__all__ = ["PIPELINE_STAGES", "PipelineProgress", "StageHandle"]
