"""Progress tracking for one analysis, plus a Rich display for the CLI."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from brandlens.schemas.entities import ANALYSIS_STEPS, AnalysisStep, Provider
from brandlens.store.base import Store

logger = logging.getLogger(__name__)

console = Console()

# Percent milestones
SCRAPING_PERCENT = 5
SOURCES_SAVED_PERCENT = 20
ANALYSIS_END_PERCENT = 95
COMPLETED_PERCENT = 100


class ProgressListener(Protocol):
    """Receives per-provider events as the analysis runs."""

    def phase(self, label: str) -> None: ...

    def step_started(self, provider: Provider, step: AnalysisStep) -> None: ...

    def provider_finished(self, provider: Provider) -> None: ...

    def provider_failed(self, provider: Provider, error: str) -> None: ...


class ProgressTracker:
    """Writes progress to the store.  The stored percent never decreases.

    During analysis the percent moves from 20 to 95 with the number of
    provider-steps done; a failed provider's remaining steps are counted
    as done so the bar still reaches 95.
    """

    def __init__(self, store: Store, project_id: str, providers: int) -> None:
        self.store = store
        self.project_id = project_id
        self.total_steps = max(providers * len(ANALYSIS_STEPS), 1)
        self.steps_done = 0
        self.percent = 0
        self._lock = asyncio.Lock()

    async def update(self, percent: int, message: str) -> None:
        async with self._lock:
            self.percent = max(self.percent, percent)
            await self.store.update_progress(self.project_id, self.percent, message)

    async def steps_finished(self, count: int, message: str) -> None:
        self.steps_done = min(self.steps_done + count, self.total_steps)
        span = ANALYSIS_END_PERCENT - SOURCES_SAVED_PERCENT
        percent = SOURCES_SAVED_PERCENT + span * self.steps_done // self.total_steps
        await self.update(percent, message)


# ----------------------------------------------------------------------
# Rich console display
# ----------------------------------------------------------------------


class ConsoleProgress:
    """One spinner per provider, showing its current step."""

    def __init__(self) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_ids: dict[Provider, int] = {}

    def __enter__(self) -> "ConsoleProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def phase(self, label: str) -> None:
        self._progress.console.print(Panel(f"[bold]{label}[/bold]", style="blue"))

    def _task(self, provider: Provider) -> int:
        if provider not in self._task_ids:
            self._task_ids[provider] = self._progress.add_task(f"[cyan]{provider.value}[/]", total=None)
        return self._task_ids[provider]

    def step_started(self, provider: Provider, step: AnalysisStep) -> None:
        self._progress.update(
            self._task(provider),
            description=f"[cyan]{provider.value}[/] — step {step.number}/{len(ANALYSIS_STEPS)}: {step.label}",
        )

    def provider_finished(self, provider: Provider) -> None:
        self._progress.update(
            self._task(provider),
            description=f"[green]✓ {provider.value}[/]",
            completed=True,
        )

    def provider_failed(self, provider: Provider, error: str) -> None:
        self._progress.update(
            self._task(provider),
            description=f"[red]✗ {provider.value}: {error}[/]",
            completed=True,
        )
