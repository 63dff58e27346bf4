"""Live status surface — snapshots of a project's progress, and a poller."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable

from pydantic import BaseModel

from brandlens.schemas.config import StatusSettings
from brandlens.schemas.entities import (
    ALL_PROVIDERS,
    ANALYSIS_STEPS,
    LlmRun,
    ProjectStatus,
    Provider,
    ProviderStatus,
    RunStatus,
)
from brandlens.store.base import Store

logger = logging.getLogger(__name__)


class ProviderSnapshot(BaseModel):
    provider: Provider
    status: ProviderStatus = ProviderStatus.WAITING
    model: str | None = None
    steps_completed: int = 0
    tokens_used: int = 0
    cost: float = 0.0
    error: str | None = None


class StatusSnapshot(BaseModel):
    project_id: str
    status: ProjectStatus
    progress_percent: int = 0
    progress_message: str = ""
    providers: list[ProviderSnapshot] = []
    total_runs: int = 0
    completed_runs: int = 0
    failed_runs: int = 0
    tokens_used: int = 0
    cost: float = 0.0
    report_token: str | None = None


def _provider_snapshot(provider: Provider, runs: list[LlmRun], project_status: ProjectStatus) -> ProviderSnapshot:
    if not runs:
        return ProviderSnapshot(provider=provider)

    completed = [r for r in runs if r.status is RunStatus.COMPLETED]
    failed = [r for r in runs if r.status is RunStatus.FAILED]
    if failed:
        status = ProviderStatus.FAILED
    elif len(completed) >= len(ANALYSIS_STEPS):
        status = ProviderStatus.COMPLETED
    elif project_status is ProjectStatus.FAILED:
        status = ProviderStatus.FAILED
    else:
        status = ProviderStatus.RUNNING

    return ProviderSnapshot(
        provider=provider,
        status=status,
        model=runs[-1].model,
        steps_completed=len(completed),
        tokens_used=sum(r.tokens_used for r in runs),
        cost=sum(r.cost for r in runs),
        error=failed[-1].error if failed else None,
    )


async def get_status(store: Store, project_id: str) -> StatusSnapshot:
    """Current status of a project.  Raises ``ProjectNotFoundError``."""
    project = await store.get_project(project_id)
    runs = await store.list_llm_runs(project_id)
    report = await store.latest_report(project_id)

    return StatusSnapshot(
        project_id=project.id,
        status=project.status,
        progress_percent=project.progress_percent,
        progress_message=project.progress_message,
        providers=[
            _provider_snapshot(provider, [r for r in runs if r.provider is provider], project.status)
            for provider in ALL_PROVIDERS
        ],
        total_runs=len(runs),
        completed_runs=sum(1 for r in runs if r.status is RunStatus.COMPLETED),
        failed_runs=sum(1 for r in runs if r.status is RunStatus.FAILED),
        tokens_used=sum(r.tokens_used for r in runs),
        cost=sum(r.cost for r in runs),
        report_token=report.url_token if report else None,
    )


async def watch_status(
    store: Store,
    project_id: str,
    settings: StatusSettings | None = None,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[StatusSnapshot]:
    """Yield a snapshot whenever the status changes.

    Polls every ``poll_interval_seconds``.  Stops after yielding a terminal
    status, or once ``max_lifetime_seconds`` of polling has elapsed.
    """
    settings = settings or StatusSettings()
    loop = asyncio.get_running_loop()
    deadline = loop.time() + settings.max_lifetime_seconds
    previous: StatusSnapshot | None = None
    polls = 0

    while True:
        snapshot = await get_status(store, project_id)
        if snapshot != previous:
            yield snapshot
            previous = snapshot
        if snapshot.status.is_terminal:
            return
        polls += 1
        # Poll count also bounds the lifetime; injected sleeps do not advance the clock
        if loop.time() >= deadline or polls * settings.poll_interval_seconds >= settings.max_lifetime_seconds:
            logger.info("Status watch for %s reached its maximum lifetime", project_id)
            return
        await sleep(settings.poll_interval_seconds)
