"""Persistence interface used by the pipeline, consensus and report layers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from brandlens.errors import InvalidStatusTransition
from brandlens.schemas.entities import (
    Competitor,
    Finding,
    FindingKind,
    LlmRun,
    Project,
    ProjectStatus,
    Provider,
    Report,
    Source,
)


def check_transition(current: ProjectStatus, target: ProjectStatus) -> None:
    if not current.can_transition_to(target):
        raise InvalidStatusTransition(current.value, target.value)


class Store(ABC):
    """Create-only writes for everything except project status and progress.

    ``get_project`` raises ``ProjectNotFoundError``; ``set_status`` raises
    ``InvalidStatusTransition`` for a move the lifecycle does not allow.
    """

    async def init(self) -> None:
        """Prepare the backing storage (create tables, etc.)."""

    async def close(self) -> None:
        """Release connections."""

    # -- projects ---------------------------------------------------------

    @abstractmethod
    async def create_project(self, project: Project) -> Project: ...

    @abstractmethod
    async def get_project(self, project_id: str) -> Project: ...

    @abstractmethod
    async def set_status(
        self, project_id: str, status: ProjectStatus, message: str | None = None
    ) -> Project: ...

    @abstractmethod
    async def update_progress(self, project_id: str, percent: int, message: str) -> Project: ...

    # -- append-only records ----------------------------------------------

    @abstractmethod
    async def add_source(self, source: Source) -> Source: ...

    @abstractmethod
    async def list_sources(self, project_id: str) -> list[Source]: ...

    @abstractmethod
    async def add_llm_run(self, run: LlmRun) -> LlmRun: ...

    @abstractmethod
    async def list_llm_runs(
        self, project_id: str, provider: Provider | None = None
    ) -> list[LlmRun]: ...

    @abstractmethod
    async def add_finding(self, finding: Finding) -> Finding: ...

    @abstractmethod
    async def list_findings(
        self,
        project_id: str,
        kind: FindingKind | None = None,
        provider: Provider | None = None,
    ) -> list[Finding]: ...

    @abstractmethod
    async def add_competitor(self, competitor: Competitor) -> Competitor: ...

    @abstractmethod
    async def list_competitors(self, project_id: str) -> list[Competitor]: ...

    # -- reports ----------------------------------------------------------

    @abstractmethod
    async def add_report(self, report: Report) -> Report: ...

    @abstractmethod
    async def get_report_by_token(self, token: str) -> Report | None: ...

    @abstractmethod
    async def latest_report(self, project_id: str) -> Report | None:
        """The highest-version report for a project, if any."""
