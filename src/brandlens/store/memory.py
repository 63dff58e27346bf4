"""Dict-backed store for tests and dry runs."""

from __future__ import annotations

from datetime import datetime, timezone

from brandlens.errors import ProjectNotFoundError
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
from brandlens.store.base import Store, check_transition


class MemoryStore(Store):
    """Keeps every record in insertion order.  Returned objects are copies."""

    def __init__(self) -> None:
        self.projects: dict[str, Project] = {}
        self.sources: list[Source] = []
        self.llm_runs: list[LlmRun] = []
        self.findings: list[Finding] = []
        self.competitors: list[Competitor] = []
        self.reports: list[Report] = []

    async def create_project(self, project: Project) -> Project:
        self.projects[project.id] = project.model_copy()
        return project

    async def get_project(self, project_id: str) -> Project:
        try:
            return self.projects[project_id].model_copy()
        except KeyError:
            raise ProjectNotFoundError(project_id) from None

    async def set_status(
        self, project_id: str, status: ProjectStatus, message: str | None = None
    ) -> Project:
        project = await self.get_project(project_id)
        check_transition(project.status, status)
        update: dict = {"status": status, "updated_at": datetime.now(timezone.utc)}
        if message is not None:
            update["progress_message"] = message
        self.projects[project_id] = project.model_copy(update=update)
        return self.projects[project_id].model_copy()

    async def update_progress(self, project_id: str, percent: int, message: str) -> Project:
        project = await self.get_project(project_id)
        self.projects[project_id] = project.model_copy(update={
            "progress_percent": percent,
            "progress_message": message,
            "updated_at": datetime.now(timezone.utc),
        })
        return self.projects[project_id].model_copy()

    async def add_source(self, source: Source) -> Source:
        self.sources.append(source)
        return source

    async def list_sources(self, project_id: str) -> list[Source]:
        return [s for s in self.sources if s.project_id == project_id]

    async def add_llm_run(self, run: LlmRun) -> LlmRun:
        self.llm_runs.append(run)
        return run

    async def list_llm_runs(
        self, project_id: str, provider: Provider | None = None
    ) -> list[LlmRun]:
        return [
            r for r in self.llm_runs
            if r.project_id == project_id and (provider is None or r.provider is provider)
        ]

    async def add_finding(self, finding: Finding) -> Finding:
        self.findings.append(finding)
        return finding

    async def list_findings(
        self,
        project_id: str,
        kind: FindingKind | None = None,
        provider: Provider | None = None,
    ) -> list[Finding]:
        return [
            f for f in self.findings
            if f.project_id == project_id
            and (kind is None or f.kind is kind)
            and (provider is None or f.provider is provider)
        ]

    async def add_competitor(self, competitor: Competitor) -> Competitor:
        self.competitors.append(competitor)
        return competitor

    async def list_competitors(self, project_id: str) -> list[Competitor]:
        return [c for c in self.competitors if c.project_id == project_id]

    async def add_report(self, report: Report) -> Report:
        self.reports.append(report)
        return report

    async def get_report_by_token(self, token: str) -> Report | None:
        return next((r for r in self.reports if r.url_token == token), None)

    async def latest_report(self, project_id: str) -> Report | None:
        reports = [r for r in self.reports if r.project_id == project_id]
        return max(reports, key=lambda r: r.version) if reports else None
