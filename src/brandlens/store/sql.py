"""SQLAlchemy (asyncio) store — SQLite via aiosqlite by default."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel
from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

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
from brandlens.schemas.findings import dump_payload
from brandlens.store.base import Store, check_transition

logger = logging.getLogger(__name__)

Base = declarative_base()

E = TypeVar("E", bound=BaseModel)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(String(32), primary_key=True)
    url = Column(String(2048), nullable=False)
    industry = Column(String(64), nullable=False)
    status = Column(String(16), nullable=False, index=True)
    progress_message = Column(Text, nullable=False, default="")
    progress_percent = Column(Integer, nullable=False, default=0)
    created_by = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    region = Column(String(255), nullable=True)
    human_brand_statement = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class SourceRow(Base):
    __tablename__ = "sources"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=False, unique=True)
    project_id = Column(String(32), nullable=False, index=True)
    type = Column(String(16), nullable=False)
    url = Column(String(2048), nullable=False)
    content_hash = Column(String(64), nullable=False)
    text_excerpt = Column(Text, nullable=False)
    full_content = Column(Text, nullable=False)
    metadata_ = Column("metadata", JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class LlmRunRow(Base):
    __tablename__ = "llm_runs"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=False, unique=True)
    project_id = Column(String(32), nullable=False, index=True)
    provider = Column(String(16), nullable=False)
    step = Column(String(32), nullable=True)
    model = Column(String(128), nullable=False)
    temperature = Column(Float, nullable=False)
    max_tokens = Column(Integer, nullable=False)
    raw_response = Column(JSON, nullable=False)
    input_tokens = Column(Integer, nullable=False, default=0)
    output_tokens = Column(Integer, nullable=False, default=0)
    tokens_used = Column(Integer, nullable=False, default=0)
    cost = Column(Float, nullable=False, default=0.0)
    status = Column(String(16), nullable=False)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class FindingRow(Base):
    __tablename__ = "findings"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=False, unique=True)
    project_id = Column(String(32), nullable=False, index=True)
    kind = Column(String(32), nullable=False)
    provider = Column(String(16), nullable=False)
    llm_run_id = Column(String(32), nullable=True)
    step = Column(String(32), nullable=True)
    value = Column(JSON, nullable=False)
    evidence_ref = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class CompetitorRow(Base):
    __tablename__ = "competitors"

    id = Column(String(32), primary_key=True)
    project_id = Column(String(32), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    axis_x = Column(Float, nullable=False)
    axis_y = Column(Float, nullable=False)
    notes = Column(Text, nullable=False)


class ReportRow(Base):
    __tablename__ = "reports"

    id = Column(String(32), primary_key=True)
    project_id = Column(String(32), nullable=False, index=True)
    url_token = Column(String(64), nullable=False, unique=True)
    is_public = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False, default=1)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Entity <-> row conversion
# ---------------------------------------------------------------------------


def _columns(entity: BaseModel) -> dict[str, Any]:
    values = entity.model_dump()
    if isinstance(entity, Finding):
        values["value"] = dump_payload(entity.value)
    if isinstance(entity, Source):
        values["metadata_"] = values.pop("metadata")
    return {k: v.value if isinstance(v, Enum) else v for k, v in values.items()}


def _entity(model: type[E], row: Base) -> E:
    values = {}
    for column in row.__table__.columns:
        attr = "metadata_" if column.name == "metadata" else column.name
        values[column.name] = getattr(row, attr)
    return model.model_validate(values)


class SqlStore(Store):
    """Each write is its own short transaction."""

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.engine = create_async_engine(database_url, echo=echo, future=True)
        self._session = sessionmaker(bind=self.engine, class_=AsyncSession, expire_on_commit=False)

    async def init(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    async def _add(self, row_type: type[Base], entity: E) -> E:
        async with self._session() as session:
            session.add(row_type(**_columns(entity)))
            await session.commit()
        return entity

    async def _list(self, model: type[E], stmt: Any) -> list[E]:
        async with self._session() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [_entity(model, row) for row in rows]

    # -- projects ---------------------------------------------------------

    async def create_project(self, project: Project) -> Project:
        return await self._add(ProjectRow, project)

    async def get_project(self, project_id: str) -> Project:
        async with self._session() as session:
            row = await session.get(ProjectRow, project_id)
        if row is None:
            raise ProjectNotFoundError(project_id)
        return _entity(Project, row)

    async def set_status(
        self, project_id: str, status: ProjectStatus, message: str | None = None
    ) -> Project:
        async with self._session() as session:
            row = await session.get(ProjectRow, project_id)
            if row is None:
                raise ProjectNotFoundError(project_id)
            check_transition(ProjectStatus(row.status), status)
            row.status = status.value
            if message is not None:
                row.progress_message = message
            row.updated_at = datetime.now(timezone.utc)
            await session.commit()
            return _entity(Project, row)

    async def update_progress(self, project_id: str, percent: int, message: str) -> Project:
        async with self._session() as session:
            row = await session.get(ProjectRow, project_id)
            if row is None:
                raise ProjectNotFoundError(project_id)
            row.progress_percent = percent
            row.progress_message = message
            row.updated_at = datetime.now(timezone.utc)
            await session.commit()
            return _entity(Project, row)

    # -- append-only records ----------------------------------------------

    async def add_source(self, source: Source) -> Source:
        return await self._add(SourceRow, source)

    async def list_sources(self, project_id: str) -> list[Source]:
        stmt = select(SourceRow).where(SourceRow.project_id == project_id).order_by(SourceRow.seq)
        return await self._list(Source, stmt)

    async def add_llm_run(self, run: LlmRun) -> LlmRun:
        return await self._add(LlmRunRow, run)

    async def list_llm_runs(
        self, project_id: str, provider: Provider | None = None
    ) -> list[LlmRun]:
        stmt = select(LlmRunRow).where(LlmRunRow.project_id == project_id)
        if provider is not None:
            stmt = stmt.where(LlmRunRow.provider == provider.value)
        return await self._list(LlmRun, stmt.order_by(LlmRunRow.seq))

    async def add_finding(self, finding: Finding) -> Finding:
        return await self._add(FindingRow, finding)

    async def list_findings(
        self,
        project_id: str,
        kind: FindingKind | None = None,
        provider: Provider | None = None,
    ) -> list[Finding]:
        stmt = select(FindingRow).where(FindingRow.project_id == project_id)
        if kind is not None:
            stmt = stmt.where(FindingRow.kind == kind.value)
        if provider is not None:
            stmt = stmt.where(FindingRow.provider == provider.value)
        return await self._list(Finding, stmt.order_by(FindingRow.seq))

    async def add_competitor(self, competitor: Competitor) -> Competitor:
        return await self._add(CompetitorRow, competitor)

    async def list_competitors(self, project_id: str) -> list[Competitor]:
        stmt = select(CompetitorRow).where(CompetitorRow.project_id == project_id)
        return await self._list(Competitor, stmt)

    # -- reports ----------------------------------------------------------

    async def add_report(self, report: Report) -> Report:
        return await self._add(ReportRow, report)

    async def get_report_by_token(self, token: str) -> Report | None:
        reports = await self._list(Report, select(ReportRow).where(ReportRow.url_token == token))
        return reports[0] if reports else None

    async def latest_report(self, project_id: str) -> Report | None:
        stmt = (
            select(ReportRow)
            .where(ReportRow.project_id == project_id)
            .order_by(ReportRow.version.desc())
            .limit(1)
        )
        reports = await self._list(Report, stmt)
        return reports[0] if reports else None
