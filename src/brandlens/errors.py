"""Exception types shared across the analysis pipeline."""

from __future__ import annotations


class BrandLensError(Exception):
    """Base class for all errors raised by brandlens."""


class ConfigurationError(BrandLensError):
    """Raised at construction time when required configuration is missing."""


class ProjectNotFoundError(BrandLensError):
    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class ScrapeError(BrandLensError):
    """The main page of a site could not be scraped."""


class ModelOutputError(BrandLensError, ValueError):
    """A model response could not be parsed into structured JSON."""


class InvalidStatusTransition(BrandLensError):
    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot move project from {current} to {requested}")
        self.current = current
        self.requested = requested


class ReportNotReadyError(BrandLensError):
    """A report was requested for a project that has not completed."""


class AnalysisCancelled(BrandLensError):
    """The caller cancelled a running analysis."""
