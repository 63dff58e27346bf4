"""Typer CLI — ``brandlens analyze``, ``report``, ``status`` and friends."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from brandlens.config import load_settings
from brandlens.errors import BrandLensError, ConfigurationError, ProjectNotFoundError
from brandlens.schemas.config import Settings
from brandlens.schemas.entities import Industry, Project, Report

# Load .env file from the working directory (if it exists)
load_dotenv()

app = typer.Typer(
    name="brandlens",
    help="BrandLens — multi-model brand analysis of a website, with a consensus report.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load(config: Path | None) -> Settings:
    try:
        return load_settings(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)


def _open_store(settings: Settings, *, in_memory: bool = False):
    from brandlens.store.memory import MemoryStore
    from brandlens.store.sql import SqlStore

    if in_memory:
        return MemoryStore()
    return SqlStore(settings.database_url)


def _write_outputs(report: Report, output: Path | None, html: Path | None) -> None:
    from brandlens.report.html import render_html_report
    from brandlens.report.markdown import render_markdown_report

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(render_markdown_report(report))
        console.print(f"[green]Markdown report written to:[/] {output}")
    if html:
        html.parent.mkdir(parents=True, exist_ok=True)
        html.write_text(render_html_report(report))
        console.print(f"[green]HTML report written to:[/] {html}")


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------


@app.command()
def analyze(
    url: str = typer.Argument(..., help="Website to analyze, e.g. example.com"),
    industry: Industry = typer.Option(Industry.RESIDENTIAL_REAL_ESTATE, "--industry", "-i"),
    email: str = typer.Option(None, "--email", help="Contact email stored with the project."),
    region: str = typer.Option(None, "--region", help="Market or region the brand operates in."),
    statement: str = typer.Option(None, "--statement", help="Your own brand statement, compared with the models' view."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to brandlens.yml"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Use canned model output (no LLM API calls)."),
    browser: bool = typer.Option(False, "--browser", help="Render pages in headless Chromium (for JS-heavy sites)."),
    output: Path = typer.Option(None, "--output", "-o", help="Write the Markdown report here."),
    html: Path = typer.Option(None, "--html", help="Write the HTML report here."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Scrape a website, analyze it with every provider and assemble the report."""
    _setup_logging(verbose)
    settings = _load(config)

    from brandlens.prompts.industry import INDUSTRIES, is_industry_enabled

    if not is_industry_enabled(industry):
        console.print(
            f"[yellow]{INDUSTRIES[industry].label} has no tailored prompts yet; using the generic ones.[/]"
        )
    if dry_run:
        console.print("[yellow]DRY-RUN mode — no LLM API calls will be made; results are kept in memory.[/]\n")

    project = Project(
        url=url,
        industry=industry,
        email=email,
        region=region,
        human_brand_statement=statement,
    )
    console.print(f"[bold]Starting brand analysis for:[/] {url}\n")
    report = asyncio.run(_run_analysis(project, settings, dry_run=dry_run, browser=browser))

    console.print(f"\n[green]Analysis complete.[/] Report token: [bold]{report.url_token}[/]")
    _write_outputs(report, output, html)
    if not output and not html:
        from brandlens.report.markdown import render_markdown_report

        console.print(Markdown(render_markdown_report(report)))


async def _run_analysis(project: Project, settings: Settings, *, dry_run: bool, browser: bool) -> Report:
    from brandlens.pipeline.orchestrator import AnalysisOrchestrator
    from brandlens.pipeline.progress import ConsoleProgress
    from brandlens.providers.factory import create_providers
    from brandlens.report.assembler import ReportAssembler
    from brandlens.scraper.base import normalize_url

    try:
        providers = create_providers(settings, dry_run=dry_run)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/] {exc}")
        raise typer.Exit(code=1)

    if browser:
        from brandlens.scraper.browser import BrowserScraper
        scraper = BrowserScraper(settings.scraper)
    else:
        from brandlens.scraper.web import WebScraper
        scraper = WebScraper(settings.scraper)

    store = _open_store(settings, in_memory=dry_run)
    await store.init()
    try:
        project = project.model_copy(update={"url": normalize_url(project.url)})
        await store.create_project(project)
        with ConsoleProgress() as progress:
            orchestrator = AnalysisOrchestrator(store, scraper, providers, settings, listener=progress)
            try:
                await orchestrator.run(project.id)
            except BrandLensError as exc:
                console.print(f"[red]Analysis failed:[/] {exc}")
                raise typer.Exit(code=1)
        return await ReportAssembler(store, settings).assemble(project.id)
    finally:
        await store.close()


@app.command()
def report(
    token: str = typer.Argument(..., help="Report token printed by `brandlens analyze`."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to brandlens.yml"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the Markdown report here."),
    html: Path = typer.Option(None, "--html", help="Write the HTML report here."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Render a stored report by its token."""
    _setup_logging(verbose)
    settings = _load(config)

    found = asyncio.run(_find_report(settings, token))
    if found is None:
        console.print(f"[red]No report found for token[/] {token}")
        raise typer.Exit(code=1)

    _write_outputs(found, output, html)
    if not output and not html:
        from brandlens.report.markdown import render_markdown_report

        console.print(Markdown(render_markdown_report(found)))


async def _find_report(settings: Settings, token: str) -> Report | None:
    from brandlens.report.assembler import get_report_by_token

    store = _open_store(settings)
    await store.init()
    try:
        return await get_report_by_token(store, token)
    finally:
        await store.close()


@app.command()
def regenerate(
    project_id: str = typer.Argument(..., help="Project to build a new report version for."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to brandlens.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Assemble a new report version (with a new token) from a completed project."""
    _setup_logging(verbose)
    settings = _load(config)
    try:
        new = asyncio.run(_regenerate(settings, project_id))
    except BrandLensError as exc:
        console.print(f"[red]Cannot regenerate:[/] {exc}")
        raise typer.Exit(code=1)
    console.print(f"[green]Report v{new.version} stored.[/] Token: [bold]{new.url_token}[/]")


async def _regenerate(settings: Settings, project_id: str) -> Report:
    from brandlens.report.assembler import ReportAssembler

    store = _open_store(settings)
    await store.init()
    try:
        return await ReportAssembler(store, settings).assemble(project_id, regenerate=True)
    finally:
        await store.close()


@app.command()
def status(
    project_id: str = typer.Argument(...),
    config: Path = typer.Option(None, "--config", "-c", help="Path to brandlens.yml"),
    watch: bool = typer.Option(False, "--watch", "-w", help="Keep polling until the analysis finishes."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Show a project's progress and per-provider status."""
    _setup_logging(verbose)
    settings = _load(config)
    try:
        asyncio.run(_show_status(settings, project_id, watch=watch))
    except ProjectNotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        raise typer.Exit(code=1)


async def _show_status(settings: Settings, project_id: str, *, watch: bool) -> None:
    from brandlens.pipeline.status import get_status, watch_status

    store = _open_store(settings)
    await store.init()
    try:
        if watch:
            async for snapshot in watch_status(store, project_id, settings.status):
                _print_status(snapshot)
        else:
            _print_status(await get_status(store, project_id))
    finally:
        await store.close()


def _print_status(snapshot) -> None:
    console.print(
        f"[bold]{snapshot.project_id}[/] {snapshot.status.value} "
        f"{snapshot.progress_percent}% {snapshot.progress_message}"
    )
    table = Table("Provider", "Status", "Model", "Steps", "Tokens", "Cost", "Error")
    for p in snapshot.providers:
        table.add_row(
            p.provider.value, p.status.value, p.model or "—", str(p.steps_completed),
            str(p.tokens_used), f"${p.cost:.4f}", p.error or "",
        )
    console.print(table)
    if snapshot.report_token:
        console.print(f"Report token: [bold]{snapshot.report_token}[/]")


@app.command()
def validate(
    config: Path = typer.Option(..., "--config", "-c", help="Path to brandlens.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file without running an analysis."""
    _setup_logging(verbose)
    settings = _load(config)

    console.print("[green]Config is valid![/]\n")
    for provider, ps in settings.providers.items():
        console.print(
            f"  {provider.value:<10} {ps.model}  (temperature {ps.temperature}, max_tokens {ps.max_tokens})"
        )
    console.print(
        f"  Retry:      {settings.retry.max_attempts} attempt(s), {settings.retry.delay_seconds}s delay"
        + (" (exponential)" if settings.retry.exponential else "")
    )
    console.print(f"  Max pages:  {settings.scraper.max_pages}")
    console.print(f"  Database:   {settings.database_url}")


@app.command()
def industries() -> None:
    """List the supported industries and whether tailored prompts exist."""
    from brandlens.prompts.industry import INDUSTRIES

    table = Table("Industry", "Label", "Enabled", "Description")
    for industry, cfg in INDUSTRIES.items():
        table.add_row(industry.value, cfg.label, "[green]yes[/]" if cfg.enabled else "no", cfg.description)
    console.print(table)
