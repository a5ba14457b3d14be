"""Command-line interface for interview feedback."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from interview_feedback.config import settings
from interview_feedback.core.models import FeedbackRequest, InterviewResults
from interview_feedback.feedback.analyzer import RetryPolicy
from interview_feedback.feedback.pipeline import FeedbackGenerationError, FeedbackPipeline
from interview_feedback.feedback.report import render_report
from interview_feedback.gateway.base import AIGateway
from interview_feedback.gateway.gemini import GeminiGateway

app = typer.Typer(
    name="interview-feedback",
    help="Interview Feedback - scored, explained feedback for practice interviews",
    add_completion=False,
)
console = Console()


def build_gateway() -> AIGateway:
    """Gateway used by the analyze command."""
    return GeminiGateway()


async def _run_pipeline(
    request: FeedbackRequest,
    deadline: Optional[float],
    concurrency: int
) -> InterviewResults:
    gateway = build_gateway()
    try:
        pipeline = FeedbackPipeline(
            gateway,
            retry_policy=RetryPolicy.from_settings(),
            max_concurrency=concurrency,
            deadline=settings.pipeline_deadline
        )
        return await pipeline.generate_feedback(request, deadline=deadline)
    finally:
        close = getattr(gateway, "close", None)
        if close is not None:
            await close()


def _positive_deadline(value: Optional[float]) -> Optional[float]:
    if value is not None and value <= 0:
        raise typer.BadParameter("must be greater than 0")
    return value


def _summary_table(results: InterviewResults) -> Table:
    summary = results.summary
    table = Table(title=f"Interview {results.interview_id}")
    table.add_column("#", style="cyan")
    table.add_column("Question")
    table.add_column("Score", style="green", justify="right")

    for index, analysis in enumerate(results.answers, start=1):
        table.add_row(str(index), analysis.question, str(analysis.score))

    table.add_section()
    table.add_row(
        "",
        f"Overall ({summary.performance_level.value}, "
        f"{summary.answered_questions}/{summary.total_questions} answered)",
        str(summary.overall_score)
    )
    return table


@app.command()
def analyze(
    request_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Feedback request JSON file"),
    deadline: Optional[float] = typer.Option(
        None, callback=_positive_deadline, help="Overall deadline in seconds"
    ),
    concurrency: int = typer.Option(settings.max_concurrency, min=1, help="Concurrent answer analyses"),
    report: bool = typer.Option(False, "--report", help="Output a Markdown report instead of JSON"),
    output: Optional[Path] = typer.Option(None, help="Write output to this file"),
) -> None:
    """Generate feedback for a completed interview."""
    try:
        request = FeedbackRequest.model_validate_json(request_file.read_text(encoding="utf-8"))
    except ValidationError as e:
        console.print(f"[red]Invalid feedback request:[/red] {e.error_count()} validation error(s)")
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            console.print(f"  {location}: {error['msg']}")
        raise typer.Exit(code=2)

    try:
        results = asyncio.run(_run_pipeline(request, deadline, concurrency))
    except FeedbackGenerationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    console.print(_summary_table(results))

    if report:
        rendered = render_report(results)
    else:
        rendered = json.dumps(results.model_dump(by_alias=True, mode="json"), indent=2)

    if output:
        output.write_text(rendered, encoding="utf-8")
        console.print(f"Results written to {output}")
    else:
        typer.echo(rendered)


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, help="Host to bind to"),
    port: int = typer.Option(settings.api_port, help="Port to bind to"),
    reload: bool = typer.Option(settings.reload, help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    console.print(f"Starting Interview Feedback API on {host}:{port}")
    uvicorn.run(
        "interview_feedback.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@app.command()
def config() -> None:
    """Show current configuration."""
    table = Table(title="Interview Feedback Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    # Show non-sensitive settings
    table.add_row("Gemini API Key", "configured" if settings.gemini_api_key else "missing")
    table.add_row("Gemini Model", settings.gemini_model)
    table.add_row("Gateway Timeout", f"{settings.gateway_timeout:g}s")
    table.add_row("Max Retries", str(settings.max_retries))
    table.add_row("Retry Delay", f"{settings.retry_delay:g}s")
    table.add_row("Max Concurrency", str(settings.max_concurrency))
    table.add_row(
        "Pipeline Deadline",
        f"{settings.pipeline_deadline:g}s" if settings.pipeline_deadline else "none"
    )
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Log Level", settings.log_level)

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from interview_feedback import __version__
    console.print(f"Interview Feedback v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
