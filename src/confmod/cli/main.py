"""Typer CLI entry point."""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Optional

import orjson
import typer

from confmod.config import Settings
from confmod.formatting import format_location, format_revision_window, format_timestamp
from confmod.models import (
    QueryCriteria,
    RequestStatus,
    SortDirection,
    SortKey,
    StatusFilter,
    ViewRecord,
)
from confmod.moderation.pipeline import DEFAULT_DIRECTIONS, ModerationPipeline, open_pipeline
from confmod.moderation.workflow import SubmitOutcome, SubmitResult
from confmod.utils.logging import configure_logging, get_logger
from confmod.utils.time import parse_calendar_date


app = typer.Typer(help="Conference moderation console")
requests_app = typer.Typer(help="Moderation request commands")

app.add_typer(requests_app, name="requests")

logger = get_logger(__name__)


@app.callback()
def main() -> None:
    """Initialize logging for all commands."""
    settings = Settings()
    configure_logging(settings.log_level)


@requests_app.command("list")
def requests_list(
    status: StatusFilter = typer.Option(
        StatusFilter.ALL, case_sensitive=False, help="Status filter"
    ),
    search: str = typer.Option("", help="Case-insensitive title search"),
    since: Optional[str] = typer.Option(None, help="Created on or after (YYYY-MM-DD)"),
    until: Optional[str] = typer.Option(None, help="Created on or before (YYYY-MM-DD)"),
    sort: SortKey = typer.Option(SortKey.CREATED_AT, case_sensitive=False, help="Sort key"),
    direction: Optional[SortDirection] = typer.Option(
        None, case_sensitive=False, help="Sort direction (default depends on key)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON"),
) -> None:
    """Run one aggregation pass and print the displayed requests."""
    try:
        criteria = QueryCriteria(
            status_filter=status,
            search_term=search,
            created_from=_parse_date_option(since, "--since"),
            created_to=_parse_date_option(until, "--until"),
            sort_key=sort,
            sort_direction=direction or DEFAULT_DIRECTIONS[sort],
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    pipeline = asyncio.run(_run_list(criteria))
    if pipeline.error:
        typer.echo(f"Error: {pipeline.error}", err=True)
        raise typer.Exit(1)

    if as_json:
        payload = [record.model_dump(mode="json") for record in pipeline.displayed]
        typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8"))
        return

    for record in pipeline.displayed:
        typer.echo(_render_record(record))
    counts = pipeline.counts
    typer.echo(
        f"shown={len(pipeline.displayed)} all={counts['all']} "
        f"pending={counts['PENDING']} approved={counts['APPROVED']} "
        f"rejected={counts['REJECTED']}"
    )


@requests_app.command("set-status")
def requests_set_status(
    request_id: str = typer.Argument(..., help="Moderation request ID"),
    status: RequestStatus = typer.Argument(..., case_sensitive=False, help="Target status"),
    message: str = typer.Option("", help="Reviewer comment"),
) -> None:
    """Change a request's status through the moderation workflow."""
    outcome = asyncio.run(_run_set_status(request_id, status, message))

    if outcome.result is SubmitResult.SUCCEEDED:
        typer.echo(f"Request {request_id} set to {status.value}")
        return

    typer.echo(f"Error: {outcome.error}", err=True)
    raise typer.Exit(1)


async def _run_list(criteria: QueryCriteria) -> ModerationPipeline:
    async with open_pipeline(criteria=criteria) as pipeline:
        await pipeline.refresh()
        return pipeline


async def _run_set_status(request_id: str, status: RequestStatus, message: str) -> SubmitOutcome:
    async with open_pipeline() as pipeline:
        pipeline.begin_moderation(request_id, status)
        pipeline.set_comment(message)
        outcome = await pipeline.submit_moderation()
        if outcome.result is SubmitResult.SUCCEEDED and pipeline.error:
            logger.warning("set_status.refresh_failed error=%s", pipeline.error)
        return outcome


def _parse_date_option(value: Optional[str], name: str) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_calendar_date(value)
    except ValueError as exc:
        raise typer.BadParameter(f"{name} must be YYYY-MM-DD", param_hint=name) from exc


def _render_record(record: ViewRecord) -> str:
    title = record.title
    if record.short_code:
        title = f"{title} ({record.short_code})"
    lines = [
        f"[{record.status.value}] {title}  request={record.request_id}",
        f"  requested: {format_timestamp(record.created_at)}"
        f"  updated: {format_timestamp(record.updated_at)}",
    ]
    if record.details_error:
        lines.append(f"  details unavailable: {record.details_error}")
    for revision in record.revisions:
        window = format_revision_window(revision)
        if window:
            lines.append(f"  dates: {window}")
        if revision.locations:
            lines.append(f"  location: {format_location(revision.locations[0])}")
        if revision.topics:
            lines.append(f"  topics: {', '.join(revision.topics)}")
    if record.reviewer_message and record.reviewer_message.strip():
        lines.append(f"  message: {record.reviewer_message}")
    return "\n".join(lines)


if __name__ == "__main__":
    app()
