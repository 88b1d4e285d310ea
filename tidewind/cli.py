"""운영자용 CLI입니다. / Operator-facing CLI."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import typer
from pydantic import ValidationError

from .config import AppConfig, load_app_config
from .sessions.engine import AnalysisSummary, SessionWindow, analyze_sessions
from .weather.feeds import (
    FeedError,
    build_feed_service,
    normalize_forecast,
    normalize_tides,
)
from .weather.models import TideEventSeries, WindForecastSeries

app = typer.Typer(help="Wind and tide session planner")


@app.callback()
def main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable logging"),
) -> None:
    """공통 옵션입니다. / Shared options."""

    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )


def _load_json(path: Path) -> object:
    """JSON 파일을 읽습니다. / Read a JSON file."""

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _load_config(path: Optional[Path]) -> AppConfig:
    """설정을 적재합니다. / Load config, defaults when absent."""

    if path is None and not Path("config.yaml").exists():
        return AppConfig()
    try:
        return load_app_config(path)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


def _session_row(session: SessionWindow) -> str:
    """세션 한 줄입니다. / Format one session row."""

    return (
        f"{session.date} | {session.time_start}-{session.time_end} | "
        f"{session.wind_speed_knots} kts {session.wind_direction_label} | "
        f"{session.tide_height:.1f} m | {session.score} | {session.rationale}"
    )


def _print_summary(summary: AnalysisSummary, as_json: bool = False) -> None:
    """요약을 출력합니다. / Print analysis summary."""

    if as_json:
        payload = summary.model_dump_jsonable()
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    lines = [
        "Date | Slot | Wind | Tide | Score | Conditions",
        "-----|------|------|------|-------|-----------",
    ]
    lines.extend(_session_row(session) for session in summary.all_sessions)
    if not summary.all_sessions:
        lines.append("No session matches the wind and tide criteria.")
    lines.append("")
    if summary.tomorrow_best is not None:
        lines.append("Tomorrow best: " + _session_row(summary.tomorrow_best))
    else:
        lines.append("Tomorrow best: none")
    counts = summary.counts
    lines.append(
        f"Excellent: {counts.excellent_sessions} | Good: {counts.good_sessions} | "
        f"Average: {counts.average_sessions} | Total: {counts.total_windows}"
    )
    typer.echo("\n".join(lines))


@app.command("analyze")
def analyze(
    forecast_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    tides_path: Path = typer.Argument(..., exists=True, dir_okay=False),
    timezone: Optional[str] = typer.Option(None, help="IANA timezone override"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="YAML config"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON summary"),
) -> None:
    """파일로 세션을 분석합니다. / Analyze sessions from JSON files."""

    config = _load_config(config_path)
    if timezone:
        try:
            config = AppConfig(timezone=timezone, rubric=config.rubric)
        except ValidationError as exc:
            typer.echo(f"Unknown timezone: {timezone}", err=True)
            raise typer.Exit(code=1) from exc
    try:
        forecast = normalize_forecast(_load_json(forecast_path), forecast_path.name)
        tides = normalize_tides(_load_json(tides_path), tides_path.name)
    except (FeedError, ValueError) as exc:
        typer.echo(f"Invalid input: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    summary = analyze_sessions(
        forecast,
        tides,
        rubric=config.rubric,
        timezone=config.timezone,
    )
    _print_summary(summary, as_json)


@app.command("fetch-sessions")
def fetch_sessions(
    config_path: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="YAML config"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON summary"),
) -> None:
    """피드를 조회해 분석합니다. / Fetch feeds and analyze sessions."""

    config = _load_config(config_path)
    if config.forecast_feed is None or config.tide_feed is None:
        typer.echo("Both forecast_feed and tide_feed must be configured", err=True)
        raise typer.Exit(code=1)
    service = build_feed_service(config.forecast_feed, config.tide_feed)

    async def _run() -> Tuple[WindForecastSeries, TideEventSeries]:
        return await service.collect()

    forecast, tides = asyncio.run(_run())
    summary = analyze_sessions(
        forecast, tides, rubric=config.rubric, timezone=config.timezone
    )
    _print_summary(summary, as_json)


def main() -> None:
    """CLI 엔트리 포인트입니다. / CLI entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI guard
    main()
