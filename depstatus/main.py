"""Entry point — demo server and one-shot checks from a target file."""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys

import uvicorn
from fastapi import FastAPI
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from depstatus.api.server import create_app
from depstatus.buildinfo import retrieve_build_info
from depstatus.config import settings
from depstatus.health.aggregate import Severity, is_healthy, severity
from depstatus.health.loader import TargetFileError, load_targets
from depstatus.health.models import Importance
from depstatus.health.registry import TargetRegistry
from depstatus.page.renderer import PageConfig, StatusPage

console = Console()
logger = logging.getLogger(__name__)

_SEVERITY_STYLE = {
    Severity.OK: "green",
    Severity.WARNING: "yellow",
    Severity.FAIL: "bold red",
}


def _flaky_dependency() -> None:
    if random.randint(0, 1):
        raise RuntimeError("dependency is not healthy")


def build_demo_app() -> FastAPI:
    """Two fake dependencies that fail at random, plus a couple of nav links."""
    checker = (
        TargetRegistry()
        .register("database", Importance.HIGH, _flaky_dependency)
        .register("network", Importance.LOW, _flaky_dependency)
        .build()
    )
    page = StatusPage(
        PageConfig(
            title=settings.page_title,
            show_version=settings.show_version,
            checker=checker,
        )
        .with_link("OpenAPI Documentation", "/docs")
        .with_link("Health", "/health"),
        build_info=retrieve_build_info(settings),
    )
    return create_app(checker=checker, page=page, settings=settings)


def run_server() -> None:
    """Start the demo server."""
    console.print(Panel("Starting depstatus demo server", style="bold green"))
    console.print(
        f"[dim]http://{settings.api_host}:{settings.api_port}/health  ·  "
        f"http://{settings.api_host}:{settings.api_port}/status[/dim]"
    )
    uvicorn.run(
        "depstatus.main:build_demo_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


def run_check(path: str, timeout: float) -> int:
    """Run one pass over a target file and print the results. Returns the exit code."""
    try:
        checker = load_targets(path).build()
    except TargetFileError as e:
        console.print(f"[bold red]{e}[/bold red]")
        return 2

    results = asyncio.run(checker.check(timeout=timeout))

    table = Table(title=f"Targets ({path})")
    table.add_column("Target")
    table.add_column("Importance")
    table.add_column("Status")
    table.add_column("Duration", justify="right")
    table.add_column("Error")
    for r in results:
        style = _SEVERITY_STYLE[severity(r)]
        table.add_row(
            r.target.name,
            r.target.importance.value,
            f"[{style}]{r.status.value}[/{style}]",
            f"{r.duration_ms:.1f} ms",
            r.error or "",
        )
    console.print(table)

    healthy = is_healthy(results)
    console.print("[green]healthy[/green]" if healthy else "[bold red]unhealthy[/bold red]")
    return 0 if healthy else 1


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    parser = argparse.ArgumentParser(description="Dependency health checks and status page")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Start the demo server")

    check_parser = sub.add_parser("check", help="Run checks from a target file once")
    check_parser.add_argument("targets", help="Path to a YAML target file")
    check_parser.add_argument(
        "--timeout", type=float, default=settings.check_timeout,
        help="Deadline for the whole pass, in seconds",
    )

    args = parser.parse_args()

    if args.command == "serve":
        run_server()
    elif args.command == "check":
        sys.exit(run_check(args.targets, args.timeout))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
