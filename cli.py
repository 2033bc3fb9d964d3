#!/usr/bin/env python3
"""
Coldboard CLI.

Primary entry point for all application operations.
Use --service to select what to run, --action to control the server lifecycle.

Usage:
    python cli.py --help
    python cli.py --service server --verbose
    python cli.py --service server --action stop
    python cli.py --service layout --notes-file notes.json --width 1280
    python cli.py --service layout --notes-file notes.json --board archive
    python cli.py --service health
    python cli.py --service config
    python cli.py --service test --test-type unit
"""

import json
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

import click
import httpx
import structlog
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.table import Table

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from coldboard.backend.core.logging import get_logger, setup_logging

console = Console()


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


def _find_process_on_port(port: int) -> list[int]:
    """Find PIDs listening on a port."""
    result = subprocess.run(
        ["lsof", "-ti", f":{port}"],
        capture_output=True, text=True,
    )
    pids = result.stdout.strip().split("\n")
    return [int(p) for p in pids if p.strip()]


def _server_stop(logger, port: int) -> None:
    pids = _find_process_on_port(port)
    if not pids:
        click.echo(f"No server running on port {port}.")
        return

    for pid in pids:
        os.kill(pid, signal.SIGINT)
        logger.info("Sent SIGINT", extra={"pid": pid, "port": port})

    click.echo(f"Server on port {port} stopped (PID: {', '.join(str(p) for p in pids)}).")


def _server_status(port: int) -> None:
    pids = _find_process_on_port(port)
    if pids:
        click.echo(f"Server is running on port {port} (PID: {', '.join(str(p) for p in pids)}).")
    else:
        click.echo(f"Server is not running on port {port}.")


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["server", "layout", "health", "config", "test", "info"]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--action", "-a",
    type=click.Choice(["start", "stop", "restart", "status"]),
    default="start",
    help="Lifecycle action for the server.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.option("--host", default=None, help="Server host.")
@click.option("--port", default=None, type=int, help="Server port.")
@click.option("--reload", is_flag=True, help="Enable auto-reload (server only).")
@click.option(
    "--notes-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with notes, as returned by the notes API (layout only).",
)
@click.option(
    "--board",
    "board_slug",
    default=None,
    help="Board id, \"all-notes\" or \"archive\"; keeps only that board's notes (layout only).",
)
@click.option("--width", default=1280, type=int, help="Viewport width in pixels (layout only).")
@click.option("--search", default="", help="Search text (layout only).")
@click.option("--author", default=None, help="Author id filter (layout only).")
@click.option("--user", "user_id", default=None, help="Current user id; their notes sort first (layout only).")
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run.",
)
@click.option("--coverage", is_flag=True, help="Run tests with coverage.")
def main(
    service: str,
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    notes_file: Path | None,
    board_slug: str | None,
    width: int,
    search: str,
    author: str | None,
    user_id: str | None,
    test_type: str,
    coverage: bool,
) -> None:
    """
    Coldboard CLI.

    \b
    Examples:
        python cli.py --service server --verbose
        python cli.py --service server --action status
        python cli.py --service layout --notes-file notes.json --width 800 --search bug
        python cli.py --service health
        python cli.py --service test --test-type unit --coverage
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")
    logger = get_logger(__name__)
    logger.debug("CLI invoked", extra={"service": service, "action": action, "log_level": log_level})

    if service == "server" and action != "start":
        from coldboard.backend.core.config import get_app_config
        server_port = port or get_app_config().application.server.port

        if action == "stop":
            _server_stop(logger, server_port)
            return
        if action == "status":
            _server_status(server_port)
            return
        _server_stop(logger, server_port)
        time.sleep(2)

    if service == "server":
        run_server(logger, host, port, reload)
    elif service == "layout":
        show_layout(logger, notes_file, board_slug, width, search, author, user_id)
    elif service == "health":
        check_health(logger)
    elif service == "config":
        show_config(logger)
    elif service == "test":
        run_tests(logger, test_type, coverage)
    elif service == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI development server."""
    from coldboard.backend.core.config import get_app_config

    server_config = get_app_config().application.server
    server_host = host or server_config.host
    server_port = port or server_config.port

    logger.info("Starting server", extra={"host": server_host, "port": server_port, "reload": reload})

    cmd = [
        sys.executable, "-m", "uvicorn",
        "coldboard.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def _load_notes(path: Path) -> list:
    """Notes from a JSON file: either a bare list or the API's {"notes": [...]} body."""
    from coldboard.backend.schemas.note import Note

    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("notes", [])
    return TypeAdapter(list[Note]).validate_python(raw)


def _notes_in_scope(notes: list, scope) -> list:
    """The notes the board's own notes route would return for scope."""
    from coldboard.backend.schemas.board import AllNotes, Archive

    if isinstance(scope, Archive):
        return [n for n in notes if n.archived_at is not None]
    if isinstance(scope, AllNotes):
        return [n for n in notes if n.archived_at is None]
    return [n for n in notes if n.board_id == scope.board_id and n.archived_at is None]


def show_layout(
    logger,
    notes_file: Path | None,
    board_slug: str | None,
    width: int,
    search: str,
    author: str | None,
    user_id: str | None,
) -> None:
    """Compute a board layout offline and print it as a table."""
    from coldboard.backend.schemas.board import parse_board_scope
    from coldboard.backend.schemas.layout import FilterState
    from coldboard.backend.services.filtering import apply_filters
    from coldboard.backend.services.masonry import layout_notes

    if notes_file is None:
        click.echo(click.style("Error: --notes-file is required for layout.", fg="red"), err=True)
        sys.exit(1)
    if width <= 0:
        click.echo(click.style("Error: --width must be positive.", fg="red"), err=True)
        sys.exit(1)

    scope = None
    if board_slug is not None:
        try:
            scope = parse_board_scope(board_slug)
        except ValueError as e:
            click.echo(click.style(f"Error: invalid --board: {e}", fg="red"), err=True)
            sys.exit(1)

    try:
        notes = _load_notes(notes_file)
    except (ValueError, ValidationError) as e:
        logger.error("Could not read notes file", extra={"path": str(notes_file), "error": str(e)})
        click.echo(click.style(f"Error: invalid notes file: {e}", fg="red"), err=True)
        sys.exit(1)

    if scope is not None:
        notes = _notes_in_scope(notes, scope)

    filters = FilterState(search_text=search, author_id=author)
    ordered = apply_filters(notes, filters, current_user_id=user_id)
    layout = layout_notes(ordered, width)
    by_id = {note.id: note for note in ordered}

    table = Table(
        title=f"{layout.profile} layout, {layout.columns} column(s), card width {layout.card_width}",
        show_header=True,
    )
    table.add_column("Note", style="cyan")
    table.add_column("Author")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Height", justify="right")
    table.add_column("Preview", style="dim")

    for rect in layout.rects:
        note = by_id[rect.note_id]
        preview = note.content.replace("\n", " ")[:40]
        if note.is_checklist:
            preview = f"[{len(note.checklist_items)} checklist item(s)]"
        table.add_row(
            rect.note_id,
            note.author.display_name,
            str(rect.x),
            str(rect.y),
            str(rect.height),
            preview,
        )

    console.print(table)
    console.print(
        f"{len(ordered)} of {len(notes)} notes shown, board height {layout.board_height}px"
        + (" (filtered)" if filters.is_active else "")
    )
    logger.info("Layout displayed", extra={"notes": len(ordered), "columns": layout.columns})


def check_health(logger) -> None:
    """Check configuration locally, then ask a running server for readiness."""
    from coldboard.backend.core.config import get_app_config, get_server_base_url

    checks: list[tuple[str, bool, str | None]] = []

    try:
        app_config = get_app_config()
        board = app_config.board
        checks.append(("YAML configuration", True, f"App: {app_config.application.name}"))
        checks.append(("Board settings", True, f"{len(board.breakpoints)} breakpoints"))
    except Exception as e:
        logger.error("Configuration failed", extra={"error": str(e)})
        checks.append(("YAML configuration", False, str(e)))

    base_url, timeout = get_server_base_url()
    try:
        response = httpx.get(f"{base_url}/health/ready", timeout=timeout, headers={"X-Frontend-ID": "cli"})
        ready = response.status_code == 200
        checks.append(("Server readiness", ready, f"HTTP {response.status_code}"))
    except httpx.HTTPError as e:
        logger.debug("Server not reachable", extra={"error": str(e)})
        checks.append(("Server readiness", False, "not reachable"))

    table = Table(title="Health Check Results", show_header=True)
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Details")
    for name, passed, detail in checks:
        status = "[green]PASS[/green]" if passed else "[red]FAIL[/red]"
        table.add_row(name, status, detail or "")
    console.print(table)

    if not all(passed for _, passed, _ in checks):
        sys.exit(1)


def show_config(logger) -> None:
    """Display loaded configuration."""
    from coldboard.backend.core.config import get_app_config

    app_config = get_app_config()
    sections = {
        "Application (application.yaml)": app_config.application.model_dump(),
        "Logging (logging.yaml)": app_config.logging.model_dump(),
        "Board (board.yaml)": app_config.board.model_dump(),
    }

    for title, values in sections.items():
        click.echo(f"\n{title}:")
        click.echo("-" * 40)
        for key, value in values.items():
            click.echo(f"  {key}: {value}")

    logger.info("Configuration displayed successfully")


def run_tests(logger, test_type: str, coverage: bool) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})

    cmd = [sys.executable, "-m", "pytest"]
    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")
    cmd.append("-v")
    if coverage:
        cmd.extend(["--cov=coldboard", "--cov-report=term-missing"])

    click.echo(f"Running: {' '.join(cmd)}\n")
    result = subprocess.run(cmd)
    sys.exit(result.returncode)


def show_info(logger) -> None:
    """Display application information."""
    from coldboard.backend.core.config import get_app_config

    app = get_app_config().application
    click.echo("Coldboard Board Engine")
    click.echo("=" * 40)
    click.echo(f"Name: {app.name}")
    click.echo(f"Version: {app.version}")
    click.echo(f"Description: {app.description}")
    click.echo()
    click.echo("Services (--service):")
    click.echo("  server   FastAPI layout server")
    click.echo("  layout   Lay out a notes file in the terminal")
    click.echo("  health   Check configuration and server readiness")
    click.echo("  config   Display configuration")
    click.echo("  test     Run test suite")
    click.echo("  info     Show this information")
    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
