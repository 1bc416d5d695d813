#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for the notes backend. All functionality is accessible
through command-line options.

Usage:
    python run.py --help
    python run.py --action server --verbose
    python run.py --action health --debug
    python run.py --action config
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notekeeper.backend.core.logging import get_logger, log_with_source, setup_logging

ACTIONS = {
    "server": "Start the notes API server",
    "health": "Check configuration, the app and the notes file",
    "config": "Display configuration and the resolved notes file",
    "info": "Show this information",
}


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(list(ACTIONS)),
    default="info",
    help="What to do: " + ", ".join(ACTIONS) + ".",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Log at INFO, including note changes.",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Log at DEBUG, including every note read.",
)
@click.option(
    "--host",
    default=None,
    help="Bind address; defaults to server.host in application.yaml.",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port; defaults to server.port in application.yaml.",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Restart the server when notekeeper/ changes (server action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
) -> None:
    """
    Notekeeper Entry Point.

    Run the notes server, check health, or view configuration.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # Check that configuration and the notes file load
        python run.py --action health --debug

        # View loaded configuration
        python run.py --action config
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "health":
        check_health(logger)
    elif action == "config":
        show_config(logger)
    else:
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server under uvicorn."""
    from notekeeper.backend.core.config import get_server_address

    default_host, default_port = get_server_address()
    server_host = host or default_host
    server_port = port or default_port

    log_with_source(
        logger, "cli", "info", "Starting server",
        host=server_host, port=server_port, reload=reload,
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "notekeeper.backend.main:app",
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
        log_with_source(logger, "cli", "info", "Server stopped")
    except subprocess.CalledProcessError as e:
        log_with_source(logger, "cli", "error", "Server exited", exit_code=e.returncode)
        sys.exit(e.returncode)


def _run_check(logger, name: str, check: Callable[[], str]) -> tuple[str, bool, str]:
    """Run one health check; ``check`` returns a detail line or raises."""
    try:
        detail = check()
    except Exception as e:
        logger.error("Health check failed", extra={"check": name, "error": str(e)})
        return name, False, str(e)
    logger.debug("Health check passed", extra={"check": name})
    return name, True, detail


def _check_config() -> str:
    from notekeeper.backend.core.config import get_app_config, get_environment

    app_config = get_app_config()
    return f"{app_config.application.name}, env {get_environment()}"


def _check_app() -> str:
    from notekeeper.backend.main import get_app

    app = get_app()
    routes = [route for route in app.routes if "/notes" in getattr(route, "path", "")]
    return f"{app.title}, {len(routes)} note routes"


def _check_notes_file() -> str:
    import asyncio

    from notekeeper.backend.api.health import check_storage
    from notekeeper.backend.core.config import get_data_file

    path = get_data_file()
    result = asyncio.run(check_storage())
    if result["status"] != "healthy":
        raise RuntimeError(f"{path}: {result['error']}")
    if not result["file_exists"]:
        return f"{path} (not created yet)"

    counts = result["counts"]
    return (
        f"{path}: {result['notes']} notes "
        f"(active {counts['all']}, archived {counts['archive']}, trash {counts['trash']})"
    )


def check_health(logger) -> None:
    """Check that configuration loads, the app builds, and the notes file parses."""
    click.echo("Checking application health...\n")

    checks = [
        _run_check(logger, "YAML configuration", _check_config),
        _run_check(logger, "FastAPI application", _check_app),
        _run_check(logger, "Notes file", _check_notes_file),
    ]

    click.echo("Health Check Results:")
    click.echo("-" * 50)

    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        click.echo(f"  {status}  {name} ({detail})")

    click.echo("-" * 50)

    if all(passed for _, passed, _ in checks):
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        sys.exit(1)


def _echo_section(title: str, values: dict) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * 40)
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"  {key}:")
            for k, v in value.items():
                click.echo(f"    {k}: {v}")
        else:
            click.echo(f"  {key}: {value}")


CONFIG_SECTIONS = {
    "application": "Application Settings",
    "logging": "Logging Settings",
    "storage": "Storage Settings",
    "preferences": "Preferences",
    "concurrency": "Concurrency Settings",
}


def show_config(logger) -> None:
    """Display every YAML section and where the notes file lives."""
    try:
        from notekeeper.backend.core.config import get_app_config, get_data_file

        app_config = get_app_config()
        data_file = get_data_file()
    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)

    click.echo("Application Configuration:")
    for attr, title in CONFIG_SECTIONS.items():
        _echo_section(f"{title} (from YAML)", getattr(app_config, attr).model_dump())

    state = "present" if data_file.exists() else "not created yet"
    click.echo(f"\nResolved data file: {data_file} ({state})")

    logger.info("Configuration displayed", extra={"data_file": str(data_file)})


def show_info(logger) -> None:
    """Display application information."""
    from notekeeper.backend.core.config import get_app_config

    app_settings = get_app_config().application

    click.echo("Notekeeper Notes Backend")
    click.echo("=" * 40)
    click.echo(f"Name: {app_settings.name}")
    click.echo(f"Version: {app_settings.version}")
    click.echo(f"Description: {app_settings.description}")

    click.echo()
    click.echo("Available Actions:")
    for name, summary in ACTIONS.items():
        click.echo(f"  --action {name:<8} {summary}")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v     INFO: note changes and startup")
    click.echo("  --debug, -d       DEBUG: every request, including reads")
    click.echo()
    click.echo("Examples:")
    click.echo("  python run.py --action server --reload --verbose")
    click.echo("  python run.py --action health --debug")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
