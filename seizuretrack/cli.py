"""
SeizureTrack CLI Interface
Command line interface implemented using Typer
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from seizuretrack.config.loader import load_config
from seizuretrack.core.analytics import parse_date
from seizuretrack.core.db import open_database
from seizuretrack.core.logger import get_logger
from seizuretrack.core.reports import build_exporter
from seizuretrack.system.runtime import (
    build_runtime,
    get_runtime_stats,
    start_runtime,
    stop_runtime,
)

logger = get_logger(__name__)


def start(
    host: Optional[str] = typer.Option(None, help="Server host address, defaults to server.host"),
    port: Optional[int] = typer.Option(None, help="Server port, defaults to server.port"),
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
    debug: bool = typer.Option(False, help="Enable debug mode"),
):
    """Start SeizureTrack API service"""
    try:
        # Load configuration
        config = load_config(config_file)
        host = host or config.get("server.host", "127.0.0.1")
        port = port or int(config.get("server.port", 8000))

        logger.info("Starting SeizureTrack API service...")
        logger.info(f"Host: {host}, Port: {port}")
        logger.info(f"Debug mode: {debug}")

        if debug:
            # Reload needs an import string; the default configuration is used
            uvicorn.run(
                "seizuretrack.app:app",
                host=host,
                port=port,
                reload=True,
                log_level="debug",
            )
        else:
            from seizuretrack.app import create_app

            uvicorn.run(create_app(config_file), host=host, port=port, log_level="info")

    except Exception as e:
        logger.error(f"Failed to start service: {e}")
        raise typer.Exit(1)


def init_db(
    db_path: Optional[str] = typer.Option(None, help="Database file path, defaults to database.path"),
):
    """Initialize database"""
    logger.info("Initializing database...")
    try:
        db = open_database(db_path)
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise typer.Exit(1)
    typer.echo(f"Database ready: {db.db_path}")


def report(
    report_range: Optional[str] = typer.Option(
        None, "--range", help="7d | 30d | 90d | 6m | 1y, defaults to reports.default_range"
    ),
    day: Optional[str] = typer.Option(None, "--date", help="Last day of the report (YYYY-MM-DD)"),
    output_dir: Optional[Path] = typer.Option(
        None, help="Write the report into this directory instead of printing it"
    ),
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
):
    """Print or save the text health report"""
    runtime = build_runtime(config_file)
    for warning in runtime.store.pop_warnings():
        typer.echo(f"Warning: {warning}", err=True)

    try:
        exporter = build_exporter(
            runtime.store,
            report_range or runtime.config.get("reports.default_range", "30d"),
            parse_date(day) if day else date.today(),
            runtime.week_starts_on,
        )
    except ValueError as e:
        typer.echo(f"Invalid report parameters: {e}", err=True)
        raise typer.Exit(2)

    if output_dir is None:
        typer.echo(exporter.render_text())
        return

    path = exporter.write(output_dir)
    typer.echo(f"Report saved: {path}")


def stats(
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
):
    """Show record counts and storage usage"""
    runtime = build_runtime(config_file)
    for warning in runtime.store.pop_warnings():
        typer.echo(f"Warning: {warning}", err=True)
    typer.echo(json.dumps(get_runtime_stats(runtime), indent=2, ensure_ascii=False))


def run(
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
):
    """Run medication reminders in the terminal (notification permission granted)"""
    import asyncio
    import signal

    async def run_reminders():
        try:
            runtime = await start_runtime(config_file, grant_notifications=True)
            runtime.notifications.subscribe(
                lambda n: typer.echo(f"{n.title}: {n.body}")
            )
            logger.info("Medication reminders armed, press Ctrl+C to stop")

            # Wait for stop signal
            stop_event = asyncio.Event()

            def signal_handler(sig, frame):
                logger.info("Stop signal received...")
                stop_event.set()

            signal.signal(signal.SIGINT, signal_handler)
            signal.signal(signal.SIGTERM, signal_handler)

            # Block and wait
            await stop_event.wait()

            await stop_runtime(runtime, quiet=True)
            logger.info("Medication reminders stopped")

        except Exception as e:
            logger.error(f"Run failed: {e}")
            raise typer.Exit(1)

    # Run async task
    asyncio.run(run_reminders())


def main():
    """Main function"""
    app = typer.Typer()

    app.command()(start)  # Start FastAPI server
    app.command()(run)  # Run reminders in terminal mode
    app.command()(init_db)  # Initialize database
    app.command()(report)  # Print or save the health report
    app.command()(stats)  # Show storage statistics

    app()


if __name__ == "__main__":
    main()
