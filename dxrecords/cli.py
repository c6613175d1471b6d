"""Command Line Interface for the diagnostic test records service.

Operator commands for running the API and managing the configured Record
Store (schema setup, connectivity check, sample data, listing and export).

Examples:
    dxrecords serve --port 8000
    dxrecords init-db
    dxrecords check-db
    dxrecords seed --patient-name Zain --test-type "Blood Test" --result Pending
    dxrecords list
    dxrecords export records.csv
"""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from dxrecords import __version__
from dxrecords.domain.ports import RecordValidationError, StorageError, StoragePort
from dxrecords.domain.service import RecordService
from dxrecords.infrastructure.settings import settings
from dxrecords.main import create_storage_adapter

app = typer.Typer(
    name="dxrecords",
    help="Diagnostic test records service",
    add_completion=False
)
console = Console()


def create_storage_adapter_cli() -> StoragePort:
    """Create and initialize the configured storage adapter (CLI wrapper)."""
    try:
        storage = create_storage_adapter()
    except (ValueError, StorageError) as e:
        console.print(f"[red]✗[/red] Failed to create storage adapter: {str(e)}")
        raise typer.Exit(code=1)

    result = storage.initialize_schema()
    if result.is_failure():
        console.print(f"[red]✗[/red] Failed to initialize schema: {result.error}")
        storage.close()
        raise typer.Exit(code=1)
    return storage


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default DX_HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default DX_PORT or 8000)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes (development)"),
) -> None:
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "dxrecords.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower()
    )


@app.command("init-db")
def init_db() -> None:
    """Create the diagnostic_tests table if it does not exist."""
    storage = create_storage_adapter_cli()
    storage.close()
    console.print(f"[green]✓[/green] Schema ready ({settings.db_config.describe()})")


@app.command("check-db")
def check_db() -> None:
    """Check that the configured database is reachable."""
    storage = create_storage_adapter_cli()
    try:
        result = storage.ping()
    finally:
        storage.close()

    if result.is_failure():
        console.print(f"[red]✗[/red] Database connection failed: {result.error}")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] Database connection successful ({result.value} ms)")


@app.command()
def seed(
    patient_name: str = typer.Option("Zain", "--patient-name", help="Patient name"),
    test_type: str = typer.Option("Blood Test", "--test-type", help="Test type"),
    result: str = typer.Option("Pending", "--result", help="Test result"),
    test_date: Optional[str] = typer.Option(None, "--test-date", help="Test date (defaults to now)"),
    notes: Optional[str] = typer.Option("Patient has mild symptoms.", "--notes", help="Notes"),
) -> None:
    """Insert one record through the same validation as the API."""
    storage = create_storage_adapter_cli()
    try:
        record = RecordService(storage).create({
            "patientName": patient_name,
            "testType": test_type,
            "result": result,
            "testDate": test_date,
            "notes": notes,
        })
    except RecordValidationError as e:
        for error in e.errors:
            console.print(f"[red]✗[/red] {error.field}: {error.message}")
        raise typer.Exit(code=1)
    except StorageError as e:
        console.print(f"[red]✗[/red] Failed to store record: {str(e)}")
        raise typer.Exit(code=1)
    finally:
        storage.close()

    console.print(f"[green]✓[/green] Created test record {record.id}")


@app.command("list")
def list_records() -> None:
    """Print every record, newest test date first."""
    storage = create_storage_adapter_cli()
    try:
        records = storage.list(order_by_date=True)
    except StorageError as e:
        console.print(f"[red]✗[/red] Failed to list records: {str(e)}")
        raise typer.Exit(code=1)
    finally:
        storage.close()

    if not records:
        console.print("No test records found")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Patient")
    table.add_column("Test Type")
    table.add_column("Result")
    table.add_column("Test Date")
    table.add_column("Notes")

    for record in records:
        table.add_row(
            record.id,
            record.patient_name,
            record.test_type,
            record.result,
            record.test_date.strftime("%Y-%m-%d %H:%M"),
            record.notes or ""
        )

    console.print(table)
    console.print(f"\n{len(records):,} record(s)")


@app.command()
def export(
    output: Path = typer.Argument(..., help="CSV file to write", dir_okay=False),
) -> None:
    """Export every record to CSV (JSON field names as columns)."""
    storage = create_storage_adapter_cli()
    try:
        records = storage.list(order_by_date=True)
    except StorageError as e:
        console.print(f"[red]✗[/red] Failed to list records: {str(e)}")
        raise typer.Exit(code=1)
    finally:
        storage.close()

    columns = ["id", "patientName", "testType", "result", "testDate", "notes"]
    df = pd.DataFrame([record.model_dump(by_alias=True) for record in records], columns=columns)
    df.to_csv(output, index=False)
    console.print(f"[green]✓[/green] Exported {len(df):,} record(s) to {output}")


@app.command()
def info() -> None:
    """Display configuration."""
    console.print("[bold blue]System Information[/bold blue]\n")

    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_row("Application:", settings.app_name)
    info_table.add_row("Version:", __version__)
    info_table.add_row("Database:", settings.db_config.describe())
    info_table.add_row("Log Level:", settings.log_level)
    info_table.add_row("CORS Origins:", ", ".join(settings.cors_origins))

    console.print(info_table)


@app.callback(invoke_without_command=True)
def main_callback(
    version: bool = typer.Option(False, "--version", help="Show version information"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Diagnostic test records service."""
    if version:
        console.print(f"dxrecords v{__version__}")
        raise typer.Exit()
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


if __name__ == "__main__":
    app()
