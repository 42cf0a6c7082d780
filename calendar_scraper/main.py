#!/usr/bin/env python3
"""
Course Calendar Scraper

Harvests course and program codes from the Arts & Science course
calendar and loads them into a relational database in one batch.

Usage:
    calendar-scraper init-db          # Create the Courses/Programs tables
    calendar-scraper crawl            # Crawl and load everything
    calendar-scraper crawl --dry-run  # Crawl only, print what was found
"""

import sys

import click
from rich.console import Console
from rich.table import Table

from .config import config
from .pipeline import HarvestPipeline, HarvestReport
from .storage import (
    TransactionalLoader,
    create_db_engine,
    create_tables,
    verify_connection,
)
from .utils.exceptions import FatalInitError, LoadError
from .utils.logging_config import setup_logging, get_logger

console = Console()


def setup_environment():
    """Initialize logging."""
    setup_logging(level=config.log_level, log_file=config.log_file)
    return get_logger()


def print_report(report: HarvestReport) -> None:
    """Render the per-sequence summary."""
    table = Table(title="Harvest Summary")
    table.add_column("Sequence", style="cyan")
    table.add_column("State")
    table.add_column("Pages", justify="right")
    table.add_column("Records", justify="right")
    table.add_column("Failed URLs", style="red")

    for result in report.sequences:
        style = "green" if result.succeeded else "red"
        table.add_row(
            result.name,
            f"[{style}]{result.state.value}[/{style}]",
            str(result.pages),
            str(result.records),
            "\n".join(result.failed_urls),
        )

    console.print(table)
    console.print(f"  Unique courses: {report.courses}")
    console.print(f"  Unique programs: {report.programs}")
    for table_name, rows in report.rows_written.items():
        console.print(f"  Rows written to {table_name}: {rows}")


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """Course Calendar Scraper for the academic records database."""
    pass


@cli.command("init-db")
def init_db():
    """Create the storage tables if they do not exist."""
    setup_environment()

    try:
        engine = create_db_engine(config.database)
        verify_connection(engine)
        create_tables(
            engine,
            courses_table=config.storage.courses_table,
            programs_table=config.storage.programs_table,
        )
    except FatalInitError as e:
        console.print(f"[bold red]Database unavailable:[/bold red] {e}")
        sys.exit(1)

    console.print("[green]Tables created.[/green]")


@cli.command()
@click.option("--dry-run", is_flag=True, help="Crawl without writing to the database")
@click.option("--courses/--no-courses", default=True, help="Harvest courses")
@click.option("--programs/--no-programs", default=True, help="Harvest programs")
def crawl(dry_run: bool, courses: bool, programs: bool):
    """Crawl the calendar and load the harvested records."""
    logger = setup_environment()

    console.print("\n[bold blue]Course Calendar Scraper[/bold blue]\n")

    loader = None
    try:
        if not dry_run:
            engine = create_db_engine(config.database)
            verify_connection(engine)
            loader = TransactionalLoader(engine, table=config.storage.courses_table)

        pipeline = HarvestPipeline(config)
        report = pipeline.run(
            loader=loader,
            include_courses=courses,
            include_programs=programs,
        )
    except FatalInitError as e:
        logger.critical(str(e))
        console.print(f"[bold red]Startup failed:[/bold red] {e}")
        sys.exit(1)
    except LoadError as e:
        logger.error(f"Couldn't add records to database: {e}")
        console.print(f"[bold red]Load failed, nothing was written:[/bold red] {e}")
        sys.exit(1)

    print_report(report)

    if report.failed:
        console.print("\n[yellow]Some sequences did not complete.[/yellow]")
    else:
        console.print("\n[bold green]Harvest complete![/bold green]")


if __name__ == "__main__":
    cli()
