#!/usr/bin/env python3
"""Roadmap Forge CLI - inspect a saved learning roadmap.

Usage:
    # Summary and module list
    python main.py --roadmap ./workspace/roadmap.json

    # Completeness checks
    python main.py --roadmap ./workspace/roadmap.json --validate --gaps

    # Everything
    python main.py --roadmap ./workspace/roadmap.json --analyze --validate --check-urls --gaps
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from config import configure_logging, settings
from persistence import JsonFileRoadmapRepository, RoadmapPersistenceError
from roadmap import RoadmapStore


console = Console()


def load_store(roadmap_path: Path) -> RoadmapStore:
    """Load a roadmap file into a read-only store (no repository attached).

    Raises:
        RoadmapPersistenceError: If the file is missing or invalid.
    """
    if not roadmap_path.exists():
        raise RoadmapPersistenceError(f"Roadmap file not found: {roadmap_path}")
    roadmap = JsonFileRoadmapRepository(roadmap_path).load()
    if roadmap is None:
        raise RoadmapPersistenceError(f"Roadmap file is empty: {roadmap_path}")
    return RoadmapStore(roadmap=roadmap)


def print_report(title: str, body: str) -> None:
    style = "red" if body.startswith("❌") else "green" if body.startswith("✅") else "blue"
    console.print(Panel(Text(body), title=f"[bold]{title}[/bold]", border_style=style, expand=False))


@click.command()
@click.option(
    "--roadmap", "-r", "roadmap_file",
    default=None,
    help=f"Path to a saved roadmap JSON file (default: {settings.roadmap_file})"
)
@click.option(
    "--analyze", "-a",
    is_flag=True,
    help="Show totals, duration and average confidence"
)
@click.option(
    "--validate",
    is_flag=True,
    help="Run the completeness checks (topics, key concepts, resources)"
)
@click.option(
    "--check-urls",
    is_flag=True,
    help="Check every resource URL"
)
@click.option(
    "--gaps", "-g",
    is_flag=True,
    help="List topics needing concepts and modules needing topics or resources"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Verbose output"
)
def main(
    roadmap_file: Optional[str],
    analyze: bool,
    validate: bool,
    check_urls: bool,
    gaps: bool,
    verbose: bool,
):
    """Roadmap Forge: inspect and validate a learning roadmap."""
    configure_logging("DEBUG" if verbose else None)

    roadmap_path = Path(roadmap_file) if roadmap_file else settings.get_roadmap_path()
    try:
        store = load_store(roadmap_path)
    except RoadmapPersistenceError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    console.print(Panel.fit(
        "[bold blue]Roadmap Forge[/bold blue]\n"
        f"[dim]{roadmap_path}[/dim]",
        border_style="blue"
    ))
    console.print(f"\n[green]Summary:[/green] {store.get_summary()}\n")

    if not (analyze or validate or check_urls or gaps):
        print_report("Modules", store.get_all_modules())
        return

    if analyze:
        print_report("Analysis", store.get_roadmap_analysis())
    if validate:
        print_report("Quality", store.validate_roadmap_quality())
    if check_urls:
        print_report("Resource URLs", store.validate_all_resource_urls())
    if gaps:
        print_report("Topics needing concepts", store.get_topics_needing_concepts())
        print_report("Modules needing topics", store.get_modules_needing_topics())
        print_report("Modules needing resources", store.get_modules_needing_resources())


if __name__ == "__main__":
    main()
