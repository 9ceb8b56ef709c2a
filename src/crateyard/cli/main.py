import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import CONFIG_DIR, CONFIG_FILE, get_index_url, set_index_url
from ..domain.errors import CrateyardError
from ..domain.models import Dependency, PackageId, SourceId
from ..registry.source import RegistrySource
from ..ui.progress import ProgressManager

app = typer.Typer()
console = Console()


def get_registry_source(home: Path, index: Optional[str] = None) -> RegistrySource:
    source_id = SourceId(url=index or get_index_url(home / "config"))
    return RegistrySource(source_id, home=home, progress_manager=ProgressManager(console))


@app.callback()
def main_callback(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """fetch and unpack packages from a registry index."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def update(
    home: Path = typer.Option(CONFIG_DIR, help="Directory holding index, cache and sources"),
    index: Optional[str] = typer.Option(None, help="Registry index URL"),
):
    """synchronize the local copy of the registry index."""
    with get_registry_source(home, index) as source:
        try:
            source.update()
        except CrateyardError as e:
            console.print(f"[red]Error updating registry:[/red] {e}")
            raise typer.Exit(code=1)
    console.print("[green]✓ Registry index updated[/green]")


@app.command()
def query(
    name: str,
    requirement: str = typer.Argument("*", help="Version requirement, e.g. '>=1.0.0, <1.1.0'"),
    home: Path = typer.Option(CONFIG_DIR, help="Directory holding index, cache and sources"),
    index: Optional[str] = typer.Option(None, help="Registry index URL"),
):
    """list published versions of a package matching a requirement."""
    with get_registry_source(home, index) as source:
        try:
            summaries = source.query(Dependency(name=name, specifier=requirement))
        except CrateyardError as e:
            console.print(f"[red]Error querying registry:[/red] {e}")
            raise typer.Exit(code=1)

    if not summaries:
        console.print(f"[yellow]No versions of '{name}' match '{requirement}'.[/yellow]")
        return

    table = Table(title=f"{name} {requirement}")
    table.add_column("Version", style="cyan")
    table.add_column("Dependencies")
    table.add_column("Features")
    for summary in summaries:
        deps = ", ".join(f"{d.name} {d.specifier}" for d in summary.dependencies) or "None"
        features = ", ".join(sorted(summary.features)) or "-"
        table.add_row(summary.version, deps, features)
    console.print(table)


@app.command()
def fetch(
    name: str,
    version: str,
    home: Path = typer.Option(CONFIG_DIR, help="Directory holding index, cache and sources"),
    index: Optional[str] = typer.Option(None, help="Registry index URL"),
):
    """download, verify and unpack one package version."""
    with get_registry_source(home, index) as source:
        try:
            found = source.query(Dependency(name=name, specifier=f"={version}"))
            found = [s for s in found if s.version == version]
            if not found:
                console.print(f"[red]Package '{name}@{version}' not found in registry.[/red]")
                raise typer.Exit(code=1)

            package_id = PackageId(name=name, version=version, source_id=source.source_id)
            source.download([package_id])
            packages = source.get([package_id])
        except CrateyardError as e:
            console.print(f"[red]Error fetching package:[/red] {e}")
            raise typer.Exit(code=1)

    for package in packages:
        console.print(Panel.fit(
            f"[bold green]Package Ready[/bold green]\n"
            f"Name: {package.name}\n"
            f"Version: {package.version}\n"
            f"Path: {package.root}",
            border_style="green"
        ))


@app.command("set-index")
def set_index(
    url: str,
    home: Path = typer.Option(CONFIG_DIR, help="Directory holding the config file"),
):
    """override the default registry index URL."""
    set_index_url(url, home / CONFIG_FILE.name)
    console.print(f"[green]✓ Index URL set to {url}[/green]")


if __name__ == "__main__":
    app()
