from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import Settings
from .version import __version__


@dataclass
class BannerInfo:
    version: str
    verbose: bool
    playlist_url: str
    allowed_groups: str
    snapshot_path: str
    output_dir: str
    max_attempts: int
    timeout: float


def build_banner_info(settings: Settings, verbose: bool = False) -> BannerInfo:
    """Build a BannerInfo instance from Settings and runtime flags."""
    return BannerInfo(
        version=__version__,
        verbose=verbose,
        playlist_url=settings.fetch.url,
        allowed_groups=", ".join(settings.matching.allowed_groups),
        snapshot_path=str(settings.snapshot_path),
        output_dir=str(settings.output.directory),
        max_attempts=settings.fetch.max_attempts,
        timeout=settings.fetch.timeout,
    )


def print_startup_banner(info: BannerInfo, console: Console) -> None:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="cyan bold", no_wrap=True)
    table.add_column("Value", style="white")

    table.add_row("Version", f"[bold]{info.version}[/bold]")
    if info.verbose:
        table.add_row("Mode", "[cyan]VERBOSE[/cyan]")
    table.add_row("Playlist", info.playlist_url)
    table.add_row("Groups", info.allowed_groups)
    table.add_row("Retries", f"{info.max_attempts} attempts, {info.timeout:g}s timeout")
    table.add_row("Snapshot", info.snapshot_path)
    table.add_row("Output", info.output_dir)

    console.print(Panel(table, title="[bold]sportslink[/bold]", border_style="cyan", expand=False))
