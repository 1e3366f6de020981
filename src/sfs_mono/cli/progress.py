"""Progress display for sound field simulations.

Provides rich terminal UI for progress tracking including:
- Progress bar over the secondary sources
- Elapsed time and ETA
- Computational throughput (Mpoints/s)
- Memory usage
"""

import time
from pathlib import Path

import psutil
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from sfs_mono.config import SynthesisConfig
from sfs_mono.core.grid import Grid
from sfs_mono.core.sources import SecondarySources, SourceModel


def format_time(seconds: float) -> str:
    """Format time duration for display.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string like "1m 23s" or "2h 15m"
    """
    if seconds < 60:
        return f"{seconds:.0f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs:02d}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes:02d}m"


class SynthesisProgress:
    """Real-time progress display for the integration over secondary sources.

    Example:
        >>> with SynthesisProgress(console, num_sources, num_points) as progress:
        ...     sound_field_mono(..., callback=progress.update)
    """

    def __init__(
        self,
        console: Console,
        num_sources: int,
        num_points: int,
        update_interval: float = 0.1,
    ):
        """Initialize progress display.

        Args:
            console: Rich console instance
            num_sources: Number of secondary sources
            num_points: Number of evaluation points per source
            update_interval: Minimum time between updates (seconds)
        """
        self.console = console
        self.num_sources = num_sources
        self.num_points = num_points
        self.update_interval = update_interval

        self.start_time = time.time()
        self.last_update = 0.0
        self.completed = 0
        self.peak_memory = 0.0
        self._finished = False

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            TextColumn("•"),
            TimeRemainingColumn(),
            console=console,
        )

        self.task = self.progress.add_task("Integrating", total=num_sources)
        self.progress.start()

    def update(self, index: int, total: int):
        """Advance by one secondary source.

        Matches the ``callback(index, total)`` signature of
        :func:`sfs_mono.integrate`. Display updates are rate limited.

        Args:
            index: Index of the source just added
            total: Total number of sources
        """
        self.completed += 1
        current_time = time.time()

        if self.completed < total and current_time - self.last_update < self.update_interval:
            return

        self.progress.update(self.task, completed=self.completed)

        elapsed = current_time - self.start_time
        if elapsed > 0:
            throughput = self.completed * self.num_points / elapsed / 1e6
        else:
            throughput = 0.0

        current_memory = psutil.Process().memory_info().rss / (1024**3)  # GB
        self.peak_memory = max(self.peak_memory, current_memory)

        self.progress.update(
            self.task,
            description=(
                f"Integrating [dim]{throughput:.1f} Mpoints/s, "
                f"{current_memory:.2f} GB (peak {self.peak_memory:.2f} GB)[/dim]"
            ),
        )
        self.last_update = current_time

    def finish(self):
        """Stop the progress display."""
        if self._finished:
            return
        self.progress.stop()
        self._finished = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()


def print_simulation_info(
    console: Console,
    grid: Grid,
    sources: SecondarySources,
    source_model: SourceModel,
    frequency: float,
    config: SynthesisConfig,
    output_path: Path,
    n_jobs: int = 1,
):
    """Print simulation parameters before running.

    Args:
        console: Rich console instance
        grid: Evaluation grid
        sources: Secondary sources
        source_model: Secondary source model
        frequency: Frequency in Hz
        config: Simulation settings
        output_path: Path to output file
        n_jobs: Number of worker threads
    """
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="white")

    shape_str = " × ".join(str(n) for n in grid.shape)
    kind = "customized" if grid.customized else "regular"
    active = "".join(name for name, a in zip("xyz", grid.active) if a) or "none"
    table.add_row("Grid", f"{shape_str} ({grid.num_points} points, {kind}, active: {active})")
    table.add_row("Secondary sources", f"{len(sources)} ({source_model.value})")
    table.add_row("Frequency", f"{frequency:g} Hz")
    table.add_row("Speed of sound", f"{config.speed_of_sound:g} m/s")
    table.add_row("Workers", str(n_jobs))
    table.add_row("Output", str(output_path))

    console.print(table)
    console.print()
