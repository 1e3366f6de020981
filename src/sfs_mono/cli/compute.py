"""Command-line tool for executing sound field simulation scripts.

The sfs-compute CLI tool executes simulation scripts with progress tracking
and HDF5 output generation.
"""

import hashlib
import sys
import time
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console

from sfs_mono import __version__
from sfs_mono.core.grid import build_grid
from sfs_mono.core.synthesis import sound_field_mono, validate_inputs
from sfs_mono.errors import SFSError
from sfs_mono.io.hdf5 import SoundFieldWriter

from .executor import (
    RestrictedImportError,
    execute_simulation_script,
    validate_simulation_namespace,
)
from .progress import SynthesisProgress, format_time, print_simulation_info

console = Console()


@click.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Output file path (default: results_{hash}.h5)",
)
@click.option(
    "--n-jobs",
    "-j",
    type=int,
    default=1,
    show_default=True,
    help="Worker threads for the integration (-1 for all cores)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output with debug info")
@click.option("--dry-run", is_flag=True, help="Validate script without running simulation")
@click.version_option(version=__version__, prog_name="sfs-compute")
def main(
    script: Path,
    output: Path | None,
    n_jobs: int,
    verbose: bool,
    dry_run: bool,
):
    """Simulate a monochromatic sound field defined by a Python script.

    SCRIPT is the path to a Python file that defines the variables X, Y, Z,
    secondary_sources, driving_signals, source_model and frequency, and
    optionally a SynthesisConfig named 'config'.

    Example script:

    \b
        import numpy as np
        from sfs_mono import SynthesisConfig
        X, Y, Z = [-2, 2], [-2, 2], 0
        secondary_sources = np.array([[0, 2, 0, 0, -1, 0, 1]])
        driving_signals = np.array([1.0])
        source_model = "point"
        frequency = 1000
        config = SynthesisConfig(resolution=200)

    The tool will:
    - Execute the script to collect the simulation inputs
    - Display simulation parameters
    - Integrate over the secondary sources with progress tracking
    - Save results to HDF5 with the source script embedded
    """
    sys.exit(_compute(script, output, n_jobs, verbose, dry_run))


def _compute(
    script: Path,
    output: Path | None,
    n_jobs: int,
    verbose: bool,
    dry_run: bool,
) -> int:
    try:
        console.print(f"\n[bold]Sound Field Simulation:[/bold] {script.name}", style="blue")
        console.print("─" * 60)

        script_content = script.read_text()
        script_hash = hashlib.sha256(script_content.encode()).hexdigest()

        if verbose:
            console.print(f"Script hash: {script_hash}")

        if output is None:
            output = Path(f"results_{script_hash[:8]}.h5")

        console.print("Loading simulation...", style="dim")
        try:
            namespace = execute_simulation_script(script, script_content, verbose=verbose)
        except RestrictedImportError as e:
            console.print(f"\n[bold red]Security Error:[/bold red] {e}")
            console.print(
                "\n[yellow]Simulation scripts can only import:[/yellow] "
                "sfs_mono, numpy, scipy, math, pathlib"
            )
            return 1
        except SyntaxError as e:
            console.print("\n[bold red]Syntax Error in script:[/bold red]")
            console.print(f"  {e}")
            return 1

        try:
            inputs = validate_simulation_namespace(namespace)
            # Figures are not shown from the command line
            config = replace(inputs.config, plot=False)
            sources, driving_signals, model, frequency = validate_inputs(
                inputs.secondary_sources,
                inputs.driving_signals,
                inputs.source_model,
                inputs.frequency,
            )
            grid = build_grid(inputs.X, inputs.Y, inputs.Z, config.resolution)
        except ValueError as e:
            console.print(f"\n[bold red]Error:[/bold red] {e}")
            return 1

        print_simulation_info(
            console, grid, sources, model, frequency, config, output, n_jobs
        )

        if dry_run:
            console.print("[yellow]Dry run - simulation not executed[/yellow]")
            return 0

        start_time = time.time()

        progress = SynthesisProgress(console, len(sources), grid.num_points)
        try:
            result = sound_field_mono(
                inputs.X,
                inputs.Y,
                inputs.Z,
                sources,
                model,
                driving_signals,
                frequency,
                config,
                callback=progress.update,
                n_jobs=n_jobs,
            )
        except KeyboardInterrupt:
            progress.finish()
            console.print("\n[yellow]Interrupted by user[/yellow]")
            return 130  # Standard exit code for SIGINT
        except SFSError as e:
            progress.finish()
            console.print(f"\n[bold red]Simulation Error:[/bold red] {e}")
            if verbose:
                console.print_exception()
            return 1
        finally:
            progress.finish()

        runtime = time.time() - start_time

        with SoundFieldWriter(
            output,
            result,
            sources,
            driving_signals,
            config,
            script_content=script_content,
        ) as writer:
            writer.finalize(runtime=runtime, n_jobs=n_jobs)

        console.print("─" * 60)
        console.print("✓ [bold green]Simulation complete![/bold green]")

        if output.exists():
            file_size = output.stat().st_size
            console.print(f"  Output: {output} ({file_size / 1e6:.1f} MB)")
        else:
            console.print(f"  Output: {output}")

        console.print(f"  Runtime: {format_time(runtime)}")

        if runtime > 0:
            throughput = len(sources) * grid.num_points / runtime / 1e6
            console.print(f"  Average throughput: {throughput:.1f} Mpoints/s")

        if verbose:
            console.print("\n[dim]Results can be analyzed with HDF5 tools (h5py, HDFView)[/dim]")

        return 0

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}")
        if verbose:
            console.print_exception()
        return 1


if __name__ == "__main__":
    main()
