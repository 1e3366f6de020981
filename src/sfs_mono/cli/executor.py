"""Script execution sandbox for sound field simulations.

This module provides execution of user-provided simulation scripts with
restricted imports and a controlled namespace, and extracts the simulation
inputs the script defines.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sfs_mono.config import SynthesisConfig, resolve_config

# Names every simulation script has to define
REQUIRED_NAMES = (
    "X",
    "Y",
    "Z",
    "secondary_sources",
    "driving_signals",
    "source_model",
    "frequency",
)


class RestrictedImportError(ImportError):
    """Raised when a disallowed module import is attempted."""

    pass


@dataclass
class SimulationInputs:
    """Inputs of :func:`sfs_mono.sound_field_mono` collected from a script."""

    X: Any
    Y: Any
    Z: Any
    secondary_sources: Any
    driving_signals: Any
    source_model: Any
    frequency: float
    config: SynthesisConfig


def execute_simulation_script(
    script_path: Path, script_content: str, verbose: bool = False
) -> dict[str, Any]:
    """Execute simulation script in controlled namespace.

    The script is executed with restricted imports - only specific scientific
    computing and sfs_mono modules are allowed.

    Args:
        script_path: Path to the script file (for __file__ and relative imports)
        script_content: Content of the script to execute
        verbose: If True, print debug information

    Returns:
        Namespace dict containing all variables defined by the script

    Raises:
        RestrictedImportError: If script attempts to import disallowed module
        SyntaxError: If script has syntax errors
        Exception: Any exception raised by the script during execution
    """
    # Allowed module prefixes (first component of import path)
    allowed_modules = {
        "sfs_mono",
        "numpy",
        "scipy",
        "math",
        "pathlib",
    }

    if isinstance(__builtins__, dict):
        builtins = dict(__builtins__)
        original_import = __builtins__["__import__"]
    else:
        builtins = dict(vars(__builtins__))
        original_import = __builtins__.__import__

    def restricted_import(name, globals=None, locals=None, fromlist=(), level=0):
        """Restricted import that only allows specific modules."""
        top_level = name.split(".")[0]

        if top_level not in allowed_modules:
            raise RestrictedImportError(
                f"Import of '{name}' is not allowed in simulation scripts. "
                f"Allowed modules: {', '.join(sorted(allowed_modules))}"
            )

        return original_import(name, globals, locals, fromlist, level)

    builtins["__import__"] = restricted_import

    # The script gets its own copy of the builtins so the patched import
    # never leaks into the rest of the process
    namespace = {
        "__name__": "__main__",
        "__file__": str(script_path),
        "__builtins__": builtins,
    }

    script_dir = str(script_path.parent)
    sys.path.insert(0, script_dir)
    try:
        if verbose:
            print(f"Executing script: {script_path}")
            print(f"Script directory added to path: {script_dir}")

        exec(compile(script_content, str(script_path), "exec"), namespace)

        if verbose:
            defined_vars = [k for k in namespace.keys() if not k.startswith("__")]
            print(f"Script defined variables: {', '.join(defined_vars)}")

    finally:
        if script_dir in sys.path:
            sys.path.remove(script_dir)

    return namespace


def validate_simulation_namespace(namespace: dict[str, Any]) -> SimulationInputs:
    """Validate that namespace defines a complete simulation.

    Args:
        namespace: Namespace dict from script execution

    Returns:
        The collected simulation inputs. ``config`` defaults to
        ``SynthesisConfig()`` when the script does not define one.

    Raises:
        ValueError: If required names are missing or config has the wrong type
    """
    missing = [name for name in REQUIRED_NAMES if name not in namespace]
    if missing:
        raise ValueError(
            f"Script must define: {', '.join(missing)}. "
            "Example: X, Y, Z = [-2, 2], [-2, 2], 0"
        )

    config = resolve_config(namespace.get("config"))

    return SimulationInputs(
        X=namespace["X"],
        Y=namespace["Y"],
        Z=namespace["Z"],
        secondary_sources=namespace["secondary_sources"],
        driving_signals=namespace["driving_signals"],
        source_model=namespace["source_model"],
        frequency=namespace["frequency"],
        config=config,
    )
