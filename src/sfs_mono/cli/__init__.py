"""Command-line interface for sound field simulations."""
