"""Command-line scripts package initialization."""

from .run_simulation import main as run_simulation_main

__all__ = ["run_simulation_main"]
