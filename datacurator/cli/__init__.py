"""CLI module for DataCurator."""

from datacurator.cli.app import main, app

__all__ = ["main", "app"]
