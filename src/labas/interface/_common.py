"""Helpers shared by the CLI command groups."""

import logging
from typing import Any

import typer

from labas.application.config import AppConfig, resolve_config

VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def configure_logging(verbose: int) -> None:
    level = VERBOSITY_LEVELS.get(verbose, logging.DEBUG)
    logging.getLogger().setLevel(level)


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config with CLI overrides, exiting with a readable message on bad values."""
    try:
        return resolve_config(overrides)
    except ValueError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(1) from e
