"""Shared logging helpers for crateimport."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with the CLI defaults.

    Parameters mirror ``logging.basicConfig``. Pass ``force=True`` to
    reconfigure from tests or when the CLI log level changes.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


def parse_log_level(value: str) -> int:
    """Translate a level name such as ``"debug"`` into a ``logging`` constant."""

    level = logging.getLevelNamesMapping().get(value.strip().upper())
    if level is None:
        raise ValueError(f"Unknown log level: {value}")
    return level
