"""Batch entry point for building atlases from asset directories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .core import AtlasSettings, DirectoryStatus, ProcessingOutcome, UpdateStatus
from .core import pipeline
from .utils import validators

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def summarize(outcomes: Iterable[ProcessingOutcome]) -> list[str]:
    """One human-readable line per processed directory."""

    lines = []
    for outcome in outcomes:
        name = outcome.directory.name
        if outcome.status is DirectoryStatus.FAILED:
            lines.append(f"{name}: failed ({outcome.error})")
        elif outcome.status is DirectoryStatus.SKIPPED:
            lines.append(f"{name}: skipped")
        else:
            update = outcome.record_update
            if update is None or update.status is UpdateStatus.NO_TARGET:
                records = "frame records not found"
            elif update.status is UpdateStatus.ERROR:
                records = f"frame records not updated ({update.message})"
            else:
                records = f"frame records updated in {update.document_path}"
            lines.append(f"{name}: atlas {outcome.atlas_path}, {records}")
    return lines


def run(directories: Iterable[Path], settings: AtlasSettings) -> int:
    """Process every directory and return a process exit code."""

    validators.validate_settings(settings)
    outcomes = pipeline.process_directories(directories, settings)
    for line in summarize(outcomes):
        logger.info(line)
    failed = [o for o in outcomes if o.status is DirectoryStatus.FAILED]
    return 1 if failed else 0
