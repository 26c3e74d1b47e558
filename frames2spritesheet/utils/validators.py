"""Validation helpers for user inputs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..core import AtlasSettings, RoundingPolicy
from ..core.errors import ValidationError

MIN_PALETTE_COLORS = 2
MAX_PALETTE_COLORS = 256


def parse_rounding(value: str | RoundingPolicy | None) -> RoundingPolicy:
    """Parse a rounding policy name; unset means floor."""

    if value is None or value == "":
        return RoundingPolicy.FLOOR
    try:
        return RoundingPolicy(value.lower() if isinstance(value, str) else value)
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in RoundingPolicy)
        raise ValidationError(f"Rounding must be one of: {choices}") from exc


def validate_palette_colors(colors: int) -> None:
    if colors < MIN_PALETTE_COLORS or colors > MAX_PALETTE_COLORS:
        raise ValidationError(f"Palette colors must be between {MIN_PALETTE_COLORS} and {MAX_PALETTE_COLORS}")


def validate_alpha_level(value: int, field: str) -> None:
    """Intermediate alpha levels must sit strictly below opaque."""

    if value < 0 or value > 254:
        raise ValidationError(f"{field} must be between 0 and 254")


def validate_indent(indent: Optional[int]) -> None:
    if indent is not None and indent < 0:
        raise ValidationError("JSON indent must be zero or greater")


def validate_search_dirs(search_dirs: Optional[list[Path]]) -> None:
    """Declared search directories must exist."""

    for directory in search_dirs or []:
        if not directory.is_dir():
            raise ValidationError(f"Search directory does not exist: {directory}")


def validate_settings(settings: AtlasSettings) -> AtlasSettings:
    """Check every configurable value, returning the settings unchanged."""

    validate_palette_colors(settings.palette_colors)
    validate_alpha_level(settings.alpha_cutoff, "Alpha cutoff")
    validate_alpha_level(settings.low_alpha, "Low alpha")
    if settings.low_alpha > settings.alpha_cutoff:
        raise ValidationError("Low alpha must not exceed the alpha cutoff")
    validate_indent(settings.json_indent)
    validate_search_dirs(settings.search_dirs)
    if settings.workspace is not None and not settings.workspace.is_dir():
        raise ValidationError(f"Workspace does not exist: {settings.workspace}")
    return settings
