"""Parsing of the asset tool's ``meta.json``."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError as SchemaError

from . import AnimationMetadata, FrameGeometry
from .errors import MetadataError, MetadataNotFoundError

logger = logging.getLogger(__name__)

META_FILENAME = "meta.json"
# Frame heights and vertical offsets are stored at half resolution.
VERTICAL_SCALE = 2


class SizeModel(BaseModel):
    h: int = Field(gt=0)
    w: int = Field(gt=0)


class OffsetModel(BaseModel):
    x: int = Field(ge=0)
    y: int = Field(ge=0)


class FrameInfoModel(BaseModel):
    original_height: int = Field(ge=0)
    original_width: int = Field(ge=0)
    x_offset: int = Field(ge=0)
    y_offset: int = Field(ge=0)


class ExtraModel(BaseModel):
    frames_info: list[FrameInfoModel]


class MetaDocument(BaseModel):
    """Schema of the fields read from ``meta.json``; other keys are ignored."""

    size: SizeModel
    offset: OffsetModel
    frame_count: int = Field(ge=0)
    extra: ExtraModel


def load_metadata(meta_path: Path) -> AnimationMetadata:
    """Read reference geometry and per-frame geometry from ``meta_path``."""

    if not meta_path.is_file():
        raise MetadataNotFoundError(meta_path)

    try:
        raw = meta_path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MetadataError(meta_path, reason=str(exc)) from exc

    try:
        document = MetaDocument.model_validate_json(raw)
    except SchemaError as exc:
        raise MetadataError(meta_path, reason=_summarize(exc)) from exc

    metadata = to_animation_metadata(document)
    logger.info("%s: %s frames declared", meta_path.parent.name, metadata.declared_frame_count)
    if not metadata.frame_count_matches:
        logger.warning(
            "%s: frame info count (%s) does not match frame_count value (%s)",
            meta_path,
            len(metadata.frames),
            metadata.declared_frame_count,
        )
    return metadata


def to_animation_metadata(document: MetaDocument) -> AnimationMetadata:
    reference = FrameGeometry(
        height=document.size.h,
        width=document.size.w,
        offset_x=document.offset.x,
        offset_y=document.offset.y,
    )
    frames = tuple(
        FrameGeometry(
            height=info.original_height * VERTICAL_SCALE,
            width=info.original_width,
            offset_x=info.x_offset,
            offset_y=info.y_offset * VERTICAL_SCALE,
        )
        for info in document.extra.frames_info
    )
    return AnimationMetadata(reference=reference, frames=frames, declared_frame_count=document.frame_count)


def _summarize(exc: SchemaError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "<root>"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)
