import json
from pathlib import Path

import pytest
from PIL import Image


def write_meta(directory: Path, size=(10, 10), offset=(0, 0), frames=(), frame_count=None) -> Path:
    """Write a meta.json; ``size`` is (h, w), ``frames`` is a list of (h, w, x, y)."""

    payload = {
        "size": {"h": size[0], "w": size[1]},
        "offset": {"x": offset[0], "y": offset[1]},
        "frame_count": len(frames) if frame_count is None else frame_count,
        "extra": {
            "frames_info": [
                {"original_height": h, "original_width": w, "x_offset": x, "y_offset": y} for h, w, x, y in frames
            ]
        },
    }
    path = directory / "meta.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def write_frames(directory: Path, count: int, size=(10, 10), color=(200, 40, 40, 255)) -> list[Path]:
    """Write ``count`` solid source frames named 0.png, 1.png, ..."""

    paths = []
    for index in range(count):
        path = directory / f"{index}.png"
        Image.new("RGBA", size, color).save(path)
        paths.append(path)
    return paths


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "assets" / "slime"
    directory.mkdir(parents=True)
    return directory
