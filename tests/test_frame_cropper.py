import pytest
from PIL import Image

from frames2spritesheet.core import CropBox, FrameGeometry, RoundingPolicy
from frames2spritesheet.core.errors import CropBoundsError, ProcessingError
from frames2spritesheet.core.frame_cropper import compute_crop_box, crop_frame

REFERENCE = FrameGeometry(height=10, width=10, offset_x=0, offset_y=0)


def test_scale_identity_uses_metadata_values_directly():
    frame = FrameGeometry(height=10, width=4, offset_x=1, offset_y=2)
    assert compute_crop_box((10, 10), frame, REFERENCE) == CropBox(x=1, y=2, width=4, height=10)


def test_reference_offset_is_added_before_scaling():
    reference = FrameGeometry(height=10, width=10, offset_x=2, offset_y=1)
    frame = FrameGeometry(height=4, width=3, offset_x=1, offset_y=1)
    # 2x horizontally, 3x vertically
    assert compute_crop_box((20, 30), frame, reference) == CropBox(x=6, y=6, width=6, height=12)


def test_fractional_coordinates_follow_rounding_policy():
    reference = FrameGeometry(height=4, width=4, offset_x=0, offset_y=0)
    frame = FrameGeometry(height=3, width=3, offset_x=1, offset_y=1)
    # scale 1.5 -> x = 1.5, w = 4.5
    size = (6, 6)
    assert compute_crop_box(size, frame, reference, RoundingPolicy.FLOOR) == CropBox(1, 1, 4, 4)
    assert compute_crop_box(size, frame, reference, RoundingPolicy.ROUND) == CropBox(2, 2, 5, 5)
    assert compute_crop_box(size, frame, reference, RoundingPolicy.CEIL) == CropBox(2, 2, 5, 5)


def test_crop_box_exposes_pillow_box():
    assert CropBox(x=1, y=2, width=3, height=4).box == (1, 2, 4, 6)


def test_crop_frame_persists_crop_and_returns_pixels(tmp_path):
    source = tmp_path / "0.png"
    image = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
    image.putpixel((1, 2), (255, 0, 0, 255))
    image.save(source)
    output = tmp_path / "crop_0.png"

    cropped = crop_frame(source, output, FrameGeometry(height=4, width=3, offset_x=1, offset_y=2), REFERENCE)

    assert (cropped.width, cropped.height) == (3, 4)
    assert cropped.image.size == (3, 4)
    assert cropped.image.getpixel((0, 0)) == (255, 0, 0, 255)
    with Image.open(output) as written:
        assert written.size == (3, 4)


def test_crop_outside_source_raises(tmp_path):
    source = tmp_path / "0.png"
    Image.new("RGBA", (10, 10)).save(source)
    frame = FrameGeometry(height=6, width=4, offset_x=8, offset_y=0)
    with pytest.raises(CropBoundsError):
        crop_frame(source, tmp_path / "crop_0.png", frame, REFERENCE)
    assert not (tmp_path / "crop_0.png").exists()


def test_empty_crop_raises(tmp_path):
    source = tmp_path / "0.png"
    Image.new("RGBA", (10, 10)).save(source)
    with pytest.raises(CropBoundsError, match="empty"):
        crop_frame(source, tmp_path / "crop_0.png", FrameGeometry(0, 3, 0, 0), REFERENCE)


def test_missing_source_raises_processing_error(tmp_path):
    with pytest.raises(ProcessingError):
        crop_frame(tmp_path / "0.png", tmp_path / "crop_0.png", FrameGeometry(1, 1, 0, 0), REFERENCE)
