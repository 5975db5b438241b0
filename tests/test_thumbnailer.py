import cv2
import numpy as np
import pytest
from PIL import Image

from core.thumbnailer import generate_thumbnail
from utils.capture_types import MediaKind


def _write_video(path, seconds, fps=10, size=(64, 48)):
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), fps, size)
    assert writer.isOpened()
    for i in range(int(seconds * fps)):
        frame = np.full((size[1], size[0], 3), (i * 7) % 255, dtype=np.uint8)
        writer.write(frame)
    writer.release()
    return str(path)


def test_image_thumbnail_native_size(png_file):
    thumb = generate_thumbnail(png_file, MediaKind.IMAGE)
    assert isinstance(thumb, Image.Image)
    assert thumb.size == (64, 48)


def test_palette_image_is_converted(tmp_path):
    path = tmp_path / "anim.gif"
    Image.new("P", (10, 20)).save(path)
    thumb = generate_thumbnail(str(path), MediaKind.IMAGE)
    assert thumb is not None
    assert thumb.mode in ("RGB", "RGBA")
    assert thumb.size == (10, 20)


def test_missing_image_yields_none(tmp_path):
    assert generate_thumbnail(str(tmp_path / "gone.png"), MediaKind.IMAGE) is None


def test_garbage_image_yields_none(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")
    assert generate_thumbnail(str(path), MediaKind.IMAGE) is None


def test_video_frame_at_offset(tmp_path):
    path = _write_video(tmp_path / "clip.avi", seconds=3)
    thumb = generate_thumbnail(path, MediaKind.VIDEO)
    assert isinstance(thumb, Image.Image)
    assert thumb.width == 64
    assert thumb.height == 48


def test_video_shorter_than_offset_yields_none(tmp_path):
    path = _write_video(tmp_path / "short.avi", seconds=1)
    assert generate_thumbnail(path, MediaKind.VIDEO) is None


@pytest.mark.parametrize("name", ["missing.mov", "empty.mp4"])
def test_unreadable_video_yields_none(tmp_path, name):
    path = tmp_path / name
    if name.startswith("empty"):
        path.write_bytes(b"")
    assert generate_thumbnail(str(path), MediaKind.VIDEO) is None


def test_oversized_image_yields_none(png_file, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    assert generate_thumbnail(png_file, MediaKind.IMAGE) is None


def test_heic_decoder_registered():
    assert ".heic" in Image.registered_extensions()
