"""
Preview images for captures and recordings.

Images are decoded with Pillow (HEIC through pillow-heif), videos are sampled
with OpenCV at a fixed offset. Callers get an image or None, never an error.
"""
from __future__ import annotations

from typing import Optional

import cv2
from PIL import Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

from config import VIDEO_THUMBNAIL_OFFSET_SECONDS
from utils.capture_types import MediaKind
from utils.logger import logger

register_heif_opener()


def _image_thumbnail(path: str) -> Optional[Image.Image]:
    try:
        with Image.open(path) as img:
            img.load()
            if img.mode not in ("RGB", "RGBA"):
                return img.convert("RGBA" if "A" in img.getbands() else "RGB")
            return img.copy()
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as exc:
        logger.warning("Thumbnail skipped for %s: %s", path, exc)
        return None


def _video_thumbnail(path: str, offset_seconds: float) -> Optional[Image.Image]:
    cap = cv2.VideoCapture(path)
    try:
        if not cap.isOpened():
            logger.warning("Thumbnail skipped for %s: video could not be opened", path)
            return None
        # rotate frames the way the container says they should be displayed
        cap.set(cv2.CAP_PROP_ORIENTATION_AUTO, 1)

        fps = cap.get(cv2.CAP_PROP_FPS) or 0.0
        frame_count = cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0
        if fps <= 0 or frame_count <= 0:
            logger.warning("Thumbnail skipped for %s: unknown duration", path)
            return None
        duration = frame_count / fps
        if offset_seconds >= duration:
            logger.warning(
                "Thumbnail skipped for %s: offset %.1fs is beyond duration %.2fs",
                path, offset_seconds, duration,
            )
            return None

        cap.set(cv2.CAP_PROP_POS_FRAMES, int(offset_seconds * fps))
        ret, frame = cap.read()
        if not ret or frame is None:
            logger.warning("Thumbnail skipped for %s: read() returned no frame", path)
            return None
        return Image.fromarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
    except cv2.error as exc:
        logger.error("Thumbnail generation failed for %s: %s", path, exc, exc_info=True)
        return None
    finally:
        cap.release()


def generate_thumbnail(
    path: str,
    kind: MediaKind,
    offset_seconds: float = VIDEO_THUMBNAIL_OFFSET_SECONDS,
) -> Optional[Image.Image]:
    """
    Decode a preview image for a capture at its native pixel size.

    Videos are sampled at a fixed offset. Returns None when nothing could be
    decoded; failures are logged, never raised.
    """
    if kind is MediaKind.VIDEO:
        thumb = _video_thumbnail(path, offset_seconds)
    else:
        thumb = _image_thumbnail(path)

    if thumb is not None and (thumb.width <= 0 or thumb.height <= 0):
        logger.warning("Thumbnail skipped for %s: empty image", path)
        return None
    return thumb
