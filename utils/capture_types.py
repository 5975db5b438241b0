from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from config import VIDEO_EXTENSIONS


class MediaKind(Enum):
    IMAGE = "image"
    VIDEO = "video"

    @classmethod
    def from_path(cls, path: str) -> "MediaKind":
        ext = os.path.splitext(path)[1].lstrip(".").lower()
        return cls.VIDEO if ext in VIDEO_EXTENSIONS else cls.IMAGE


@dataclass(frozen=True, slots=True)
class CaptureArtifact:
    """
    Reference to a screenshot or recording on disk.

    Attributes:
        path: Absolute path of the file.
        kind: Image or video, derived from the extension when not given.
        created_at: When the capture finished.
    """

    path: str
    kind: MediaKind
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_path(cls, path: str, created_at: datetime | None = None) -> "CaptureArtifact":
        abs_path = os.path.abspath(os.path.expanduser(path))
        return cls(
            path=abs_path,
            kind=MediaKind.from_path(abs_path),
            created_at=created_at or datetime.now(),
        )

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    def exists(self) -> bool:
        return os.path.isfile(self.path)
