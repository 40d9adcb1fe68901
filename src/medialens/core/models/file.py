"""Input file model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from medialens.shared.constants import AUDIO_EXTENSIONS, VIDEO_EXTENSIONS


@dataclass(frozen=True)
class MediaFile:
    """A file handed to the engine for classification.

    The engine never touches the filesystem; size and path come from the
    caller's scan.

    Attributes:
        path: Path of the media file
        size: File size in bytes
    """

    path: Path
    size: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))

    @property
    def name(self) -> str:
        """File name without extension."""
        return self.path.stem

    @property
    def extension(self) -> str:
        """Lower-cased file extension including the dot."""
        return self.path.suffix.lower()

    @property
    def parent(self) -> Path:
        return self.path.parent

    @property
    def is_video(self) -> bool:
        return self.extension in VIDEO_EXTENSIONS

    @property
    def is_audio(self) -> bool:
        return self.extension in AUDIO_EXTENSIONS


__all__ = ["MediaFile"]
