from __future__ import annotations

from pathlib import Path

from .base import BasePlatform
from ..errors import InvalidInputError
from ..pipeline.models import LocalUpload, VideoSource


class LocalPlatform(BasePlatform):
    name = "local"

    def matches(self, source: VideoSource) -> bool:
        return isinstance(source, LocalUpload)

    def acquire(self, source: VideoSource, work_dir: Path) -> Path:
        path = Path(source.path)
        if not path.is_file():
            raise InvalidInputError(f"Video file not found: {source.original_name or path}")
        return path
