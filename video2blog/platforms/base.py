from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..pipeline.models import VideoSource


class BasePlatform(ABC):
    name: str = "base"

    @abstractmethod
    def matches(self, source: VideoSource) -> bool:
        raise NotImplementedError

    @abstractmethod
    def acquire(self, source: VideoSource, work_dir: Path) -> Path:
        raise NotImplementedError
