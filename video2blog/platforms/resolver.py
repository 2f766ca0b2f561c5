from __future__ import annotations

from typing import Iterable

from .base import BasePlatform
from .local import LocalPlatform
from .youtube import YouTubePlatform
from ..errors import InvalidInputError
from ..pipeline.models import VideoSource


class PlatformResolver:
    def __init__(self, platforms: Iterable[BasePlatform] | None = None) -> None:
        self.platforms = list(platforms) if platforms else [
            LocalPlatform(),
            YouTubePlatform(),
        ]

    def resolve(self, source: VideoSource) -> BasePlatform:
        for platform in self.platforms:
            if platform.matches(source):
                return platform
        raise InvalidInputError("Unsupported video source")
