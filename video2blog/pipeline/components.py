from __future__ import annotations

from pathlib import Path
import shutil
import uuid

from ..platforms.resolver import PlatformResolver
from ..pipeline.models import AudioArtifact, VideoSource
from ..utils.ffmpeg import extract_audio as _extract_audio
from ..utils.file import ensure_dir, remove_file


MIN_AUDIO_BYTES = 1000


class VideoAcquirer:
    def __init__(self, resolver: PlatformResolver) -> None:
        self.resolver = resolver

    def acquire(self, source: VideoSource, work_dir: Path) -> Path:
        platform = self.resolver.resolve(source)
        print(f"[acquire] platform={platform.name}")
        return platform.acquire(source, work_dir)


class AudioExtractor:
    def __init__(self, min_audio_bytes: int = MIN_AUDIO_BYTES) -> None:
        self.min_audio_bytes = min_audio_bytes

    def extract(self, video_path: Path, output_dir: Path) -> AudioArtifact:
        ensure_dir(output_dir)
        audio_path = output_dir / f"{video_path.stem}_{uuid.uuid4().hex[:8]}.mp3"
        _extract_audio(video_path, audio_path)
        size = audio_path.stat().st_size
        print(f"[ffmpeg] output file size: {size} bytes")
        if size < self.min_audio_bytes:
            print(f"[ffmpeg] warning: audio file is very small ({size} bytes), it may be silent or invalid")
        return AudioArtifact(path=audio_path, size_bytes=size)


class AudioStore:
    """Public copy of extracted audio, served under ``url_prefix``."""

    def __init__(self, root: Path, url_prefix: str = "/audio") -> None:
        self.root = root
        self.url_prefix = url_prefix.rstrip("/")

    def save(self, audio: AudioArtifact) -> str:
        ensure_dir(self.root)
        filename = f"{uuid.uuid4()}{audio.path.suffix or '.mp3'}"
        target = self.root / filename
        with audio.path.open("rb") as src, target.open("xb") as dst:
            try:
                shutil.copyfileobj(src, dst)
            except OSError:
                dst.close()
                remove_file(target)
                raise
        print(f"[store] audio saved to {target}")
        return f"{self.url_prefix}/{filename}"
