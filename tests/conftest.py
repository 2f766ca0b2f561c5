from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
import subprocess

import pytest

from video2blog.pipeline.models import AudioArtifact, BlogResult, TranscriptionResult


class FakeYtDlp:
    """Stands in for ``subprocess.run`` when yt-dlp is invoked.

    Each scripted step is consumed by one call and is either ``"missing"``
    (binary not found), ``"timeout"``, or a ``(returncode, output, payload)``
    tuple where ``payload`` is written to the ``-o`` path when not None.
    """

    def __init__(self, steps):
        self.steps = list(steps)
        self.calls: list[list[str]] = []

    def __call__(self, cmd, stdin=None, stdout=None, stderr=None, timeout=None, check=False):
        self.calls.append(list(cmd))
        step = self.steps.pop(0)
        if step == "missing":
            raise FileNotFoundError(cmd[0])
        if step == "timeout":
            raise subprocess.TimeoutExpired(cmd, timeout)
        returncode, output, payload = step
        if output:
            stdout.write(output.encode("utf-8"))
        if payload is not None:
            target = Path(cmd[cmd.index("-o") + 1])
            target.write_bytes(payload)
        return subprocess.CompletedProcess(cmd, returncode)


class FakeAcquirer:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.video_path: Path | None = None

    def acquire(self, source, work_dir: Path) -> Path:
        if self.error:
            raise self.error
        if hasattr(source, "path"):
            self.video_path = Path(source.path)
            return self.video_path
        self.video_path = work_dir / "downloaded.mp4"
        self.video_path.write_bytes(b"video" * 100)
        return self.video_path


class FakeExtractor:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.audio_path: Path | None = None

    def extract(self, video_path: Path, output_dir: Path) -> AudioArtifact:
        if self.error:
            raise self.error
        output_dir.mkdir(parents=True, exist_ok=True)
        self.audio_path = output_dir / f"{video_path.stem}.mp3"
        self.audio_path.write_bytes(b"\xff\xfb" * 1000)
        return AudioArtifact(path=self.audio_path, size_bytes=2000)


class FakeTranscriber:
    def __init__(self, result: TranscriptionResult | None = None, error: Exception | None = None):
        self.result = result or TranscriptionResult(transcript="hello world", detected_language="en")
        self.error = error
        self.calls: list[tuple[Path, str]] = []

    def transcribe(self, audio_path: Path, language_hint: str = "auto") -> TranscriptionResult:
        self.calls.append((audio_path, language_hint))
        assert audio_path.exists()
        if self.error:
            raise self.error
        return self.result


class FakeGenerator:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[str, str]] = []

    def generate(self, transcript: str, language: str | None = "en") -> BlogResult:
        self.calls.append((transcript, language))
        if self.error:
            raise self.error
        resolved = language if language in ("en", "hi", "te", "ta") else "en"
        return BlogResult(content=f"# Blog\n\n{transcript}", language=resolved)


class FakeCompletions:
    def __init__(self, content: str | None = "A blog post", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_openai_client(completions: FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def fake_ytdlp():
    return FakeYtDlp


@pytest.fixture
def video_file(tmp_path: Path) -> Path:
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 512)
    return path
