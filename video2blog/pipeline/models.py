from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union


@dataclass
class LocalUpload:
    path: Path
    original_name: str = ""
    temporary: bool = False


@dataclass
class RemoteUrl:
    url: str


VideoSource = Union[LocalUpload, RemoteUrl]


@dataclass(frozen=True)
class LanguageDirective:
    blog_language: Optional[str] = None
    audio_language: str = "auto"

    @classmethod
    def from_request(cls, blog_language: str | None, audio_language: str | None) -> "LanguageDirective":
        return cls(
            blog_language=(blog_language or "").strip() or None,
            audio_language=(audio_language or "").strip() or "auto",
        )


@dataclass
class AudioArtifact:
    path: Path
    size_bytes: int


@dataclass(frozen=True)
class TranscriptionResult:
    transcript: str
    detected_language: str
    raw: dict = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class BlogResult:
    content: str
    language: str


@dataclass(frozen=True)
class DownloadProfile:
    name: str
    args: tuple[str, ...]


@dataclass
class CookieMaterial:
    path: Path
    temporary: bool = False


@dataclass
class PipelineResult:
    transcript: str
    blog: str
    detected_language: str
    blog_language: str
    audio_url: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "transcript": self.transcript,
            "blog": self.blog,
            "detectedLanguage": self.detected_language,
            "blogLanguage": self.blog_language,
        }
        if self.audio_url:
            data["audioUrl"] = self.audio_url
        return data
