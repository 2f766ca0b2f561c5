from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Callable, Optional

import requests
from openai import OpenAI

from ..config import Settings
from ..asr.providers import DeepgramASR
from ..llm.blog import BlogGenerator, DEFAULT_LANGUAGE
from ..platforms.local import LocalPlatform
from ..platforms.resolver import PlatformResolver
from ..platforms.youtube import YouTubePlatform, default_binary_locations
from .components import AudioExtractor, AudioStore, VideoAcquirer
from .models import LanguageDirective, LocalUpload, PipelineResult, VideoSource
from ..utils.file import ensure_dir, remove_file


ProgressCallback = Callable[..., None]


class PipelineRunner:
    """Turns one video into a transcript and a blog post.

    Stages run in order: acquire, extract, persist (best effort), transcribe,
    generate. Every temporary file lives in a per-request directory that is
    removed on the way out, whatever stage was reached.
    """

    def __init__(
        self,
        acquirer: VideoAcquirer,
        audio_extractor: AudioExtractor,
        transcriber: DeepgramASR,
        blog_generator: BlogGenerator,
        audio_store: Optional[AudioStore] = None,
        tmp_root: Path | None = None,
    ) -> None:
        self.acquirer = acquirer
        self.audio_extractor = audio_extractor
        self.transcriber = transcriber
        self.blog_generator = blog_generator
        self.audio_store = audio_store
        self.tmp_root = tmp_root

    def _persist_audio(self, audio) -> str | None:
        if not self.audio_store:
            return None
        try:
            return self.audio_store.save(audio)
        except OSError as exc:
            print(f"[pipeline] warning: could not save audio: {exc}")
            return None

    def run(
        self,
        source: VideoSource,
        directive: LanguageDirective | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> PipelineResult:
        directive = directive or LanguageDirective()

        def _progress(step: str, message: str) -> None:
            if on_progress:
                on_progress(step=step, message=message)

        if self.tmp_root:
            ensure_dir(self.tmp_root)
        print(
            "[pipeline] source="
            + type(source).__name__
            + " blog_language="
            + str(directive.blog_language)
            + " audio_language="
            + directive.audio_language
        )

        try:
            with TemporaryDirectory(prefix="video2blog_", dir=self.tmp_root) as tmp_dir:
                work_dir = Path(tmp_dir)

                _progress("acquire", "Acquiring video")
                video_path = self.acquirer.acquire(source, work_dir)

                _progress("extract", "Extracting audio")
                audio = self.audio_extractor.extract(video_path, work_dir / "audio")

                try:
                    _progress("persist", "Saving audio")
                    audio_url = self._persist_audio(audio)

                    _progress("transcribe", "Transcribing audio")
                    transcription = self.transcriber.transcribe(audio.path, directive.audio_language)
                finally:
                    remove_file(audio.path)

                blog_language = directive.blog_language or transcription.detected_language or DEFAULT_LANGUAGE
                print(
                    "[pipeline] detected="
                    + transcription.detected_language
                    + " audio_hint="
                    + directive.audio_language
                    + " blog="
                    + blog_language
                )

                _progress("generate", "Generating blog")
                blog = self.blog_generator.generate(transcription.transcript, blog_language)

                _progress("done", "Done")
                return PipelineResult(
                    transcript=transcription.transcript,
                    blog=blog.content,
                    detected_language=transcription.detected_language,
                    blog_language=blog_language,
                    audio_url=audio_url,
                )
        finally:
            if isinstance(source, LocalUpload) and source.temporary:
                remove_file(Path(source.path))


class PipelineFactory:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def create(self) -> PipelineRunner:
        youtube = YouTubePlatform(
            binary_locations=default_binary_locations(self.settings.ytdlp_path),
            cookies_file=self.settings.cookies_file,
            cookies_content=self.settings.cookies_content,
        )
        resolver = PlatformResolver([LocalPlatform(), youtube])
        transcriber = DeepgramASR(
            api_key=self.settings.deepgram_api_key,
            model=self.settings.asr_model,
            session=requests.Session(),
        )
        llm_client = OpenAI(
            api_key=self.settings.llm_api_key,
            base_url=self.settings.llm_base_url,
            max_retries=0,
        )
        return PipelineRunner(
            acquirer=VideoAcquirer(resolver),
            audio_extractor=AudioExtractor(),
            transcriber=transcriber,
            blog_generator=BlogGenerator(llm_client, self.settings.llm_model),
            audio_store=AudioStore(self.settings.public_audio_dir),
            tmp_root=self.settings.tmp_dir,
        )
