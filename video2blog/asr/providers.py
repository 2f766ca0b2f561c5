from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Callable, Iterable
import time

import requests

from ..errors import EmptyTranscriptError, TranscriptionError, TransientNetworkError
from ..pipeline.models import TranscriptionResult
from ..utils.retry import with_retry


DEEPGRAM_LISTEN_URL = "https://api.deepgram.com/v1/listen"
AUTO_LANGUAGE = "auto"
MULTI_LANGUAGE = "multi"
UNKNOWN_LANGUAGE = "unknown"
MAX_ATTEMPTS = 3
RETRY_BASE_DELAY = 2.0


def is_transient_error(exc: BaseException) -> bool:
    if isinstance(
        exc,
        (
            TransientNetworkError,
            requests.ConnectionError,
            requests.Timeout,
            ConnectionResetError,
            ConnectionRefusedError,
            TimeoutError,
        ),
    ):
        return True
    message = str(exc).lower()
    return "connection" in message or "econnreset" in message


def detect_language(words: Iterable[dict]) -> str:
    """Most frequent per-word language tag; the first one seen wins a tie."""
    counts: Counter[str] = Counter()
    for word in words:
        language = word.get("language")
        if language:
            counts[language] += 1
    if not counts:
        return UNKNOWN_LANGUAGE
    print(f"[asr] language distribution: {dict(counts)}")
    return counts.most_common(1)[0][0]


def _top_alternative(raw: dict) -> dict:
    channels = (raw.get("results") or {}).get("channels") or []
    if not channels:
        return {}
    alternatives = channels[0].get("alternatives") or []
    return alternatives[0] if alternatives else {}


class DeepgramASR:
    def __init__(
        self,
        api_key: str,
        model: str = "nova-3",
        session: requests.Session | None = None,
        base_url: str = DEEPGRAM_LISTEN_URL,
        timeout: float = 300.0,
        retries: int = MAX_ATTEMPTS,
        base_delay: float = RETRY_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.session = session or requests.Session()
        self.base_url = base_url
        self.timeout = timeout
        self.retries = retries
        self.base_delay = base_delay
        self.sleep = sleep

    def transcribe(self, audio_path: Path, language_hint: str = AUTO_LANGUAGE) -> TranscriptionResult:
        hint = (language_hint or "").strip() or AUTO_LANGUAGE
        auto_detect = hint.lower() == AUTO_LANGUAGE
        language = MULTI_LANGUAGE if auto_detect else hint
        if auto_detect:
            print("[asr] auto-detecting language from audio")
        else:
            print(f"[asr] using language hint: {hint}")

        def _call() -> TranscriptionResult:
            raw = self._request(audio_path, language)
            alternative = _top_alternative(raw)
            transcript = (alternative.get("transcript") or "").strip()
            if auto_detect:
                detected = detect_language(alternative.get("words") or [])
            else:
                detected = hint
            if not transcript:
                raise EmptyTranscriptError("Speech-to-text service returned no transcript", raw_response=raw)
            print(f"[asr] detected language: {detected}, transcript {len(transcript)} chars")
            return TranscriptionResult(transcript=transcript, detected_language=detected, raw=raw)

        return with_retry(
            _call,
            retries=self.retries,
            base_delay=self.base_delay,
            should_retry=is_transient_error,
            sleep=self.sleep,
        )

    def _request(self, audio_path: Path, language: str) -> dict:
        audio = audio_path.read_bytes()
        print(f"[asr] sending {len(audio)} bytes (model={self.model}, language={language})")
        try:
            response = self.session.post(
                self.base_url,
                params={"model": self.model, "language": language, "smart_format": "true"},
                headers={
                    "Authorization": f"Token {self.api_key}",
                    "Content-Type": "audio/mpeg",
                },
                data=audio,
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise TransientNetworkError(f"Speech-to-text connection error: {exc}") from exc
        except requests.RequestException as exc:
            raise TranscriptionError(f"Speech-to-text request failed: {exc}") from exc

        if response.status_code != 200:
            raise TranscriptionError(
                f"Speech-to-text failed with HTTP {response.status_code}: {response.text[:500]}",
                raw_response=response.text,
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TranscriptionError("Speech-to-text returned invalid JSON", raw_response=response.text) from exc
