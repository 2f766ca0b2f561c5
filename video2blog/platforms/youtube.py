from __future__ import annotations

import re
import subprocess
import uuid
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from .base import BasePlatform
from .cookies import provision_cookies, release_cookies
from ..errors import (
    AuthRequiredError,
    DownloadFailedError,
    EmptyDownloadError,
    InvalidInputError,
    ToolNotFoundError,
)
from ..pipeline.models import CookieMaterial, DownloadProfile, RemoteUrl, VideoSource
from ..utils.file import ensure_dir, remove_file


DOWNLOAD_TIMEOUT_SECONDS = 300
MAX_OUTPUT_BYTES = 50 * 1024 * 1024

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

DOWNLOAD_PROFILES: tuple[DownloadProfile, ...] = (
    DownloadProfile(
        name="web-mp4",
        args=(
            "-f", "(bv*[ext=mp4][height<=720]+ba[ext=m4a])/best[ext=mp4]/best",
            "--extractor-args", "youtube:player_client=android,web",
        ),
    ),
    DownloadProfile(
        name="android",
        args=(
            "-f", "best",
            "--extractor-args", "youtube:player_client=android",
        ),
    ),
    DownloadProfile(
        name="ios",
        args=(
            "-f", "best[ext=mp4]/best",
            "--extractor-args", "youtube:player_client=ios",
        ),
    ),
)

AUTH_CHALLENGE_RE = re.compile(
    r"sign in to confirm"
    r"|sign in to view"
    r"|please sign in"
    r"|use --cookies"
    r"|--cookies-from-browser"
    r"|cookies (?:are|is) (?:required|needed)"
    r"|login required"
    r"|requires? (?:a )?login"
    r"|log in to",
    re.IGNORECASE,
)

Runner = Callable[..., subprocess.CompletedProcess]


def is_auth_challenge(output: str) -> bool:
    return bool(AUTH_CHALLENGE_RE.search(output or ""))


def default_binary_locations(configured: str | None = None) -> list[str]:
    candidates = [
        configured,
        "yt-dlp",
        "/usr/local/bin/yt-dlp",
        "/usr/bin/yt-dlp",
        str(Path.home() / ".local" / "bin" / "yt-dlp"),
    ]
    locations: list[str] = []
    for candidate in candidates:
        if candidate and candidate not in locations:
            locations.append(candidate)
    return locations


def build_base_args(cookies: CookieMaterial | None) -> list[str]:
    args = [
        "--no-playlist",
        "--retries", "3",
        "--extractor-retries", "3",
        "--socket-timeout", "30",
        "--no-check-certificates",
        "--no-warnings",
        "--geo-bypass",
        "--merge-output-format", "mp4",
        "--user-agent", USER_AGENT,
        "--add-header", "Referer:https://www.youtube.com",
        "--add-header", "Accept-Language:en-US,en;q=0.9",
    ]
    if cookies:
        args.extend(["--cookies", str(cookies.path)])
    return args


def _read_output(log_path: Path, limit: int) -> str:
    if not log_path.exists():
        return ""
    size = log_path.stat().st_size
    with log_path.open("rb") as f:
        if size > limit:
            f.seek(size - limit)
        return f.read().decode("utf-8", errors="replace")


def _summarize(output: str) -> str:
    lines = [line.strip() for line in output.splitlines() if line.strip()]
    errors = [line for line in lines if line.startswith("ERROR")]
    if errors:
        return errors[-1]
    return lines[-1] if lines else "no output"


class YouTubePlatform(BasePlatform):
    """Fetches remote videos with the yt-dlp CLI.

    Profiles are tried in order. A binary location is skipped only when it
    does not exist, a profile only when it fails for a reason other than an
    authentication wall.
    """

    name = "youtube"

    def __init__(
        self,
        binary_locations: Optional[Sequence[str]] = None,
        profiles: Iterable[DownloadProfile] = DOWNLOAD_PROFILES,
        cookies_file: str | None = None,
        cookies_content: str | None = None,
        timeout: float = DOWNLOAD_TIMEOUT_SECONDS,
        max_output_bytes: int = MAX_OUTPUT_BYTES,
        runner: Runner = subprocess.run,
    ) -> None:
        self.binary_locations = list(binary_locations) if binary_locations else default_binary_locations()
        self.profiles = list(profiles)
        self.cookies_file = cookies_file
        self.cookies_content = cookies_content
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes
        self.runner = runner

    def matches(self, source: VideoSource) -> bool:
        return isinstance(source, RemoteUrl)

    def acquire(self, source: VideoSource, work_dir: Path) -> Path:
        url = (source.url or "").strip()
        if not url:
            raise InvalidInputError("YouTube URL required")

        download_dir = work_dir / f"youtube_{uuid.uuid4().hex}"
        ensure_dir(download_dir)
        video_path = download_dir / f"{uuid.uuid4()}.mp4"
        print(f"[youtube] downloading {url} -> {video_path}")

        cookies = provision_cookies(self.cookies_file, self.cookies_content, download_dir)
        try:
            return self._download(url, video_path, cookies)
        finally:
            release_cookies(cookies)

    def _download(self, url: str, video_path: Path, cookies: CookieMaterial | None) -> Path:
        log_path = video_path.with_suffix(".log")
        last_error: DownloadFailedError | None = None
        total = len(self.profiles)
        try:
            for index, profile in enumerate(self.profiles, start=1):
                print(f"[youtube] profile {index}/{total} {profile.name}")
                remove_file(video_path)
                args = [*profile.args, *build_base_args(cookies), "-o", str(video_path), url]
                try:
                    returncode = self._execute(args, log_path)
                except subprocess.TimeoutExpired:
                    last_error = DownloadFailedError(
                        f"YouTube download timed out after {self.timeout:.0f}s ({profile.name})"
                    )
                    print(f"[youtube] warning: {last_error}")
                    continue
                if returncode is None:
                    continue

                output = _read_output(log_path, self.max_output_bytes)
                if returncode != 0:
                    if is_auth_challenge(output):
                        print(f"[youtube] authentication required ({profile.name}), not trying other profiles")
                        raise AuthRequiredError(
                            "YouTube requires sign-in to download this video. "
                            "Configure YTDLP_COOKIES or YTDLP_COOKIES_FILE with exported browser cookies.",
                            raw_response=output,
                        )
                    last_error = DownloadFailedError(
                        f"YouTube download failed ({profile.name}): {_summarize(output)}",
                        raw_response=output,
                    )
                    print(f"[youtube] warning: {last_error}")
                    continue

                size = video_path.stat().st_size if video_path.exists() else 0
                if size == 0:
                    last_error = EmptyDownloadError(
                        f"Downloaded file is empty ({profile.name})",
                        raw_response=output,
                    )
                    print(f"[youtube] warning: {last_error}")
                    remove_file(video_path)
                    continue

                print(f"[youtube] download complete ({profile.name}): {size / 1024 / 1024:.2f} MB")
                return video_path
        finally:
            remove_file(log_path)

        remove_file(video_path)
        if last_error:
            raise last_error
        raise ToolNotFoundError(
            "yt-dlp not found. Install yt-dlp or set YTDLP_PATH. Tried: "
            + ", ".join(self.binary_locations)
        )

    def _execute(self, args: list[str], log_path: Path) -> int | None:
        """Run yt-dlp from the first location that exists; None when none does."""
        for binary in self.binary_locations:
            try:
                with log_path.open("wb") as log_file:
                    completed = self.runner(
                        [binary, *args],
                        stdin=subprocess.DEVNULL,
                        stdout=log_file,
                        stderr=subprocess.STDOUT,
                        timeout=self.timeout,
                        check=False,
                    )
            except FileNotFoundError:
                print(f"[youtube] {binary} not found, trying next location")
                continue
            return completed.returncode
        return None
