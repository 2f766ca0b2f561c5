from pathlib import Path
import shutil
import ffmpeg

from ..errors import ExtractionFailedError, ToolNotFoundError


AUDIO_CODEC = "libmp3lame"
AUDIO_QUALITY = 2


def _ensure_ffmpeg() -> None:
    if not shutil.which("ffmpeg"):
        raise ToolNotFoundError(
            "ffmpeg not found in PATH. Install ffmpeg and ensure it is available in PATH."
        )


def extract_audio(video_path: Path, audio_path: Path) -> Path:
    _ensure_ffmpeg()
    print(f"[ffmpeg] extracting audio {video_path.name} -> {audio_path.name}")
    try:
        (
            ffmpeg
            .input(str(video_path))
            .output(
                str(audio_path),
                vn=None,
                acodec=AUDIO_CODEC,
                **{"q:a": AUDIO_QUALITY},
            )
            .run(capture_stdout=True, capture_stderr=True, overwrite_output=True)
        )
    except ffmpeg.Error as exc:
        stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
        raise ExtractionFailedError(
            f"FFmpeg failed: {stderr or exc}",
            raw_response=stderr,
        ) from exc
    if not audio_path.exists():
        raise ExtractionFailedError(f"Audio file not created: {audio_path}")
    return audio_path
