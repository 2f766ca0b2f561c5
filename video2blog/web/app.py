from __future__ import annotations

from pathlib import Path
from typing import Optional
import uuid

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from ..config import Settings, get_settings
from ..errors import InvalidInputError, PipelineError
from ..pipeline.models import LanguageDirective, LocalUpload, RemoteUrl
from ..pipeline.runner import PipelineFactory, PipelineRunner
from ..utils.file import ensure_dir, remove_file, sanitize_filename


ALLOWED_EXTENSIONS = {".mp4", ".mov", ".avi", ".webm", ".mkv", ".flv", ".wmv"}
MAX_UPLOAD_BYTES = 500 * 1024 * 1024
CHUNK_SIZE = 1024 * 1024


app = FastAPI(title="Video to Blog")


class YouTubeRequest(BaseModel):
    youtubeUrl: Optional[str] = None
    language: Optional[str] = None
    audioLanguage: Optional[str] = None


def _mount_audio(directory: Path) -> None:
    app.router.routes[:] = [route for route in app.router.routes if getattr(route, "name", None) != "audio"]
    app.mount("/audio", StaticFiles(directory=directory, check_dir=False), name="audio")


def configure(settings: Settings) -> None:
    app.state.runner = PipelineFactory(settings).create()
    app.state.max_upload_bytes = settings.max_upload_mb * 1024 * 1024
    app.state.upload_root = settings.tmp_dir / "uploads"
    _mount_audio(settings.public_audio_dir)


@app.on_event("startup")
def _create_runner() -> None:
    configure(get_settings())


def _runner(request: Request) -> PipelineRunner:
    return request.app.state.runner


def _error(exc: PipelineError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=exc.http_status)


@app.exception_handler(Exception)
async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    print(f"[server] error: {exc!r}")
    return JSONResponse({"error": str(exc) or "Server error"}, status_code=500)


def _save_upload(upload: UploadFile, upload_root: Path, max_bytes: int) -> Path:
    if not upload.filename:
        raise InvalidInputError("No video file provided")
    suffix = Path(upload.filename).suffix.lower()
    if not suffix:
        raise InvalidInputError("File must have an extension")
    if suffix not in ALLOWED_EXTENSIONS:
        raise InvalidInputError(
            "File type not allowed. Supported: " + ", ".join(sorted(ALLOWED_EXTENSIONS))
        )

    ensure_dir(upload_root)
    safe_name = sanitize_filename(Path(upload.filename).stem) or "upload"
    tmp_path = upload_root / f"upload_{uuid.uuid4().hex}_{safe_name}{suffix}"
    written = 0
    try:
        with tmp_path.open("wb") as f:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise InvalidInputError(f"File too large. Limit is {max_bytes // (1024 * 1024)} MB")
                f.write(chunk)
    except Exception:
        remove_file(tmp_path)
        raise
    return tmp_path


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.post("/upload")
def upload_video(
    request: Request,
    video: Optional[UploadFile] = File(None),
    language: str = Form(""),
    audioLanguage: str = Form("auto"),
) -> JSONResponse:
    if video is None:
        return JSONResponse({"error": "No video file provided"}, status_code=400)
    max_bytes = getattr(request.app.state, "max_upload_bytes", MAX_UPLOAD_BYTES)
    try:
        video_path = _save_upload(video, request.app.state.upload_root, max_bytes)
        print(f"[upload] processing file: {video.filename}")
        result = _runner(request).run(
            LocalUpload(path=video_path, original_name=video.filename or "", temporary=True),
            LanguageDirective.from_request(language, audioLanguage),
        )
    except PipelineError as exc:
        print(f"[upload] error: {exc}")
        return _error(exc)
    return JSONResponse(result.to_dict())


@app.post("/upload-youtube")
def upload_youtube(request: Request, payload: YouTubeRequest) -> JSONResponse:
    url = (payload.youtubeUrl or "").strip()
    if not url:
        return JSONResponse({"error": "YouTube URL required"}, status_code=400)
    print(f"[youtube] processing: {url}")
    try:
        result = _runner(request).run(
            RemoteUrl(url=url),
            LanguageDirective.from_request(payload.language, payload.audioLanguage),
        )
    except PipelineError as exc:
        print(f"[youtube] error: {exc}")
        return _error(exc)
    return JSONResponse(result.to_dict())
