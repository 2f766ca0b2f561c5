import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv


PACKAGE_DIR = Path(__file__).resolve().parent


def load_environment() -> None:
    # earlier files win, load_dotenv never overrides a variable already set
    load_dotenv()
    for directory in (Path.cwd(), PACKAGE_DIR, PACKAGE_DIR.parent):
        load_dotenv(directory / ".env.local")


load_environment()


@dataclass(frozen=True)
class Settings:
    deepgram_api_key: str
    asr_model: str
    llm_api_key: str
    llm_base_url: str
    llm_model: str
    ytdlp_path: str
    cookies_file: str
    cookies_content: str
    tmp_dir: Path
    public_audio_dir: Path
    max_upload_mb: int


def get_settings() -> Settings:
    deepgram_api_key = os.getenv("DEEPGRAM_API_KEY", "").strip()
    asr_model = os.getenv("ASR_MODEL", "nova-3")
    llm_api_key = os.getenv("GEMINI_API_KEY", "").strip()
    llm_base_url = os.getenv("LLM_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
    llm_model = os.getenv("LLM_MODEL", "gemini-2.5-flash-lite")
    ytdlp_path = os.getenv("YTDLP_PATH", "").strip()
    cookies_file = os.getenv("YTDLP_COOKIES_FILE", "").strip()
    cookies_content = os.getenv("YTDLP_COOKIES", "").strip()
    tmp_dir = Path(os.getenv("TMP_DIR", "tmp"))
    public_audio_dir = Path(os.getenv("PUBLIC_AUDIO_DIR", "public/audio"))
    max_upload_mb = int(os.getenv("MAX_UPLOAD_MB", "500"))
    if not deepgram_api_key:
        raise ValueError("Missing DEEPGRAM_API_KEY in environment or .env")
    if not llm_api_key:
        raise ValueError("Missing GEMINI_API_KEY in environment or .env")
    return Settings(
        deepgram_api_key=deepgram_api_key,
        asr_model=asr_model,
        llm_api_key=llm_api_key,
        llm_base_url=llm_base_url,
        llm_model=llm_model,
        ytdlp_path=ytdlp_path,
        cookies_file=cookies_file,
        cookies_content=cookies_content,
        tmp_dir=tmp_dir,
        public_audio_dir=public_audio_dir,
        max_upload_mb=max_upload_mb,
    )
