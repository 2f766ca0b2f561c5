import argparse
import json
from pathlib import Path

from .config import get_settings
from .errors import PipelineError
from .pipeline.models import LanguageDirective, LocalUpload, RemoteUrl
from .pipeline.runner import PipelineFactory


def _serve(host: str, port: int) -> None:
    import uvicorn

    uvicorn.run("video2blog.web.app:app", host=host, port=port)


def main() -> None:
    parser = argparse.ArgumentParser(description="Turn a video into an SEO blog post")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Path to a local video file")
    source.add_argument("--url", help="YouTube URL to download")
    source.add_argument("--serve", action="store_true", help="Run the HTTP API instead")
    parser.add_argument("--language", default="", help="Blog language (en, hi, te, ta); defaults to detected")
    parser.add_argument("--audio-language", default="auto", help="Spoken language hint or 'auto'")
    parser.add_argument("--output", help="Write the blog post to this file")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=3001)

    args = parser.parse_args()

    if args.serve:
        _serve(args.host, args.port)
        return

    settings = get_settings()
    runner = PipelineFactory(settings).create()
    if args.file:
        video_source = LocalUpload(path=Path(args.file), original_name=Path(args.file).name)
    else:
        video_source = RemoteUrl(url=args.url)

    def _progress(step: str, message: str) -> None:
        print(f"[{step}] {message}")

    try:
        result = runner.run(
            video_source,
            LanguageDirective.from_request(args.language, args.audio_language),
            on_progress=_progress,
        )
    except PipelineError as exc:
        raise SystemExit(f"Error: {exc}")

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.blog, encoding="utf-8")
        print(f"Done. Blog written to {output_path}")
    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    elif not args.output:
        print(result.blog)


if __name__ == "__main__":
    main()
