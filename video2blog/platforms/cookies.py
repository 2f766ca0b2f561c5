from __future__ import annotations

import base64
import binascii
import uuid
from pathlib import Path

from ..pipeline.models import CookieMaterial
from ..utils.file import remove_file


def _looks_like_cookie_file(text: str) -> bool:
    if text.lstrip().startswith("#"):
        return True
    return any(line.count("\t") >= 6 for line in text.splitlines())


def decode_cookie_content(content: str) -> str:
    """Return Netscape cookie text from raw or base64 inline configuration."""
    text = content.replace("\\r\\n", "\n").replace("\\n", "\n").replace("\\t", "\t").strip()
    if _looks_like_cookie_file(text):
        return text
    try:
        decoded = base64.b64decode("".join(text.split()), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return text
    return decoded.replace("\\n", "\n")


def provision_cookies(
    cookies_file: str | None,
    cookies_content: str | None,
    work_dir: Path,
) -> CookieMaterial | None:
    if cookies_file:
        path = Path(cookies_file).expanduser()
        if path.is_file():
            print(f"[cookies] using cookie file {path}")
            return CookieMaterial(path=path, temporary=False)
        print(f"[cookies] warning: cookie file {path} not found, ignoring")

    if cookies_content:
        text = decode_cookie_content(cookies_content)
        if not text.strip():
            return None
        if not text.endswith("\n"):
            text += "\n"
        path = work_dir / f"cookies_{uuid.uuid4().hex}.txt"
        path.write_text(text, encoding="utf-8")
        print(f"[cookies] wrote inline cookies to {path.name}")
        return CookieMaterial(path=path, temporary=True)

    return None


def release_cookies(material: CookieMaterial | None) -> None:
    if material and material.temporary:
        remove_file(material.path)
