from __future__ import annotations

from openai import OpenAI, OpenAIError

from ..errors import EmptyGenerationError, EmptyTranscriptError, GenerationError
from ..pipeline.models import BlogResult


DEFAULT_LANGUAGE = "en"

LANGUAGE_PROMPTS = {
    "en": (
        "You are an expert SEO content writer. Given a transcript from a video, "
        "write a complete, long-form SEO blog article in English."
    ),
    "hi": (
        "Aap ek visheshagya SEO content lekhak hain. Ek video ke transcript ko dekhte hue, "
        "ek purn, dirghakaalin SEO blog lekh Hindi mein likhen."
    ),
    "te": (
        "Meeru oka nipuna SEO content rachayita. Oka video transcript nu icchina, "
        "sampurna, sudeergha SEO blog vyasanni Telugu lo vrayandi."
    ),
    "ta": (
        "Neengal oru nipunar SEO content ezhuthalar. Kodukkappatta video transcript-ai "
        "vaithu, muzhumaiyana, neenda SEO blog katturaiyai Tamil-il ezhuthungal."
    ),
}

LANGUAGE_LABELS = {"en": "English", "hi": "Hindi", "te": "Telugu", "ta": "Tamil"}


def resolve_language(language: str | None) -> str:
    code = (language or "").strip().lower()
    return code if code in LANGUAGE_PROMPTS else DEFAULT_LANGUAGE


def build_prompt(transcript: str, language: str) -> str:
    system_prompt = LANGUAGE_PROMPTS[resolve_language(language)]
    return f"{system_prompt}\n\nGenerate the SEO blog article from this video transcript:\n\n{transcript}"


class BlogGenerator:
    def __init__(self, client: OpenAI, model: str) -> None:
        self.client = client
        self.model = model

    def generate(self, transcript: str, language: str | None = DEFAULT_LANGUAGE) -> BlogResult:
        if not transcript or not transcript.strip():
            raise EmptyTranscriptError("Transcript is empty; cannot generate blog.")

        resolved = resolve_language(language)
        if resolved != (language or "").strip().lower():
            print(f"[blog] no template for language {language!r}, using {resolved}")
        print(f"[blog] generating blog in {LANGUAGE_LABELS[resolved]} ({resolved}) with {self.model}")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": build_prompt(transcript, resolved)}],
            )
        except OpenAIError as exc:
            raise GenerationError(f"Blog generation failed: {exc}") from exc

        content = ""
        if response.choices:
            content = (response.choices[0].message.content or "").strip()
        if not content:
            raise EmptyGenerationError("Generative service returned no content")
        return BlogResult(content=content, language=resolved)
