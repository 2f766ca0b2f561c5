import pytest
from openai import OpenAIError

from conftest import FakeCompletions, make_openai_client
from video2blog.errors import EmptyGenerationError, EmptyTranscriptError, GenerationError
from video2blog.llm.blog import LANGUAGE_PROMPTS, BlogGenerator, build_prompt, resolve_language


TRANSCRIPT = "Today we talk about growing tomatoes on a balcony."


def _generator(completions):
    return BlogGenerator(make_openai_client(completions), model="gemini-2.5-flash-lite")


def _prompt(completions):
    return completions.calls[0]["messages"][0]["content"]


def test_generates_blog_with_language_template():
    completions = FakeCompletions(content="  # Balcony Tomatoes\n\nBody  ")

    result = _generator(completions).generate(TRANSCRIPT, "hi")

    assert result.content == "# Balcony Tomatoes\n\nBody"
    assert result.language == "hi"
    assert len(completions.calls) == 1
    assert completions.calls[0]["model"] == "gemini-2.5-flash-lite"
    prompt = _prompt(completions)
    assert prompt.startswith(LANGUAGE_PROMPTS["hi"])
    assert prompt.endswith(TRANSCRIPT)


@pytest.mark.parametrize("code", ["fr", "unknown", "", None])
def test_unrecognized_language_falls_back_to_default(code):
    completions = FakeCompletions()

    result = _generator(completions).generate(TRANSCRIPT, code)

    assert result.language == "en"
    assert _prompt(completions).startswith(LANGUAGE_PROMPTS["en"])


@pytest.mark.parametrize("transcript", ["", "   \n\t"])
def test_empty_transcript_never_calls_service(transcript):
    completions = FakeCompletions()

    with pytest.raises(EmptyTranscriptError):
        _generator(completions).generate(transcript, "en")
    assert completions.calls == []


@pytest.mark.parametrize("content", ["", None, "   "])
def test_empty_generation_fails(content):
    completions = FakeCompletions(content=content)

    with pytest.raises(EmptyGenerationError):
        _generator(completions).generate(TRANSCRIPT, "en")
    assert len(completions.calls) == 1


def test_service_error_is_wrapped_without_retry():
    completions = FakeCompletions(error=OpenAIError("quota exceeded"))

    with pytest.raises(GenerationError, match="quota exceeded"):
        _generator(completions).generate(TRANSCRIPT, "ta")
    assert len(completions.calls) == 1


def test_prompt_layout():
    prompt = build_prompt("words", "te")
    assert prompt == (
        LANGUAGE_PROMPTS["te"]
        + "\n\nGenerate the SEO blog article from this video transcript:\n\nwords"
    )
    assert resolve_language("TA") == "ta"
