from __future__ import annotations


class PipelineError(RuntimeError):
    http_status = 500

    def __init__(self, message: str, raw_response: dict | str | None = None):
        super().__init__(message)
        self.raw_response = raw_response


class InvalidInputError(PipelineError):
    http_status = 400


class ToolNotFoundError(PipelineError):
    pass


class ExtractionFailedError(PipelineError):
    pass


class DownloadFailedError(PipelineError):
    pass


class AuthRequiredError(DownloadFailedError):
    http_status = 403


class EmptyDownloadError(DownloadFailedError):
    pass


class TranscriptionError(PipelineError):
    def __init__(
        self,
        message: str,
        raw_response: dict | str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, raw_response=raw_response)
        self.status_code = status_code


class EmptyTranscriptError(TranscriptionError):
    pass


class TransientNetworkError(TranscriptionError):
    pass


class GenerationError(PipelineError):
    pass


class EmptyGenerationError(GenerationError):
    pass
