from __future__ import annotations


class BentoError(RuntimeError):
    """Base for every error the request boundary turns into a JSON envelope."""

    status_code = 500
    default_message = "failed to process content"

    def __init__(self, message: str | None = None, details: str | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message if not details else f"{self.message}: {details}")


class InputError(BentoError):
    status_code = 400
    default_message = "content must not be empty"


class ExtractionError(BentoError):
    status_code = 400
    default_message = "unable to fetch the article, please make sure the link is valid and reachable"


class FetchError(ExtractionError):
    pass


class UnsupportedSourceError(ExtractionError):
    default_message = "no extractor is registered for this link"


class ConfigurationError(BentoError):
    default_message = "completion API key is not set"


class UpstreamError(BentoError):
    default_message = "completion API call failed"


class UpstreamFormatError(UpstreamError):
    default_message = "completion API returned a malformed response"


class ModelOutputParseError(BentoError):
    default_message = "model reply could not be parsed as JSON"

    def __init__(self, raw: str, message: str | None = None, details: str | None = None) -> None:
        self.raw = raw
        super().__init__(message, details)


def truncate_body(text: str, limit: int = 200) -> str:
    return text[:limit]
