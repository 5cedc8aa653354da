"""Exception hierarchy shared by the pipeline stages."""

from __future__ import annotations

from typing import Any


class PipelineError(Exception):
    """Base error for every pipeline stage."""

    def __init__(self, message: str, stage: str | None = None, item_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.item_id = item_id


class ConfigurationError(PipelineError):
    """A required setting (API token, key) is missing. Fatal for the run."""


class ValidationError(PipelineError):
    """Input rejected before any external call was made."""


class InvalidURLError(ValidationError):
    """URL is blocked or does not look like an article."""

    def __init__(self, url: str, reason: str = "url rejected by filter"):
        super().__init__(f"{reason}: {url}", stage="extract")
        self.url = url
        self.reason = reason


class UpstreamError(PipelineError):
    """An external API call failed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: Any = None,
        stage: str | None = None,
    ):
        super().__init__(message, stage=stage)
        self.status_code = status_code
        self.response_data = response_data


class NoContentError(UpstreamError):
    """Extraction API answered but returned no article objects."""


class EmptyResponseError(UpstreamError):
    """Analysis API answered with an empty message."""


class RateLimitError(UpstreamError):
    """Upstream answered 429; the shared clock has been pushed forward."""

    def __init__(self, message: str, retry_after: float, stage: str | None = None):
        super().__init__(message, status_code=429, stage=stage)
        self.retry_after = retry_after


class StoreError(PipelineError):
    """Persisting to the content store failed."""
