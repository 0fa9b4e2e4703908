"""Exception types raised by the engagement pipeline."""

from typing import Optional


class EngagementError(Exception):
    """Base class for all errors raised by pr_engagement."""


class ConfigurationError(EngagementError):
    """Raised when analysis settings are missing or out of range."""


class GitHubAPIError(EngagementError):
    """Raised when the GitHub API answers with a non-success status."""

    def __init__(self, status_code: Optional[int], body: str = '', url: str = None):
        self.status_code = status_code
        self.body = body
        self.url = url
        target = f" for {url}" if url else ''
        super().__init__(f"API request failed with status code {status_code}{target}: {body}")


class RateLimitError(GitHubAPIError):
    """Raised on a 429 response; callers may wait and retry the same request."""


class ResponseParseError(EngagementError):
    """Raised when a response body cannot be decoded into the expected shape."""

    def __init__(self, message: str, url: str = None):
        self.url = url
        super().__init__(f"Failed to parse API response from {url}: {message}")


class CollectionError(EngagementError):
    """Raised when any fetch of the collection plan fails.

    Attributes:
        resource: Human readable name of the resource that failed (e.g. 'reviews for PR #12')
        cause: The original exception
    """

    def __init__(self, resource: str, cause: Exception):
        self.resource = resource
        self.cause = cause
        super().__init__(f"Failed to fetch GitHub data ({resource}): {cause}")
