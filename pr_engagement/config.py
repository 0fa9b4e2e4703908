"""Analysis configuration and validation."""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from .api_client import GITHUB_API_URL, DEFAULT_TIMEOUT_SECONDS
from .collector import DEFAULT_BATCH_SIZE
from .errors import ConfigurationError
from .models import AnalysisWindow

DEFAULT_DAYS = 5
DEFAULT_BREADTH_WEIGHT = 3.0
DEFAULT_DEPTH_DIMINISHING_FACTOR = 0.7
MIN_BREADTH_WEIGHT = 0.25


def validate_weight(value) -> float:
    """Parse and check the breadth weight (a number >= 0.25)."""
    try:
        weight = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Weight must be a number >= {MIN_BREADTH_WEIGHT}, got {value!r}")
    if math.isnan(weight) or weight < MIN_BREADTH_WEIGHT:
        raise ConfigurationError(f"Weight must be a number >= {MIN_BREADTH_WEIGHT}, got {value!r}")
    return weight


def validate_depth_diminishing_factor(value) -> float:
    """Parse and check the depth diminishing factor (strictly between 0 and 1)."""
    try:
        factor = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Depth diminishing factor must be a number greater than 0 and less than 1, got {value!r}")
    if not 0 < factor < 1:
        raise ConfigurationError(
            f"Depth diminishing factor must be a number greater than 0 and less than 1, got {value!r}")
    return factor


def validate_token(token: Optional[str]) -> str:
    if not token or not token.strip():
        raise ConfigurationError(
            "GITHUB_TOKEN environment variable is not set. "
            "Please set your GitHub token with: export GITHUB_TOKEN=your_github_token")
    return token.strip()


def date_n_days_ago(days: int, now: datetime = None) -> datetime:
    """Return the moment `days` days before now (UTC)."""
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=days)


def end_date(end_days: int, now: datetime = None) -> datetime:
    """Return the end of the window: now, or `end_days` days ago when positive."""
    now = now or datetime.now(timezone.utc)
    if not end_days:
        return now
    return now - timedelta(days=end_days)


@dataclass
class AnalysisConfig:
    """Settings for one engagement analysis run."""
    org: str
    repo: str
    start: datetime
    end: datetime
    token: str
    n_days: int = DEFAULT_DAYS
    breadth_weight: float = DEFAULT_BREADTH_WEIGHT
    depth_diminishing_factor: float = DEFAULT_DEPTH_DIMINISHING_FACTOR
    debug: bool = False
    staging_dir: Optional[str] = None
    batch_size: int = DEFAULT_BATCH_SIZE
    max_throttle_retries: Optional[int] = None
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def api_url(self) -> str:
        return f"{GITHUB_API_URL}/repos/{self.org}/{self.repo}"

    @property
    def web_url(self) -> str:
        return f"https://github.com/{self.org}/{self.repo}"

    @property
    def window(self) -> AnalysisWindow:
        return AnalysisWindow(self.start, self.end)

    @classmethod
    def from_days(cls, org: str, repo: str, token: str, days: int = DEFAULT_DAYS, end_days: int = 0,
                  now: datetime = None, **kwargs) -> 'AnalysisConfig':
        """Build a config for the window [now - days, now - end_days]."""
        now = now or datetime.now(timezone.utc)
        return cls(
            org=org,
            repo=repo,
            start=date_n_days_ago(days, now),
            end=end_date(end_days, now),
            token=token,
            n_days=days - end_days,
            **kwargs
        )


def validate_config(config: AnalysisConfig) -> AnalysisConfig:
    """Check a complete configuration before any network activity.

    Raises:
        ConfigurationError: If any setting is missing or out of range
    """
    if not config.org or not config.repo:
        raise ConfigurationError("Both organization and repository are required")
    config.token = validate_token(config.token)
    config.breadth_weight = validate_weight(config.breadth_weight)
    config.depth_diminishing_factor = validate_depth_diminishing_factor(config.depth_diminishing_factor)
    if config.start >= config.end:
        raise ConfigurationError(
            f"Start date {config.start.isoformat()} must be before end date {config.end.isoformat()}")
    if config.batch_size < 1:
        raise ConfigurationError(f"Batch size must be at least 1, got {config.batch_size}")
    if config.max_throttle_retries is not None and config.max_throttle_retries < 0:
        raise ConfigurationError(f"Max throttle retries must not be negative, got {config.max_throttle_retries}")
    return config
