"""Data models for pull request engagement analysis."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple


# Activity event kinds
PR_CREATED = 'pr_created'
PR_MERGED = 'pr_merged'
REVIEW = 'review'
APPROVAL = 'approval'
REVIEW_COMMENT = 'review_comment'
ISSUE_COMMENT = 'issue_comment'

COMMENT_KINDS = frozenset({REVIEW_COMMENT, ISSUE_COMMENT})
ENGAGEMENT_KINDS = frozenset({REVIEW, APPROVAL, REVIEW_COMMENT, ISSUE_COMMENT})

GITHUB_TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO 8601 timestamp into an aware UTC datetime."""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format a datetime the way GitHub expects in query parameters."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(GITHUB_TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class AnalysisWindow:
    """Inclusive time range under analysis."""
    start: datetime
    end: datetime

    def contains(self, timestamp: Optional[str]) -> bool:
        """Check whether a GitHub timestamp string falls inside the window."""
        if not timestamp:
            return False
        moment = parse_timestamp(timestamp)
        return self.start <= moment <= self.end

    @property
    def since(self) -> str:
        return format_timestamp(self.start)


@dataclass(frozen=True)
class ActivityEvent:
    """One normalized unit of activity on a pull request."""
    user: str
    kind: str
    pr_number: int
    event_id: Optional[int] = None
    pr_author: Optional[str] = None


@dataclass
class ActivityLog:
    """Canonical activity log for one analysis run."""
    events: List[ActivityEvent] = field(default_factory=list)
    pr_creators: List[Tuple[str, int]] = field(default_factory=list)
    pr_authors: Dict[int, str] = field(default_factory=dict)

    @property
    def total_pr_count(self) -> int:
        """Number of distinct pull requests created within the window."""
        return len({pr_number for _, pr_number in self.pr_creators})


@dataclass
class UserEngagement:
    """Engagement counters for a single user."""
    pr_created_count: int = 0
    comment_count: int = 0
    approval_count: int = 0
    unique_prs: Set[int] = field(default_factory=set)

    @property
    def engagement_sum(self) -> int:
        return self.comment_count + self.approval_count


@dataclass
class ScoreRow:
    """Ranked engagement score for one user."""
    user: str
    depth: float
    breadth: float
    combined_score: float
    comments: int = 0
    approvals: int = 0
    engagement_sum: int = 0
    unique_pr_count: int = 0
    others_prs: int = 0
