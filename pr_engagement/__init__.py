"""PR Engagement Metrics - measures how broadly and deeply contributors engage with each other's pull requests."""

from .models import ActivityEvent, ActivityLog, AnalysisWindow, ScoreRow, UserEngagement
from .rate_limit import RateBudget
from .api_client import GitHubAPIClient, APIResponse, extract_next_page_url
from .staging import StagingArea
from .collector import Collector
from .aggregator import ActivityAggregator, aggregate, engagement_events
from .scoring import compute_score, score_users
from .config import AnalysisConfig, validate_config
from .engagement_analyzer import EngagementAnalyzer, AnalysisResult
from .output import OutputFormatter

__all__ = [
    'ActivityEvent',
    'ActivityLog',
    'AnalysisWindow',
    'ScoreRow',
    'UserEngagement',
    'RateBudget',
    'GitHubAPIClient',
    'APIResponse',
    'extract_next_page_url',
    'StagingArea',
    'Collector',
    'ActivityAggregator',
    'aggregate',
    'engagement_events',
    'compute_score',
    'score_users',
    'AnalysisConfig',
    'validate_config',
    'EngagementAnalyzer',
    'AnalysisResult',
    'OutputFormatter',
]
