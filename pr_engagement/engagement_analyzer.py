"""Main pull request engagement analyzer."""

import os
import shutil
import logging
import tempfile
from dataclasses import dataclass
from typing import List

from .aggregator import aggregate
from .api_client import GitHubAPIClient
from .collector import Collector
from .config import AnalysisConfig
from .models import ActivityLog, ScoreRow
from .rate_limit import RateBudget
from .scoring import score_users
from .staging import StagingArea


@dataclass
class AnalysisResult:
    """Everything the reporting layer needs from one run."""
    log: ActivityLog
    rows: List[ScoreRow]

    @property
    def pr_authors(self):
        return self.log.pr_authors


class EngagementAnalyzer:
    """Runs collection, aggregation and scoring for one repository and window."""

    def __init__(self, config: AnalysisConfig, rate_budget: RateBudget = None):
        """Initialize the analyzer.

        Args:
            config: Validated analysis configuration
            rate_budget: Budget to share with other analyzers; a fresh one by default
        """
        self.config = config
        self.rate_budget = rate_budget or RateBudget()
        # Two fetches (reviews + review comments) run per PR in a batch
        self.api_client = GitHubAPIClient(
            config.token,
            base_url=config.api_url,
            rate_budget=self.rate_budget,
            pool_size=config.batch_size * 2,
            timeout=config.request_timeout,
            max_throttle_retries=config.max_throttle_retries
        )
        logging.info(f"Initialized analyzer for '{config.org}/{config.repo}'")

    def _make_collector(self, staging: StagingArea) -> Collector:
        return Collector(
            self.api_client,
            staging,
            batch_size=self.config.batch_size
        )

    def collect_and_aggregate(self, staging: StagingArea) -> ActivityLog:
        self._make_collector(staging).collect(self.config.window)
        return aggregate(staging)

    def run(self) -> AnalysisResult:
        """Fetch, aggregate and score the configured repository.

        Staged documents are written to config.staging_dir when set, otherwise
        to a temporary directory that is removed afterwards.

        Raises:
            CollectionError: If fetching failed; no partial result is returned
        """
        if self.config.staging_dir:
            os.makedirs(self.config.staging_dir, exist_ok=True)
            log = self.collect_and_aggregate(StagingArea(self.config.staging_dir))
        else:
            temp_dir = tempfile.mkdtemp(prefix='github-engagement-')
            try:
                log = self.collect_and_aggregate(StagingArea(temp_dir))
            finally:
                shutil.rmtree(temp_dir, ignore_errors=True)

        rows = score_users(log, self.config.breadth_weight, self.config.depth_diminishing_factor)
        logging.info(f"Scored {len(rows)} users over {log.total_pr_count} PRs")
        return AnalysisResult(log, rows)
