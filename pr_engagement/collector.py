"""Collection of pull request activity from the GitHub API."""

import logging
from typing import Callable, Dict, List
from concurrent.futures import ThreadPoolExecutor

import requests

from .api_client import GitHubAPIClient, PER_PAGE
from .errors import CollectionError, EngagementError
from .models import AnalysisWindow, parse_timestamp
from . import staging as docs
from .staging import StagingArea

DEFAULT_BATCH_SIZE = 5


class Collector:
    """Fetches every resource needed for one analysis window and stages it."""

    def __init__(self, api_client: GitHubAPIClient, staging: StagingArea = None,
                 batch_size: int = DEFAULT_BATCH_SIZE):
        """Initialize the collector.

        Args:
            api_client: Client bound to the repository under analysis
            staging: Where fetched documents are written (in memory by default)
            batch_size: Number of pull requests whose activity is fetched concurrently
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.api_client = api_client
        self.staging = staging if staging is not None else StagingArea()
        self.batch_size = batch_size

    def collect(self, window: AnalysisWindow) -> StagingArea:
        """Fetch and stage all GitHub data for the window.

        Args:
            window: Time range under analysis

        Returns:
            The staging area holding the pulls, merged_pulls, reviews_<n>,
            pr_comments_<n> and comments documents

        Raises:
            CollectionError: If any resource could not be fetched
        """
        logging.info(f"Collecting GitHub data between {window.start.isoformat()} and {window.end.isoformat()}")
        # Every staged document must come from this run
        self.staging.clear()

        pulls = self.fetch_pull_requests(window)
        if not pulls:
            print(f"No PRs found within date range: {window.start.isoformat()} to {window.end.isoformat()}")
        self.staging.write(docs.PULLS, pulls)

        merged = [pr for pr in pulls if window.contains(pr.get('merged_at'))]
        self.staging.write(docs.MERGED_PULLS, merged)
        logging.info(f"Found {len(pulls)} PRs updated in window, {len(merged)} merged")

        self._fetch_pr_activity_in_batches(pulls, window)

        comments = self._fetch('issue comments', '/issues/comments', {
            'sort': 'created',
            'direction': 'desc',
            'since': window.since,
            'per_page': PER_PAGE
        })
        self.staging.write(docs.ISSUE_COMMENTS, comments)
        logging.info(f"Fetched {len(comments)} issue comments")

        return self.staging

    def fetch_pull_requests(self, window: AnalysisWindow) -> List[Dict]:
        """Fetch pull requests updated within the window.

        Pull requests are requested newest-update first so pagination can stop
        as soon as a page ends before the window starts.
        """

        def page_reaches_window(page_data: List[Dict]) -> bool:
            if not page_data:
                return False
            oldest = page_data[-1]
            return parse_timestamp(oldest['updated_at']) >= window.start

        all_pulls = self._fetch('pull requests', '/pulls', {
            'state': 'all',
            'sort': 'updated',
            'direction': 'desc',
            'per_page': PER_PAGE
        }, should_continue=page_reaches_window)

        pulls = [pr for pr in all_pulls if window.contains(pr.get('updated_at'))]
        logging.debug(f"Kept {len(pulls)} of {len(all_pulls)} fetched PRs inside the window")
        return pulls

    def fetch_reviews(self, pr_number: int) -> List[Dict]:
        reviews = self._fetch(f"reviews for PR #{pr_number}", f"/pulls/{pr_number}/reviews",
                              {'per_page': PER_PAGE})
        self.staging.write(docs.reviews_document(pr_number), reviews)
        return reviews

    def fetch_review_comments(self, pr_number: int, window: AnalysisWindow) -> List[Dict]:
        comments = self._fetch(f"review comments for PR #{pr_number}", f"/pulls/{pr_number}/comments",
                               {'per_page': PER_PAGE, 'since': window.since})
        self.staging.write(docs.review_comments_document(pr_number), comments)
        return comments

    def _fetch_pr_activity_in_batches(self, pulls: List[Dict], window: AnalysisWindow):
        """Fetch reviews and review comments for each PR, one batch at a time.

        Every fetch of a batch completes before the next batch starts.
        """
        pr_numbers = [pr['number'] for pr in pulls]
        if not pr_numbers:
            return

        print(f"Fetching reviews and comments for {len(pr_numbers)} PRs...")
        for start in range(0, len(pr_numbers), self.batch_size):
            batch = pr_numbers[start:start + self.batch_size]
            errors = []

            with ThreadPoolExecutor(max_workers=len(batch) * 2) as executor:
                futures = []
                for pr_number in batch:
                    futures.append(executor.submit(self.fetch_reviews, pr_number))
                    futures.append(executor.submit(self.fetch_review_comments, pr_number, window))

                for future in futures:
                    try:
                        future.result()
                    except EngagementError as e:
                        errors.append(e)

            if errors:
                for error in errors[1:]:
                    logging.error(f"Additional failure in batch: {error}")
                raise errors[0]

            done = min(start + self.batch_size, len(pr_numbers))
            print(f"  Progress: {done}/{len(pr_numbers)} PRs fetched", flush=True)

    def _fetch(self, resource: str, endpoint: str, params: Dict,
               should_continue: Callable[[List[Dict]], bool] = None) -> List[Dict]:
        """Fetch a paginated resource, wrapping any failure in a CollectionError."""
        try:
            return self.api_client.get_paginated(endpoint, params, should_continue=should_continue)
        except (EngagementError, requests.RequestException) as e:
            logging.error(f"Error fetching {resource}: {e}")
            raise CollectionError(resource, e) from e
