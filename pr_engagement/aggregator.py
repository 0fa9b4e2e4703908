"""Normalization of staged GitHub documents into an activity log."""

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .models import (
    ActivityEvent, ActivityLog,
    PR_CREATED, PR_MERGED, REVIEW, APPROVAL, REVIEW_COMMENT, ISSUE_COMMENT,
    COMMENT_KINDS, ENGAGEMENT_KINDS,
)
from . import staging as docs
from .staging import StagingArea

BOT_USER_TYPE = 'Bot'


def _author(record: Dict) -> Optional[str]:
    """Return the login of a record's author, or None if it must be skipped.

    Bot accounts and records without a user (deleted accounts) are skipped.
    """
    user = record.get('user')
    if not user or not user.get('login'):
        return None
    if user.get('type') == BOT_USER_TYPE:
        return None
    return user['login']


def pr_number_from_issue_url(issue_url: Optional[str]) -> Optional[int]:
    """Extract the PR number from the trailing segment of an issue URL."""
    if not issue_url:
        return None
    segment = issue_url.rstrip('/').rsplit('/', 1)[-1]
    if not segment.isdigit():
        return None
    return int(segment)


class ActivityAggregator:
    """Folds the five staged streams into one activity log."""

    def __init__(self, staging: StagingArea):
        self.staging = staging
        self.log = ActivityLog()

    def aggregate(self) -> ActivityLog:
        """Process all staged documents.

        The pull request stream is processed first because every later stream
        needs the PR author index.

        Returns:
            The activity log with events, PR creators and the PR author index
        """
        self.log = ActivityLog()
        self.process_pull_requests(self.staging.read(docs.PULLS))
        self.process_merged_pulls(self.staging.read(docs.MERGED_PULLS))

        for pr_number, reviews in self.staging.per_pr(docs.REVIEWS_PREFIX).items():
            self.process_reviews(pr_number, reviews)

        for pr_number, comments in self.staging.per_pr(docs.REVIEW_COMMENTS_PREFIX).items():
            self.process_review_comments(pr_number, comments)

        self.process_issue_comments(self.staging.read(docs.ISSUE_COMMENTS))

        logging.info(f"Aggregated {len(self.log.events)} activity events "
                     f"for {self.log.total_pr_count} PRs")
        return self.log

    def _emit(self, user: str, kind: str, pr_number: int, event_id: int = None, pr_author: str = None):
        self.log.events.append(ActivityEvent(user, kind, pr_number, event_id, pr_author))

    def process_pull_requests(self, pulls: List[Dict]):
        for pr in pulls:
            user = _author(pr)
            if user is None:
                logging.debug(f"Skipping PR #{pr.get('number')} by bot or unknown user")
                continue

            pr_number = pr['number']
            self._emit(user, PR_CREATED, pr_number, pr_author=user)
            self.log.pr_creators.append((user, pr_number))
            self.log.pr_authors[pr_number] = user

    def process_merged_pulls(self, merged_pulls: List[Dict]):
        for pr in merged_pulls:
            user = _author(pr)
            if user is None:
                continue
            self._emit(user, PR_MERGED, pr['number'], pr_author=user)

    def process_reviews(self, pr_number: int, reviews: List[Dict]):
        pr_author = self.log.pr_authors.get(pr_number)
        for review in reviews:
            user = _author(review)
            if user is None:
                continue
            kind = APPROVAL if review.get('state') == 'APPROVED' else REVIEW
            self._emit(user, kind, pr_number, review.get('id'), pr_author)

    def process_review_comments(self, pr_number: int, comments: List[Dict]):
        pr_author = self.log.pr_authors.get(pr_number)
        for comment in comments:
            user = _author(comment)
            if user is None:
                continue
            self._emit(user, REVIEW_COMMENT, pr_number, comment.get('id'), pr_author)

    def process_issue_comments(self, comments: List[Dict]):
        for comment in comments:
            user = _author(comment)
            if user is None:
                continue

            pr_number = pr_number_from_issue_url(comment.get('issue_url'))
            if pr_number is None:
                logging.debug(f"Dropping comment {comment.get('id')} without a usable issue_url")
                continue

            self._emit(user, ISSUE_COMMENT, pr_number, comment.get('id'),
                       self.log.pr_authors.get(pr_number))


def aggregate(staging: StagingArea) -> ActivityLog:
    """Build the activity log for a staging area."""
    return ActivityAggregator(staging).aggregate()


def engagement_events(log_or_events) -> Iterator[ActivityEvent]:
    """Yield the events that count towards engagement.

    This is the only place exclusion rules are applied:
      - comments a user leaves on their own PR are dropped
      - reviews and comments on PRs outside the analysed set are dropped

    Args:
        log_or_events: An ActivityLog or an iterable of ActivityEvent
    """
    events: Iterable[ActivityEvent] = getattr(log_or_events, 'events', log_or_events)
    for event in events:
        if event.kind in COMMENT_KINDS and event.user == event.pr_author:
            continue
        if event.kind in ENGAGEMENT_KINDS and event.pr_author is None:
            continue
        yield event
