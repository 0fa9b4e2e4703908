"""
Unit tests for activity aggregation and the exclusion rules
"""

import pytest

from pr_engagement.aggregator import (
    ActivityAggregator, aggregate, engagement_events, pr_number_from_issue_url
)
from pr_engagement.models import ActivityEvent
from pr_engagement.staging import StagingArea

from helpers import make_pr, make_review, make_comment


def stage(staging, pulls=(), merged=(), reviews=None, review_comments=None, issue_comments=()):
    staging.write('pulls', list(pulls))
    staging.write('merged_pulls', list(merged))
    for pr_number, records in (reviews or {}).items():
        staging.write(f'reviews_{pr_number}', records)
    for pr_number, records in (review_comments or {}).items():
        staging.write(f'pr_comments_{pr_number}', records)
    staging.write('comments', list(issue_comments))
    return staging


class TestAggregate:
    """Test cases for folding staged documents into events."""

    @pytest.fixture
    def staging(self):
        pr1 = make_pr(1, 'alice', '2026-01-06T00:00:00Z', merged_at='2026-01-06T00:00:00Z')
        pr2 = make_pr(2, 'bob', '2026-01-07T00:00:00Z')
        return stage(
            StagingArea(),
            pulls=[pr1, pr2],
            merged=[pr1],
            reviews={1: [make_review(11, 'bob', 'APPROVED'), make_review(12, 'carol', 'CHANGES_REQUESTED')]},
            review_comments={2: [make_comment(21, 'alice')]},
            issue_comments=[make_comment(31, 'carol', issue_number=2)]
        )

    def test_emits_one_event_per_record_in_stream_order(self, staging):
        log = aggregate(staging)

        assert log.events == [
            ActivityEvent('alice', 'pr_created', 1, None, 'alice'),
            ActivityEvent('bob', 'pr_created', 2, None, 'bob'),
            ActivityEvent('alice', 'pr_merged', 1, None, 'alice'),
            ActivityEvent('bob', 'approval', 1, 11, 'alice'),
            ActivityEvent('carol', 'review', 1, 12, 'alice'),
            ActivityEvent('alice', 'review_comment', 2, 21, 'bob'),
            ActivityEvent('carol', 'issue_comment', 2, 31, 'bob'),
        ]

    def test_builds_pr_author_index(self, staging):
        log = aggregate(staging)

        assert log.pr_authors == {1: 'alice', 2: 'bob'}
        assert log.pr_creators == [('alice', 1), ('bob', 2)]
        assert log.total_pr_count == 2

    def test_aggregate_is_repeatable(self, staging):
        aggregator = ActivityAggregator(staging)

        assert aggregator.aggregate().events == aggregator.aggregate().events

    def test_reads_directory_staging(self, tmp_path):
        staging = stage(
            StagingArea(str(tmp_path)),
            pulls=[make_pr(7, 'alice', '2026-01-06T00:00:00Z')],
            reviews={7: [make_review(1, 'bob', 'APPROVED')]}
        )

        log = aggregate(staging)

        assert [event.kind for event in log.events] == ['pr_created', 'approval']


class TestBotExclusion:
    """Bot accounts never produce events."""

    def test_bots_are_skipped_in_every_stream(self):
        bot_pr = make_pr(1, 'dependabot[bot]', '2026-01-06T00:00:00Z',
                         merged_at='2026-01-06T00:00:00Z', user_type='Bot')
        human_pr = make_pr(2, 'alice', '2026-01-06T00:00:00Z')
        staging = stage(
            StagingArea(),
            pulls=[bot_pr, human_pr],
            merged=[bot_pr],
            reviews={2: [make_review(1, 'ci-bot', 'APPROVED', user_type='Bot')]},
            review_comments={2: [make_comment(2, 'lint-bot', user_type='Bot')]},
            issue_comments=[make_comment(3, 'github-actions[bot]', issue_number=2, user_type='Bot')]
        )

        log = aggregate(staging)

        assert log.events == [ActivityEvent('alice', 'pr_created', 2, None, 'alice')]
        assert 1 not in log.pr_authors

    def test_records_without_user_are_dropped(self):
        ghost_comment = make_comment(5, 'ghost', issue_number=1)
        ghost_comment['user'] = None
        staging = stage(
            StagingArea(),
            pulls=[make_pr(1, 'alice', '2026-01-06T00:00:00Z')],
            issue_comments=[ghost_comment]
        )

        assert len(aggregate(staging).events) == 1


class TestIssueComments:
    """Test cases for deriving PR numbers from issue URLs."""

    def test_pr_number_from_issue_url(self):
        assert pr_number_from_issue_url('https://api.github.com/repos/o/r/issues/123') == 123
        assert pr_number_from_issue_url('https://api.github.com/repos/o/r/issues/123/') == 123

    def test_unusable_issue_url(self):
        assert pr_number_from_issue_url(None) is None
        assert pr_number_from_issue_url('') is None
        assert pr_number_from_issue_url('https://api.github.com/repos/o/r/issues/abc') is None

    def test_comment_without_issue_url_is_dropped_not_the_stream(self):
        staging = stage(
            StagingArea(),
            pulls=[make_pr(1, 'alice', '2026-01-06T00:00:00Z')],
            issue_comments=[make_comment(1, 'bob'), make_comment(2, 'bob', issue_number=1)]
        )

        comments = [e for e in aggregate(staging).events if e.kind == 'issue_comment']

        assert comments == [ActivityEvent('bob', 'issue_comment', 1, 2, 'alice')]

    def test_comment_on_unknown_issue_has_no_pr_author(self):
        staging = stage(StagingArea(), issue_comments=[make_comment(1, 'bob', issue_number=99)])

        assert aggregate(staging).events == [ActivityEvent('bob', 'issue_comment', 99, 1, None)]


class TestEngagementEvents:
    """Test cases for the single exclusion step."""

    def test_self_comments_are_excluded(self):
        events = [
            ActivityEvent('alice', 'review_comment', 1, 1, 'alice'),
            ActivityEvent('alice', 'issue_comment', 1, 2, 'alice'),
            ActivityEvent('bob', 'review_comment', 1, 3, 'alice'),
        ]

        assert list(engagement_events(events)) == [events[2]]

    def test_raw_log_keeps_self_comments(self):
        staging = stage(
            StagingArea(),
            pulls=[make_pr(1, 'alice', '2026-01-06T00:00:00Z')],
            review_comments={1: [make_comment(1, 'alice')]}
        )

        log = aggregate(staging)

        assert ActivityEvent('alice', 'review_comment', 1, 1, 'alice') in log.events
        assert all(e.kind != 'review_comment' for e in engagement_events(log))

    def test_engagement_on_unknown_prs_is_excluded(self):
        events = [
            ActivityEvent('bob', 'issue_comment', 99, 1, None),
            ActivityEvent('bob', 'approval', 98, 2, None),
            ActivityEvent('bob', 'pr_created', 5, None, 'bob'),
        ]

        assert list(engagement_events(events)) == [events[2]]

    def test_approvals_and_creation_events_pass_through(self):
        events = [
            ActivityEvent('alice', 'pr_created', 1, None, 'alice'),
            ActivityEvent('alice', 'pr_merged', 1, None, 'alice'),
            ActivityEvent('bob', 'approval', 1, 7, 'alice'),
        ]

        assert list(engagement_events(events)) == events
