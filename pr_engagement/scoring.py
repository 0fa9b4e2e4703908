"""Engagement scoring: depth, breadth and the combined score."""

from collections import Counter
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from .aggregator import engagement_events
from .models import ActivityLog, ScoreRow, UserEngagement, PR_CREATED, APPROVAL, COMMENT_KINDS


def round_half_up(value: float, places: int = 2) -> float:
    """Round to the given number of decimals, with halves rounded away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_score(depth: float, breadth: float, breadth_weight: float,
                  depth_diminishing_factor: float) -> float:
    """Combine depth and breadth into one score.

    Depth goes through an exponential diminishing-returns transform, so that
    repeated engagement saturates towards 1, before being averaged with the
    weighted breadth.

    Args:
        depth: Engagement actions per PR created by others
        breadth: Share of others' PRs the user engaged with
        breadth_weight: Weight of breadth relative to depth
        depth_diminishing_factor: Decay factor in (0, 1); smaller saturates faster

    Returns:
        Score rounded to two decimal places
    """
    scaled_depth = 1 - depth_diminishing_factor ** depth
    score = (scaled_depth + breadth * breadth_weight) / (1 + breadth_weight)
    return round_half_up(score, 2)


def build_user_engagement(log: ActivityLog) -> Dict[str, UserEngagement]:
    """Fold the engagement events of a log into per-user counters.

    Users appear in order of their first event.
    """
    prs_created = Counter(event.user for event in log.events if event.kind == PR_CREATED)
    users: Dict[str, UserEngagement] = {}

    for event in engagement_events(log):
        if event.user not in users:
            users[event.user] = UserEngagement(pr_created_count=prs_created[event.user])
        engagement = users[event.user]

        if event.kind in COMMENT_KINDS:
            engagement.comment_count += 1
        elif event.kind == APPROVAL:
            engagement.approval_count += 1
        else:
            continue

        if event.user != event.pr_author:
            engagement.unique_prs.add(event.pr_number)

    return users


def score_users(log: ActivityLog, breadth_weight: float, depth_diminishing_factor: float,
                total_pr_count: Optional[int] = None) -> List[ScoreRow]:
    """Score every user in the log.

    Args:
        log: Activity log for the run
        breadth_weight: Weight of breadth relative to depth
        depth_diminishing_factor: Decay factor in (0, 1)
        total_pr_count: Number of PRs in the window; defaults to the PRs in the log

    Returns:
        Score rows sorted by combined score, highest first
    """
    if total_pr_count is None:
        total_pr_count = log.total_pr_count

    rows = []
    for user, engagement in build_user_engagement(log).items():
        others_prs = total_pr_count - engagement.pr_created_count
        unique_pr_count = len(engagement.unique_prs)

        depth = 0.0
        breadth = 0.0
        if others_prs > 0:
            depth = engagement.engagement_sum / others_prs
            breadth = unique_pr_count / others_prs

        rows.append(ScoreRow(
            user=user,
            depth=depth,
            breadth=breadth,
            combined_score=compute_score(depth, breadth, breadth_weight, depth_diminishing_factor),
            comments=engagement.comment_count,
            approvals=engagement.approval_count,
            engagement_sum=engagement.engagement_sum,
            unique_pr_count=unique_pr_count,
            others_prs=others_prs
        ))

    # sorted() is stable, so tied users keep their encounter order
    return sorted(rows, key=lambda row: row.combined_score, reverse=True)
