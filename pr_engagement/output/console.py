"""Console output methods for OutputFormatter."""

from collections import Counter
from typing import Dict, List

from ..aggregator import engagement_events
from ..models import ActivityLog, ScoreRow, APPROVAL, COMMENT_KINDS
from .formatter_base import BOLD, CYAN, RED

RULE = '=' * 74


def print_header(self):
    """Print the analysis banner."""
    config = self.config
    print(self._color("\nPR Engagement Metrics", CYAN))
    repository = self._color(f"{config.org}/{config.repo}", BOLD)
    print(f"Analyzing {repository} "
          f"between {config.start.isoformat()} and {config.end.isoformat()}")


def print_summary(self, rows: List[ScoreRow]):
    """Print the ranked engagement table.

    Args:
        rows: Score rows, already sorted by combined score
    """
    print("\n" + RULE)
    print(f"        REPORT FOR LAST {self.config.n_days} DAYS")
    print(RULE)

    if not rows:
        print("\nNo engagement activity found.")
        return

    breadth_header = f"Breadth (w={self.config.breadth_weight:g})"
    print(f"\n{'User':<22} {'Comments':>8} {'Approvals':>9}  {'Depth':<20} {breadth_header:<20} {'Combined':>8}")
    print('-' * 94)

    for row in rows:
        depth = f"{row.depth:.2f} ({row.engagement_sum}/{row.others_prs})"
        breadth = f"{row.breadth:.2f} ({row.unique_pr_count}/{row.others_prs})"
        score = self._color(f"{row.combined_score:>8.2f}", self._score_color(row.combined_score))
        print(f"{self._display_name(row.user):<22} {row.comments:>8} {row.approvals:>9}  "
              f"{depth:<20} {breadth:<20} {score}")


def print_detailed_report(self, log: ActivityLog):
    """Print, per user, the PRs they approved and commented on.

    Args:
        log: Activity log for the run
    """
    print("\n" + RULE)
    print(f"        DETAILED ACTIVITY REPORT FOR LAST {self.config.n_days} DAYS")
    print(RULE)

    approvals: Dict[str, List[int]] = {}
    comment_counts: Dict[str, Counter] = {}
    users: List[str] = []

    for event in engagement_events(log):
        if event.kind == APPROVAL:
            prs = approvals.setdefault(event.user, [])
            if event.pr_number not in prs:
                prs.append(event.pr_number)
        elif event.kind in COMMENT_KINDS:
            comment_counts.setdefault(event.user, Counter())[event.pr_number] += 1
        else:
            continue
        if event.user not in users:
            users.append(event.user)

    for user in users:
        print(f"\n>> User: {self._color(user, BOLD)}")

        if user in approvals:
            print('   === APPROVED PRs ===')
            for pr_number in approvals[user]:
                author = log.pr_authors.get(pr_number, 'unknown')
                print(f"   - PR #{pr_number} (author={author}): {self._pr_url(pr_number)}")

        if user in comment_counts:
            print('   === COMMENTS ===')
            for pr_number, count in comment_counts[user].items():
                author = log.pr_authors.get(pr_number, 'unknown')
                print(f"   - PR #{pr_number} (author={author}): {count} comments - {self._pr_url(pr_number)}")

    print("\n" + RULE)


def print_error(self, message: str):
    print(self._color(f"\nError: {message}", RED))

