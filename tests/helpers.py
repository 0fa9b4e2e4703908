"""Builders for mocked GitHub API data."""

import json
from unittest.mock import Mock


def make_response(data=None, status_code=200, headers=None, next_url=None, text=None):
    """Build a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.headers = dict(headers or {})
    if next_url:
        response.headers['Link'] = f'<{next_url}>; rel="next", <{next_url}&last=1>; rel="last"'
    response.json = Mock(return_value=data)
    response.text = text if text is not None else json.dumps(data)
    return response


def make_user(login, user_type='User'):
    return {'login': login, 'type': user_type}


def make_pr(number, login, updated_at, merged_at=None, user_type='User'):
    return {
        'number': number,
        'user': make_user(login, user_type),
        'created_at': updated_at,
        'updated_at': updated_at,
        'merged_at': merged_at,
        'draft': False,
        'state': 'closed' if merged_at else 'open'
    }


def make_review(review_id, login, state='COMMENTED', user_type='User'):
    return {
        'id': review_id,
        'user': make_user(login, user_type),
        'state': state,
        'submitted_at': '2026-01-07T12:00:00Z'
    }


def make_comment(comment_id, login, issue_number=None, user_type='User'):
    comment = {
        'id': comment_id,
        'user': make_user(login, user_type),
        'created_at': '2026-01-07T12:00:00Z'
    }
    if issue_number is not None:
        comment['issue_url'] = f'https://api.github.com/repos/test-org/test-repo/issues/{issue_number}'
    return comment
