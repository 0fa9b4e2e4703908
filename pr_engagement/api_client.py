"""GitHub API client for making requests and handling pagination."""

import time
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import GitHubAPIError, RateLimitError, ResponseParseError
from .rate_limit import RateBudget

GITHUB_API_URL = 'https://api.github.com'

PER_PAGE = 100
PAGE_DELAY_SECONDS = 0.05
THROTTLE_RETRY_DELAY_SECONDS = 5.0
BACKOFF_FACTOR = 1.0
DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass
class APIResponse:
    """Structured result of a single GitHub API request."""
    status_code: int
    headers: Mapping[str, str]
    data: Any
    next_url: Optional[str] = None


def extract_next_page_url(link_header: Optional[str]) -> Optional[str]:
    """Extract the rel="next" URL from a GitHub Link header.

    Args:
        link_header: Header value such as '<https://...&page=2>; rel="next", <...>; rel="last"'

    Returns:
        The next page URL without angle brackets, or None if there is no next page
    """
    if not link_header:
        return None

    for link in link_header.split(','):
        parts = link.split(';')
        if len(parts) < 2:
            continue
        url = parts[0].strip()
        if any(part.strip() == 'rel="next"' for part in parts[1:]):
            return url.strip('<>')

    return None


class GitHubAPIClient:
    """Handles GitHub API requests with rate-limit awareness and pagination."""

    def __init__(self, token: str, base_url: str = GITHUB_API_URL, rate_budget: RateBudget = None,
                 pool_size: int = 10, timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 page_delay: float = PAGE_DELAY_SECONDS,
                 throttle_delay: float = THROTTLE_RETRY_DELAY_SECONDS,
                 max_throttle_retries: Optional[int] = None):
        """Initialize the GitHub API client.

        Args:
            token: GitHub token sent as a bearer credential
            base_url: Base URL that relative endpoints are resolved against
            rate_budget: Rate-limit budget shared by all requests of the run
            pool_size: Connection pool size, at least the number of concurrent fetches
            timeout: Per-request timeout in seconds
            page_delay: Pause between successive pages of one resource
            throttle_delay: Pause before retrying a throttled (429) page
            max_throttle_retries: Retry ceiling for throttled pages, backed off exponentially
                                  by the transport adapter; None retries indefinitely
        """
        self.token = token
        self.base_url = base_url.rstrip('/')
        self.rate_budget = rate_budget or RateBudget()
        self.timeout = timeout
        self.page_delay = page_delay
        self.throttle_delay = throttle_delay
        self.max_throttle_retries = max_throttle_retries
        self.session = requests.Session()

        adapter = HTTPAdapter(
            pool_connections=pool_size,
            pool_maxsize=pool_size,
            max_retries=self._build_retry(max_throttle_retries)
        )
        self.session.mount('https://', adapter)
        self.session.mount('http://', adapter)

        self.session.headers.update({
            'Authorization': f'Bearer {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'pr-engagement-metrics'
        })
        logging.info(f"Initialized GitHub API client for {self.base_url}")

    @staticmethod
    def _build_retry(max_throttle_retries: Optional[int]) -> Retry:
        """Build the adapter retry policy.

        Without a ceiling the adapter never retries and get_paginated keeps retrying
        throttled pages itself. With one, the adapter retries 429 responses with
        exponential backoff and hands the last 429 back so request() raises
        RateLimitError. Other failures are never retried.
        """
        if max_throttle_retries is None:
            return Retry(total=0, raise_on_status=False, respect_retry_after_header=False)
        return Retry(
            total=max_throttle_retries,
            connect=0,
            read=0,
            backoff_factor=BACKOFF_FACTOR,
            status_forcelist=[429],
            allowed_methods=['GET'],
            raise_on_status=False
        )

    def _resolve_url(self, endpoint: str) -> str:
        if endpoint.startswith('http'):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def request(self, endpoint: str, params: Dict = None) -> APIResponse:
        """Make a single GET request to the GitHub API.

        Args:
            endpoint: Absolute URL or path relative to the base URL
            params: Query parameters

        Returns:
            APIResponse with the decoded JSON body and the next page URL

        Raises:
            RateLimitError: On a 429 response
            GitHubAPIError: On any other non-success status
            ResponseParseError: If the body is not valid JSON
            requests.RequestException: On transport failures
        """
        url = self._resolve_url(endpoint)
        response = self.session.get(url, params=params or None, timeout=self.timeout)
        self.rate_budget.update_from_headers(response.headers)

        if response.status_code == 429:
            raise RateLimitError(429, response.text, url)

        if not 200 <= response.status_code < 300:
            raise GitHubAPIError(response.status_code, response.text, url)

        try:
            data = response.json()
        except ValueError as e:
            raise ResponseParseError(str(e), url) from e

        return APIResponse(
            status_code=response.status_code,
            headers=response.headers,
            data=data,
            next_url=extract_next_page_url(response.headers.get('Link'))
        )

    def _guarded_request(self, endpoint: str, params: Dict) -> APIResponse:
        self.rate_budget.wait_if_needed()
        return self.request(endpoint, params)

    def _fetch_page(self, endpoint: str, params: Dict) -> APIResponse:
        """Fetch one page, retrying the same page while the API throttles us."""
        if self.max_throttle_retries is not None:
            # Bounded retries already happened inside the adapter
            return self._guarded_request(endpoint, params)

        while True:
            try:
                return self._guarded_request(endpoint, params)
            except RateLimitError:
                logging.warning(f"Rate limited on {endpoint}, retrying in {self.throttle_delay:.0f}s")
                time.sleep(self.throttle_delay)

    def get_paginated(self, endpoint: str, params: Dict = None,
                      should_continue: Optional[Callable[[List[Dict]], bool]] = None) -> List[Dict]:
        """Fetch all pages of a paginated GitHub API endpoint.

        Args:
            endpoint: Absolute URL or path relative to the base URL
            params: Query parameters for the first page
            should_continue: Optional callback that takes a page of results and returns
                           False to stop pagination early, True to continue

        Returns:
            List of all items from all pages
        """
        results = []
        page = 1
        current_endpoint = endpoint
        current_params = dict(params or {})

        while True:
            logging.debug(f"Fetching page {page} from {current_endpoint}")
            response = self._fetch_page(current_endpoint, current_params)

            if not isinstance(response.data, list):
                raise ResponseParseError(f"expected a list, got {type(response.data).__name__}",
                                         current_endpoint)

            results.extend(response.data)

            # Check early termination callback
            if should_continue and not should_continue(response.data):
                logging.debug(f"Early termination triggered at page {page}")
                break

            if not response.next_url:
                break

            # The next link already carries the query parameters
            current_endpoint = response.next_url
            current_params = {}
            page += 1
            time.sleep(self.page_delay)

        logging.debug(f"Fetched {len(results)} total items from {endpoint}")
        return results
