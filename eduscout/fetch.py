"""
Fetch module for the EduScout pipeline.

This module handles fetching the project listing page with proper error
handling, retries, and exponential backoff, and turns the page into
unanalyzed Project records.
"""

from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from eduscout.models import Project
from eduscout.parse import parse_projects
from eduscout.utils import get_logger


# Module logger
logger = get_logger("fetch")

# Default configuration
DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 1.0  # exponential backoff multiplier
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Listing page with the EU project cards
DEFAULT_LISTING_URL = "https://ied.eu/eu-programmes/ied-projects/"


@dataclass
class FetchResult:
    """
    Represents the result of fetching a single URL.

    Attributes:
        source_url: The original URL that was fetched.
        html_content: Raw HTML content if successful, None otherwise.
        success: Whether the fetch was successful.
        error_message: Error description if fetch failed, None otherwise.
        status_code: HTTP status code if request was made, None otherwise.
    """
    source_url: str
    html_content: Optional[str]
    success: bool
    error_message: Optional[str] = None
    status_code: Optional[int] = None


def create_session(
    max_retries: int = DEFAULT_MAX_RETRIES,
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
) -> requests.Session:
    """
    Create a requests session with retry configuration.

    Configures automatic retries with exponential backoff for
    transient failures (5xx errors, connection errors).

    Args:
        max_retries: Maximum number of retry attempts. 0 disables retries.
        backoff_factor: Multiplier for exponential backoff between retries.
                       Sleep time = backoff_factor * (2 ** retry_number)

    Returns:
        Configured requests.Session instance.
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET", "HEAD"],
        raise_on_status=False
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        "User-Agent": DEFAULT_USER_AGENT,
        "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
    })

    return session


def validate_url(url: str) -> bool:
    """
    Validate that a URL is well-formed and uses HTTP/HTTPS.

    Args:
        url: URL string to validate.

    Returns:
        True if URL is valid, False otherwise.
    """
    try:
        parsed = urlparse(url)
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)
    except ValueError:
        return False


def describe_request_error(error: requests.exceptions.RequestException) -> str:
    """Short description of a transport failure for logs and FetchResult."""
    # ConnectTimeout is both a Timeout and a ConnectionError
    if isinstance(error, requests.exceptions.Timeout):
        return "Request timeout"
    if isinstance(error, requests.exceptions.ConnectionError):
        return f"Connection error: {error}"
    return f"Request failed: {error}"


def fetch_page(
    url: str,
    session: requests.Session,
    timeout: int = DEFAULT_TIMEOUT
) -> FetchResult:
    """
    Fetch a single URL and return the result.

    Never raises for transport problems; they are reported through
    the returned FetchResult.

    Args:
        url: URL to fetch.
        session: Configured requests session.
        timeout: Request timeout in seconds.

    Returns:
        FetchResult describing the outcome.
    """
    if not validate_url(url):
        logger.warning(f"Invalid URL skipped: {url}")
        return FetchResult(
            source_url=url,
            html_content=None,
            success=False,
            error_message=f"Invalid URL: {url}"
        )

    logger.debug(f"Fetching {url}")

    try:
        response = session.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        message = describe_request_error(e)
        logger.warning(f"{message} for {url}")
        return FetchResult(source_url=url, html_content=None, success=False, error_message=message)

    if response.status_code != 200:
        logger.warning(f"HTTP {response.status_code} for {url}")
        return FetchResult(
            source_url=url,
            html_content=None,
            success=False,
            error_message=f"HTTP {response.status_code}",
            status_code=response.status_code
        )

    logger.info(f"Successfully fetched {url} ({len(response.text)} bytes)")
    return FetchResult(
        source_url=url,
        html_content=response.text,
        success=True,
        status_code=response.status_code
    )


def fetch_listing(
    url: str = DEFAULT_LISTING_URL,
    session: Optional[requests.Session] = None,
    timeout: int = DEFAULT_TIMEOUT
) -> List[Project]:
    """
    Fetch the listing page and extract its projects.

    Failures are absorbed: a transport error, an HTTP error status or
    unparseable markup all yield an empty list, with the cause logged.

    Args:
        url: Listing page URL. Uses DEFAULT_LISTING_URL if not given.
        session: Optional session to reuse. A retrying session is created
                 (and closed afterwards) when omitted.
        timeout: Request timeout in seconds.

    Returns:
        Unanalyzed projects in document order, each with a fresh id.
    """
    logger.info(f"Fetching project listing from {url}")

    owns_session = session is None
    if session is None:
        session = create_session()

    try:
        result = fetch_page(url, session, timeout)
    finally:
        if owns_session:
            session.close()

    if not result.success or not result.html_content:
        logger.error(f"Could not fetch project listing: {result.error_message or 'empty response'}")
        return []

    projects = parse_projects(result.html_content, url)
    logger.info(f"Loaded {len(projects)} project(s) from listing")

    return projects
