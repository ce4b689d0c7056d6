"""
Resolve module for the EduScout pipeline.

Looks up a project's official website through the DuckDuckGo Instant
Answer API. This is best-effort enrichment: every failure is logged and
reported as an empty string.
"""

from typing import Optional

import requests

from eduscout.fetch import DEFAULT_TIMEOUT, create_session
from eduscout.utils import get_logger


# Module logger
logger = get_logger("resolve")

SEARCH_API_URL = "https://api.duckduckgo.com/"
QUERY_SUFFIX = "official website EU project"


def build_search_query(name: str) -> str:
    """Combine the project name with the qualifying phrase."""
    return f"{name.strip()} {QUERY_SUFFIX}"


def resolve_website(
    name: str,
    session: Optional[requests.Session] = None,
    timeout: int = DEFAULT_TIMEOUT
) -> str:
    """
    Find the official website of a project.

    Issues a single search request (no retries) and returns the
    ``AbstractURL`` field of the JSON answer.

    Args:
        name: Project name to search for.
        session: Optional session to reuse. A non-retrying session is
                 created (and closed afterwards) when omitted.
        timeout: Request timeout in seconds.

    Returns:
        The website URL, or an empty string if none was found or the
        lookup failed.
    """
    if not name or not name.strip():
        logger.debug("Empty project name, skipping website lookup")
        return ""

    params = {
        "q": build_search_query(name),
        "format": "json",
        "no_html": "1",
    }

    owns_session = session is None
    if session is None:
        session = create_session(max_retries=0)

    try:
        response = session.get(
            SEARCH_API_URL,
            params=params,
            headers={"Accept": "application/json"},
            timeout=timeout
        )
        if response.status_code != 200:
            logger.warning(f"Website lookup for '{name}' returned HTTP {response.status_code}")
            return ""
        data = response.json()

    except requests.exceptions.Timeout:
        logger.warning(f"Timeout looking up website for '{name}'")
        return ""
    except requests.exceptions.RequestException as e:
        logger.warning(f"Website lookup failed for '{name}': {e}")
        return ""
    except ValueError as e:
        logger.warning(f"Invalid JSON from website lookup for '{name}': {e}")
        return ""
    finally:
        if owns_session:
            session.close()

    if not isinstance(data, dict):
        logger.warning(f"Unexpected website lookup payload for '{name}': {type(data).__name__}")
        return ""

    website = data.get("AbstractURL")
    if not isinstance(website, str) or not website.strip():
        logger.info(f"No official website found for '{name}'")
        return ""

    logger.info(f"Resolved website for '{name}': {website.strip()}")
    return website.strip()
