"""
Parse module for the EduScout pipeline.

This module handles parsing HTML content from the project listing page
and extracting project information (name, description, URL).
"""

from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from eduscout.models import Project, new_project
from eduscout.utils import get_logger, normalize_url, sanitize_text


# Module logger
logger = get_logger("parse")


# Markup convention of the listing page: one container per project
PROJECT_SELECTOR = ".project-item"
TITLE_SELECTOR = ".project-title"
DESCRIPTION_SELECTOR = ".project-description"


def extract_text(element: Tag, selector: str) -> str:
    """
    Extract cleaned text from the first descendant matching a selector.

    Args:
        element: Container element to search in.
        selector: CSS selector of the descendant.

    Returns:
        Whitespace-normalized text, or an empty string if nothing matches.
    """
    found = element.select_one(selector)
    if found is None:
        return ""
    return sanitize_text(found.get_text())


def extract_link(element: Tag, base_url: str) -> str:
    """
    Extract the href of the first anchor in a container.

    Args:
        element: Container element to search in.
        base_url: Base URL for resolving relative URLs.

    Returns:
        Absolute URL string, or an empty string if there is no anchor.
    """
    link = element.find("a", href=True)
    if link is None:
        return ""

    href = str(link["href"]).strip()
    if not href:
        return ""

    try:
        return normalize_url(href, base_url)
    except ValueError as e:
        logger.debug(f"Keeping unresolvable href {href!r}: {e}")
        return href


def parse_project_element(element: Tag, base_url: str) -> Project:
    """Build an unanalyzed Project from one listing container."""
    return new_project(
        name=extract_text(element, TITLE_SELECTOR),
        description=extract_text(element, DESCRIPTION_SELECTOR),
        url=extract_link(element, base_url),
    )


def parse_projects(html: Optional[str], source_url: str) -> List[Project]:
    """
    Parse HTML content to extract project records.

    Every container matching PROJECT_SELECTOR becomes one Project, in
    document order. Missing titles, descriptions or links are stored as
    empty strings. No de-duplication is performed.

    Args:
        html: Raw HTML content string.
        source_url: Source URL for resolving relative URLs.

    Returns:
        List of unanalyzed Project records.
    """
    if not html:
        logger.warning(f"Empty HTML content for {source_url}")
        return []

    logger.debug(f"Parsing HTML from {source_url} ({len(html)} bytes)")

    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        logger.error(f"Failed to parse HTML from {source_url}: {e}")
        return []

    projects = [
        parse_project_element(element, source_url)
        for element in soup.select(PROJECT_SELECTOR)
    ]

    if not projects:
        logger.warning(f"No '{PROJECT_SELECTOR}' elements found on {source_url}")

    logger.info(f"Extracted {len(projects)} project(s) from {source_url}")

    return projects
