"""
Utility functions for the EduScout pipeline.

This module provides:
- Central logging configuration
- Environment variable helpers
- Shared text and URL helpers used across modules
"""

import logging
import os
import re
import sys
from typing import Optional
from urllib.parse import urljoin, urlparse


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure and return the root logger for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to INFO.

    Returns:
        Configured logger instance.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    logger = logging.getLogger("eduscout")
    logger.setLevel(log_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Name for the logger, typically the module name.

    Returns:
        Logger instance configured as a child of the main application logger.
    """
    return logging.getLogger(f"eduscout.{name}")


def get_env_var(name: str, required: bool = True, default: Optional[str] = None) -> Optional[str]:
    """
    Get an environment variable with optional requirement enforcement.

    Args:
        name: Name of the environment variable.
        required: If True, raises ValueError when variable is not set.
                  Defaults to True.
        default: Default value if variable is not set and not required.

    Returns:
        Value of the environment variable or default.

    Raises:
        ValueError: If required=True and the variable is not set.
    """
    value = os.environ.get(name)

    if value is None or value.strip() == "":
        if required:
            raise ValueError(f"Required environment variable '{name}' is not set")
        return default

    return value.strip()


def get_env_int(name: str, default: int) -> int:
    """
    Read a non-negative integer from the environment.

    Falls back to ``default`` (with a warning) when the value is missing
    or not a non-negative integer.
    """
    raw = get_env_var(name, required=False)
    if raw is None:
        return default

    try:
        value = int(raw)
    except ValueError:
        get_logger("utils").warning(f"Invalid integer for {name}: {raw!r}, using {default}")
        return default

    if value < 0:
        get_logger("utils").warning(f"Negative value for {name}: {value}, using {default}")
        return default

    return value


def normalize_url(url: str, base_url: str) -> str:
    """
    Normalize a potentially relative URL to an absolute URL.

    Args:
        url: The URL to normalize (may be relative or absolute).
        base_url: The base URL to use for resolving relative URLs.

    Returns:
        Absolute URL string.
    """
    parsed = urlparse(url)
    if parsed.scheme and parsed.netloc:
        return url

    return urljoin(base_url, url)


def sanitize_text(text: Optional[str]) -> str:
    """
    Clean and normalize text content.

    Removes extra whitespace, newlines, and normalizes spacing.

    Args:
        text: Raw text to sanitize.

    Returns:
        Cleaned text string.
    """
    if not text:
        return ""

    cleaned = re.sub(r"\s+", " ", text)
    return cleaned.strip()


def truncate(text: str, limit: int = 80) -> str:
    """Shorten text for log lines, appending '..' when cut."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + ".."
