#!/usr/bin/env python3
"""
Main orchestration module for the EduScout pipeline.

This module runs the complete workflow from the command line:
fetch listing → resolve website + classify (per project) → report

Configuration comes from environment variables (see get_* helpers).
"""

import os
import sys
from typing import Optional

from eduscout.classify import ConfigurationError, SuitabilityClassifier
from eduscout.fetch import DEFAULT_LISTING_URL
from eduscout.models import Category
from eduscout.pipeline import ALL_CATEGORIES, ProjectPipeline, WorkingSet
from eduscout.report import format_project_report, format_summary
from eduscout.utils import get_env_int, get_env_var, get_logger, setup_logging


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_ENV_ERROR = 2

DEFAULT_ANALYZE_LIMIT = 3


def get_listing_url() -> str:
    """
    Get the listing page URL.

    Returns:
        LISTING_URL from the environment, or the default listing page.
    """
    return get_env_var("LISTING_URL", required=False, default=DEFAULT_LISTING_URL) or DEFAULT_LISTING_URL


def get_analyze_limit() -> int:
    """Number of projects to analyze per run (ANALYZE_LIMIT, 0 disables analysis)."""
    return get_env_int("ANALYZE_LIMIT", DEFAULT_ANALYZE_LIMIT)


def get_category_filter() -> str:
    """
    Get the category shown in the final report.

    Returns:
        "all" or one of the category values. Unknown values fall back
        to "all".
    """
    logger = get_logger("main")

    value = (get_env_var("CATEGORY_FILTER", required=False, default=ALL_CATEGORIES) or ALL_CATEGORIES).lower()
    valid = {ALL_CATEGORIES} | {c.value for c in Category}

    if value not in valid:
        logger.warning(f"Unknown CATEGORY_FILTER {value!r}, showing all projects")
        return ALL_CATEGORIES

    return value


def run_pipeline(
    pipeline: Optional[ProjectPipeline] = None,
    analyze_limit: Optional[int] = None,
    category_filter: Optional[str] = None
) -> int:
    """
    Execute the complete EduScout pipeline.

    Pipeline stages:
    1. Fetch the project listing
    2. Check the classifier credential
    3. Analyze up to ``analyze_limit`` projects
    4. Report

    Args:
        pipeline: Pipeline to run. Built from the environment if None.
        analyze_limit: Number of projects to analyze. Read from the
                       environment if None.
        category_filter: Category to report. Read from the environment
                         if None.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    logger = get_logger("main")

    if pipeline is None:
        pipeline = ProjectPipeline(SuitabilityClassifier.from_env(), listing_url=get_listing_url())
    if analyze_limit is None:
        analyze_limit = get_analyze_limit()
    if category_filter is None:
        category_filter = get_category_filter()

    logger.info("=" * 60)
    logger.info("EduScout Pipeline - Starting")
    logger.info("=" * 60)

    # Stage 1: Discover projects
    logger.info("[Stage 1/4] Fetching project listing...")
    working_set = WorkingSet(pipeline.load_all())

    if not len(working_set):
        logger.info("No projects found")
        return EXIT_SUCCESS

    # Stage 2: Credential check
    logger.info("[Stage 2/4] Checking classifier configuration...")
    try:
        pipeline.classifier.ensure_configured()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        logger.info(format_summary(working_set.projects))
        return EXIT_ENV_ERROR

    # Stage 3: Analyze
    targets = working_set.unanalyzed()[:analyze_limit]
    logger.info(f"[Stage 3/4] Analyzing {len(targets)} of {len(working_set)} project(s)...")

    for i, project in enumerate(targets, 1):
        if not working_set.mark_in_progress(project.id):
            logger.warning(f"Project {project.id} is already being analyzed, skipping")
            continue

        logger.info(f"[{i}/{len(targets)}] {project.name or project.id}")
        try:
            working_set.update(pipeline.analyze_one(project))
        finally:
            working_set.mark_done(project.id)

    # Stage 4: Report
    logger.info("[Stage 4/4] Reporting...")
    shown = [p for p in working_set.filter_by_category(category_filter) if p.is_analyzed]

    for project in shown:
        logger.info("\n" + format_project_report(project))

    logger.info("=" * 60)
    logger.info("EduScout Pipeline - Complete")
    logger.info("\n" + format_summary(working_set.projects))
    logger.info("=" * 60)

    return EXIT_SUCCESS


def main() -> int:
    """
    Main entry point for the EduScout pipeline.

    Sets up logging and runs the pipeline with proper error handling.

    Returns:
        Exit code for the process.
    """
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    setup_logging(log_level)
    logger = get_logger("main")

    try:
        return run_pipeline()

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_ENV_ERROR

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        return EXIT_FAILURE

    except Exception as e:
        logger.exception(f"Unexpected error in pipeline: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
