"""
Report module for the EduScout pipeline.

Formats projects as plain-text (markdown-flavoured) blocks for the
command-line report.
"""

from typing import Dict, List

from eduscout.models import Category, Project


UNANALYZED_BUCKET = "unanalyzed"


def count_by_category(projects: List[Project]) -> Dict[str, int]:
    """
    Count projects per category.

    Projects that were never analyzed go to a separate "unanalyzed"
    bucket instead of being counted as unsuitable.

    Args:
        projects: Projects to count.

    Returns:
        Dictionary with one key per category plus "unanalyzed".
    """
    counts = {category.value: 0 for category in Category}
    counts[UNANALYZED_BUCKET] = 0

    for project in projects:
        if project.is_analyzed:
            counts[project.category.value] += 1
        else:
            counts[UNANALYZED_BUCKET] += 1

    return counts


def format_project_report(project: Project) -> str:
    """
    Format a single project.

    Args:
        project: Project to describe.

    Returns:
        Multi-line string.
    """
    name = project.name or "Untitled project"
    score = (
        f"{project.suitability_score}/100"
        if project.suitability_score is not None else "n/a"
    )

    lines = [
        f"## {name}",
        "",
        f"**Status:** {project.status.value}",
        f"**Category:** {project.category.value if project.is_analyzed else 'not evaluated'}",
        f"**Suitability:** {score}",
        f"**Listing:** {project.url or 'n/a'}",
        f"**Official website:** {project.official_website or 'n/a'}",
    ]

    if project.description:
        lines.extend(["", project.description])

    if project.educational_plan:
        lines.extend(["", "### Educational plan", "", project.educational_plan])

    if project.recommendations:
        lines.extend(["", "### Recommendations", ""])
        for i, recommendation in enumerate(project.recommendations, 1):
            lines.append(f"{i}. {recommendation}")

    return "\n".join(lines)


def format_summary(projects: List[Project]) -> str:
    """
    Format totals for a set of projects.

    Args:
        projects: Projects to summarize.

    Returns:
        Multi-line summary string.
    """
    counts = count_by_category(projects)
    analyzed = len(projects) - counts[UNANALYZED_BUCKET]

    lines = [
        f"Projects: {len(projects)} total, {analyzed} analyzed",
    ]
    for key, value in counts.items():
        lines.append(f"  {key}: {value}")

    return "\n".join(lines)
