"""
Tests for the report module.
"""

import pytest

from eduscout.models import AnalysisResult, Category, new_project
from eduscout.pipeline import merge_analysis
from eduscout.report import count_by_category, format_project_report, format_summary


@pytest.fixture
def analyzed_project():
    project = new_project("CleanSeas", "Ocean plastics education", "https://ied.eu/p/cleanseas")
    result = AnalysisResult(82, Category.SCHOOL, "Four-week module.", ["Use in grade 9 science", "Field trip"])
    return merge_analysis(project, "https://cleanseas.eu", result)


class TestCountByCategory:
    """Tests for category counting."""

    def test_unanalyzed_bucket(self, analyzed_project):
        """Test that unanalyzed projects are not counted as unsuitable."""
        projects = [analyzed_project, new_project("B", "", ""), new_project("C", "", "")]

        counts = count_by_category(projects)

        assert counts == {
            "school": 1,
            "adult": 0,
            "both": 0,
            "unsuitable": 0,
            "unanalyzed": 2,
        }

    def test_empty(self):
        assert sum(count_by_category([]).values()) == 0


class TestFormatProjectReport:
    """Tests for single project formatting."""

    def test_analyzed_project(self, analyzed_project):
        text = format_project_report(analyzed_project)

        assert text.startswith("## CleanSeas")
        assert "**Category:** school" in text
        assert "**Suitability:** 82/100" in text
        assert "**Official website:** https://cleanseas.eu" in text
        assert "1. Use in grade 9 science" in text
        assert "2. Field trip" in text
        assert "Four-week module." in text

    def test_unanalyzed_project(self):
        """Test placeholders for a project that was not analyzed."""
        text = format_project_report(new_project("", "", ""))

        assert "## Untitled project" in text
        assert "not evaluated" in text
        assert "**Suitability:** n/a" in text
        assert "Recommendations" not in text


class TestFormatSummary:
    """Tests for summary formatting."""

    def test_summary_totals(self, analyzed_project):
        text = format_summary([analyzed_project, new_project("B", "", "")])

        assert "Projects: 2 total, 1 analyzed" in text
        assert "school: 1" in text
        assert "unanalyzed: 1" in text
