"""
Tests for the parse module.

Tests cover:
- Project extraction from listing markup
- Text cleanup and relative URL normalization
- Missing fields and malformed HTML
"""

import pytest
from bs4 import BeautifulSoup

from eduscout.parse import (
    parse_projects,
    parse_project_element,
    extract_text,
    extract_link,
)
from eduscout.models import AnalysisStatus, Category


BASE_URL = "https://ied.eu/eu-programmes/ied-projects/"


class TestParseProjects:
    """Tests for listing page parsing."""

    def test_parse_single_project(self):
        """Test parsing one well-formed project block."""
        html = """
        <div class="project-item">
            <h3 class="project-title">CleanSeas</h3>
            <div class="project-description">Ocean plastics education</div>
            <a href="https://cleanseas.example/">Read more</a>
        </div>
        """

        result = parse_projects(html, BASE_URL)

        assert len(result) == 1
        project = result[0]
        assert project.name == "CleanSeas"
        assert project.description == "Ocean plastics education"
        assert project.url == "https://cleanseas.example/"
        assert project.category is Category.UNSUITABLE
        assert project.status is AnalysisStatus.UNANALYZED
        assert project.official_website is None
        assert project.suitability_score is None
        assert project.educational_plan is None
        assert project.recommendations is None

    def test_document_order_preserved(self):
        """Test that records follow document order."""
        html = "".join(
            f'<div class="project-item"><span class="project-title">P{i}</span></div>'
            for i in range(5)
        )

        result = parse_projects(html, BASE_URL)

        assert [p.name for p in result] == ["P0", "P1", "P2", "P3", "P4"]

    def test_ids_are_unique(self):
        """Test that each record gets its own id."""
        html = '<div class="project-item"><span class="project-title">Same</span></div>' * 3

        result = parse_projects(html, BASE_URL)

        assert len(result) == 3
        assert len({p.id for p in result}) == 3

    def test_duplicates_are_kept(self):
        """Test that identical blocks are not de-duplicated."""
        block = """
        <div class="project-item">
            <h3 class="project-title">Twin</h3>
            <a href="/twin">Twin</a>
        </div>
        """

        result = parse_projects(block + block, BASE_URL)

        assert len(result) == 2
        assert result[0].url == result[1].url

    def test_whitespace_is_trimmed(self):
        """Test that names and descriptions are trimmed and collapsed."""
        html = """
        <div class="project-item">
            <h3 class="project-title">
                Green   Schools
            </h3>
            <p class="project-description">
                Climate
                literacy
            </p>
        </div>
        """

        result = parse_projects(html, BASE_URL)

        assert result[0].name == "Green Schools"
        assert result[0].description == "Climate literacy"

    def test_missing_fields_are_empty_strings(self):
        """Test that a block without title, description or link still parses."""
        html = '<div class="project-item"><p>Only text</p></div>'

        result = parse_projects(html, BASE_URL)

        assert len(result) == 1
        assert result[0].name == ""
        assert result[0].description == ""
        assert result[0].url == ""

    def test_relative_url_normalized(self):
        """Test that relative hrefs become absolute."""
        html = '<div class="project-item"><a href="/projects/abc">abc</a></div>'

        result = parse_projects(html, "https://ied.eu/eu-programmes/")

        assert result[0].url == "https://ied.eu/projects/abc"

    def test_unparseable_href_kept_raw(self):
        """Test that an href urllib cannot split is stored as written."""
        html = """
        <div class="project-item">
            <span class="project-title">Broken</span>
            <a href=" http://[broken/x ">x</a>
        </div>
        """

        result = parse_projects(html, BASE_URL)

        assert len(result) == 1
        assert result[0].name == "Broken"
        assert result[0].url == "http://[broken/x"

    def test_first_anchor_is_used(self):
        """Test that the first anchor with an href wins."""
        html = """
        <div class="project-item">
            <a name="top">anchor without href</a>
            <a href="https://first.example">first</a>
            <a href="https://second.example">second</a>
        </div>
        """

        result = parse_projects(html, BASE_URL)

        assert result[0].url == "https://first.example"

    def test_non_matching_elements_ignored(self):
        """Test that only project containers are parsed."""
        html = """
        <nav><a href="/home">Home</a></nav>
        <div class="news-item"><h3 class="project-title">Not a project</h3></div>
        <div class="project-item"><h3 class="project-title">A project</h3></div>
        """

        result = parse_projects(html, BASE_URL)

        assert [p.name for p in result] == ["A project"]

    def test_empty_html(self):
        """Test handling of empty HTML content."""
        assert parse_projects("", BASE_URL) == []
        assert parse_projects(None, BASE_URL) == []

    def test_no_projects_found(self):
        """Test handling when no project blocks exist."""
        html = "<html><body><p>No projects today.</p></body></html>"

        assert parse_projects(html, BASE_URL) == []

    def test_malformed_html(self):
        """Test that malformed HTML does not raise."""
        html = """
        <div class="project-item">
            <h3 class="project-title">Unclosed
        <div class="project-item">
            <h3 class="project-title">Second</h3>
        """

        result = parse_projects(html, BASE_URL)

        assert isinstance(result, list)


class TestElementHelpers:
    """Tests for the per-element extractors."""

    def _element(self, html):
        soup = BeautifulSoup(html, "html.parser")
        return soup.select_one(".project-item")

    def test_extract_text_missing_selector(self):
        """Test that a missing child yields an empty string."""
        element = self._element('<div class="project-item"></div>')

        assert extract_text(element, ".project-title") == ""

    def test_extract_link_skips_empty_href(self):
        """Test that an empty href is treated as no link."""
        element = self._element('<div class="project-item"><a href="  ">x</a></div>')

        assert extract_link(element, BASE_URL) == ""

    def test_parse_project_element(self):
        """Test building a project from one container."""
        element = self._element(
            '<div class="project-item">'
            '<span class="project-title">Code Club</span>'
            '<span class="project-description">Coding for kids</span>'
            '<a href="code-club">Link</a>'
            '</div>'
        )

        project = parse_project_element(element, BASE_URL)

        assert project.name == "Code Club"
        assert project.description == "Coding for kids"
        assert project.url == BASE_URL + "code-club"
