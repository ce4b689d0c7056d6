"""
Pipeline orchestration for EduScout.

``ProjectPipeline`` sequences the stages:
fetch listing → (per selected project) resolve website + classify → merge

The pipeline does not own the set of projects. ``WorkingSet`` is the small
in-memory container callers use to hold them, replace them by id, and
remember which ids are currently being analyzed.
"""

import dataclasses
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Set, Union

from eduscout.classify import SuitabilityClassifier
from eduscout.fetch import DEFAULT_LISTING_URL, fetch_listing
from eduscout.models import AnalysisResult, AnalysisStatus, Category, Project
from eduscout.resolve import resolve_website
from eduscout.utils import get_logger


# Module logger
logger = get_logger("pipeline")

ListingFetcher = Callable[[str], List[Project]]
WebsiteResolver = Callable[[str], str]

ALL_CATEGORIES = "all"


def merge_analysis(project: Project, website: str, result: AnalysisResult) -> Project:
    """
    Return a copy of ``project`` updated with one analysis round.

    The website is applied only when the resolver found one. Score,
    category, plan and recommendations are always applied together.

    Args:
        project: Project to update. It is not modified.
        website: Resolver output (empty when nothing was found).
        result: Classifier output, possibly degraded.

    Returns:
        New Project with the same id.
    """
    status = AnalysisStatus.FAILED if result.failed else AnalysisStatus.ANALYZED

    return dataclasses.replace(
        project,
        official_website=website or project.official_website,
        suitability_score=result.suitability_score,
        category=result.category,
        educational_plan=result.educational_plan,
        recommendations=list(result.recommendations),
        status=status,
    )


class ProjectPipeline:
    """
    Runs discovery and per-project analysis.

    Concurrent ``analyze_one`` calls for different projects are
    independent. Callers must not analyze the same project id twice at
    the same time; this is not checked here (see ``WorkingSet``).
    """

    def __init__(
        self,
        classifier: SuitabilityClassifier,
        listing_url: str = DEFAULT_LISTING_URL,
        fetcher: ListingFetcher = fetch_listing,
        resolver: WebsiteResolver = resolve_website,
    ) -> None:
        self.classifier = classifier
        self.listing_url = listing_url
        self.fetcher = fetcher
        self.resolver = resolver

    def load_all(self) -> List[Project]:
        """
        Fetch the listing once.

        Returns:
            Fresh, unanalyzed projects. Empty if the listing could not be
            fetched or parsed.
        """
        projects = self.fetcher(self.listing_url)
        logger.info(f"Discovered {len(projects)} project(s)")
        return projects

    def analyze_one(self, project: Project) -> Project:
        """
        Resolve the website and classify a single project.

        Both lookups run concurrently; the merge waits for both.

        Args:
            project: Project to analyze.

        Returns:
            Updated copy of the project with the same id.

        Raises:
            ConfigurationError: If the classifier has no credential. No
                network call is made in that case.
        """
        self.classifier.ensure_configured()

        logger.info(f"Analyzing project {project.id} ({project.name!r})")

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="analyze") as executor:
            website_future = executor.submit(self.resolver, project.name)
            result_future = executor.submit(
                self.classifier.classify, project.name, project.description
            )
            website = website_future.result()
            result = result_future.result()

        updated = merge_analysis(project, website, result)

        if updated.status is AnalysisStatus.FAILED:
            logger.warning(f"Analysis failed for {project.id}: {result.error}")
        else:
            logger.info(
                f"Analysis complete for {project.id}: "
                f"{updated.category.value} ({updated.suitability_score}/100)"
            )

        return updated


class WorkingSet:
    """In-memory collection of projects for one session, keyed by id."""

    def __init__(self, projects: Optional[List[Project]] = None) -> None:
        self._projects: List[Project] = []
        self._in_progress: Set[str] = set()
        self.replace(projects or [])

    def __len__(self) -> int:
        return len(self._projects)

    def __iter__(self):
        return iter(list(self._projects))

    @property
    def projects(self) -> List[Project]:
        return list(self._projects)

    def replace(self, projects: List[Project]) -> None:
        """Make ``projects`` the new authoritative set."""
        self._projects = list(projects)
        self._in_progress.clear()

    def get(self, project_id: str) -> Optional[Project]:
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def update(self, project: Project) -> None:
        """
        Replace the entry with the same id.

        Raises:
            KeyError: If no project with that id is in the set.
        """
        for index, existing in enumerate(self._projects):
            if existing.id == project.id:
                self._projects[index] = project
                return
        raise KeyError(project.id)

    def filter_by_category(self, category: Union[str, Category] = ALL_CATEGORIES) -> List[Project]:
        """
        Return projects in the given category, or all of them for "all".

        Only analyzed projects match a specific category, so an unsuitable
        verdict is never confused with a project nobody has looked at.
        """
        if category == ALL_CATEGORIES:
            return list(self._projects)

        wanted = Category(category)
        return [
            p for p in self._projects
            if p.is_analyzed and p.category is wanted
        ]

    def unanalyzed(self) -> List[Project]:
        return [p for p in self._projects if not p.is_analyzed]

    def mark_in_progress(self, project_id: str) -> bool:
        """
        Record that an analysis has started.

        Returns:
            False if that id is already being analyzed.
        """
        if project_id in self._in_progress:
            return False
        self._in_progress.add(project_id)
        return True

    def mark_done(self, project_id: str) -> None:
        self._in_progress.discard(project_id)

    def is_in_progress(self, project_id: str) -> bool:
        return project_id in self._in_progress

    def status_counts(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in AnalysisStatus}
        for project in self._projects:
            counts[project.status.value] += 1
        return counts
