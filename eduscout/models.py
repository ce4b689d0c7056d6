"""
Data model for the EduScout pipeline.

A ``Project`` is one initiative discovered on the listing page. It starts
unanalyzed and is replaced (never edited in place) by the pipeline once the
website resolver and the suitability classifier have run.
"""

import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Category(str, Enum):
    """Target audience assigned by the classifier."""
    SCHOOL = "school"
    ADULT = "adult"
    BOTH = "both"
    UNSUITABLE = "unsuitable"


class AnalysisStatus(str, Enum):
    """Processing state of a project, kept apart from its category."""
    UNANALYZED = "unanalyzed"
    ANALYZED = "analyzed"
    FAILED = "failed"


@dataclass
class Project:
    """
    Represents a single project record.

    Attributes:
        id: Unique identifier assigned at creation.
        name: Project title from the listing page (may be empty).
        description: Project summary from the listing page (may be empty).
        url: Link to the project's listing entry (may be empty).
        official_website: Canonical website found by the resolver.
        suitability_score: Educational suitability, 0 to 100.
        educational_plan: Implementation plan, or the error text on failure.
        recommendations: Ordered implementation recommendations.
        category: Target audience. Defaults to UNSUITABLE.
        status: Whether the project has been analyzed.
    """
    id: str
    name: str
    description: str
    url: str
    official_website: Optional[str] = None
    suitability_score: Optional[int] = None
    educational_plan: Optional[str] = None
    recommendations: Optional[List[str]] = None
    category: Category = Category.UNSUITABLE
    status: AnalysisStatus = AnalysisStatus.UNANALYZED

    @property
    def is_analyzed(self) -> bool:
        return self.status is not AnalysisStatus.UNANALYZED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = asdict(self)
        data["category"] = self.category.value
        data["status"] = self.status.value
        return data

    def __repr__(self) -> str:
        return f"<Project {self.name!r} ({self.status.value}, {self.category.value})>"


@dataclass
class AnalysisResult:
    """
    Outcome of one classification call.

    ``error`` is set only on the degraded path; the other fields are then
    filled with the failure values so callers can merge it like any result.
    """
    suitability_score: int
    category: Category
    educational_plan: str
    recommendations: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def degraded(cls, message: str) -> "AnalysisResult":
        message = message or "Analysis failed"
        return cls(
            suitability_score=0,
            category=Category.UNSUITABLE,
            educational_plan=message,
            recommendations=[],
            error=message,
        )


def new_project(name: str, description: str, url: str) -> Project:
    """Create an unanalyzed project with a fresh id."""
    return Project(
        id=str(uuid.uuid4()),
        name=name,
        description=description,
        url=url,
    )
