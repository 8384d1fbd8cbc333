"""Stored records for requirements, analysis results, developers and tickets."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class SourceType(str, Enum):
    TEXT = "TEXT"
    PDF = "PDF"
    JSON = "JSON"
    EXCEL = "EXCEL"
    WORD = "WORD"
    OTHER = "OTHER"
    UNKNOWN = "UNKNOWN"


class ComplexityLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def coerce(cls, value: object) -> "ComplexityLevel":
        """Match *value* case-insensitively against the known levels."""
        if isinstance(value, ComplexityLevel):
            return value
        text = str(value).strip().lower()
        for level in cls:
            if level.value.lower() == text:
                return level
        raise ValueError(f"Unknown complexity level '{value}'")


@dataclass
class Requirement:
    """A feature or requirement description submitted by a user."""

    title: str
    content: str
    source_type: SourceType = SourceType.TEXT
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    clarity_score: Optional[float] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class AmbiguityDetectionResult:
    requirement_id: str
    ambiguity_categories: List[str] = field(default_factory=list)
    analysis: Optional[str] = None
    confidence_score: Optional[float] = None
    suggested_improvements: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class ScopeEstimationResult:
    requirement_id: str
    estimated_hours: Optional[float] = None
    complexity_level: Optional[ComplexityLevel] = None
    confidence_level: Optional[float] = None
    justification: Optional[str] = None
    risk_factors: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class ImplementationPlan:
    requirement_id: str
    summary: Optional[str] = None
    implementation_steps: List[str] = field(default_factory=list)
    technical_approach: Optional[str] = None
    dependencies: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class DeveloperProfile:
    """Developer traits used to tailor story point estimates."""

    name: str
    experience_level: str
    productivity_factor: float
    preferred_work_hours_per_day: float
    skills: List[str] = field(default_factory=list)
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class JiraTicket:
    title: str
    description: str
    ticket_type: str
    priority: str
    requirement_id: str
    estimated_story_points: Optional[int] = None
    assigned_developer_id: Optional[str] = None
    external_ticket_id: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[datetime] = None
