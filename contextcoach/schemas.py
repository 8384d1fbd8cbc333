"""Pydantic schemas for the ContextCoach API."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .models import ComplexityLevel, SourceType


class ServiceInfo(BaseModel):
    name: str
    version: str
    llm_client: str
    context_search: str


class RequirementTextRequest(BaseModel):
    title: str = Field(..., description="Short requirement title")
    content: str = Field(..., description="Full requirement text")
    clarity_score: Optional[float] = Field(None, description="Optional clarity score in [0, 1]")


class RequirementResponse(BaseModel):
    id: str
    title: str
    content: str
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    clarity_score: Optional[float] = None
    source_type: SourceType
    created_at: datetime
    updated_at: datetime


class AmbiguityResultResponse(BaseModel):
    id: str
    requirement_id: str
    ambiguity_categories: List[str]
    analysis: Optional[str] = None
    confidence_score: Optional[float] = None
    suggested_improvements: Optional[str] = None
    created_at: datetime


class ScopeResultResponse(BaseModel):
    id: str
    requirement_id: str
    estimated_hours: Optional[float] = None
    complexity_level: Optional[ComplexityLevel] = None
    confidence_level: Optional[float] = None
    justification: Optional[str] = None
    risk_factors: Optional[str] = None
    created_at: datetime


class ImplementationPlanResponse(BaseModel):
    id: str
    requirement_id: str
    summary: Optional[str] = None
    implementation_steps: List[str]
    technical_approach: Optional[str] = None
    dependencies: Optional[str] = None
    created_at: datetime


class StoryPointsResponse(BaseModel):
    story_points: Optional[int] = None
    complexity: Optional[ComplexityLevel] = None
    confidence_level: Optional[float] = None
    justification: Optional[str] = None
    considerations: List[str]
    developer_factors: Optional[str] = None


class RepositoryAnalysisRequest(BaseModel):
    content: str = Field(..., description="Source code or repository digest to assess")


class RepositoryAnalysisResponse(BaseModel):
    complexity_score: Optional[float] = None
    code_quality_assessment: Optional[str] = None
    suggested_improvements: Optional[str] = None
    potential_issues: List[str]


class DeveloperProfileRequest(BaseModel):
    name: str
    experience_level: str
    productivity_factor: Optional[float] = Field(None, description="Must be positive")
    skills: List[str] = Field(default_factory=list)
    preferred_work_hours_per_day: Optional[float] = Field(None, description="Must be positive")


class DeveloperProfileResponse(BaseModel):
    id: str
    name: str
    experience_level: str
    productivity_factor: float
    skills: List[str]
    preferred_work_hours_per_day: float
    created_at: datetime


class TicketCreateRequest(BaseModel):
    requirement_id: str
    ticket_type: str
    priority: str
    assigned_developer_id: Optional[str] = None


class TicketResponse(BaseModel):
    id: str
    title: str
    description: str
    ticket_type: str
    priority: str
    estimated_story_points: Optional[int] = None
    requirement_id: str
    assigned_developer_id: Optional[str] = None
    external_ticket_id: Optional[str] = None
    created_at: datetime


class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
