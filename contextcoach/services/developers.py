"""Developer profile management."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..errors import InvalidArgumentError, NotFoundError
from ..models import DeveloperProfile
from ..store import Store

logger = logging.getLogger(__name__)


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def _validate_profile(
    name: Optional[str],
    experience_level: Optional[str],
    productivity_factor: Optional[float],
    preferred_work_hours_per_day: Optional[float],
) -> None:
    if not name or not name.strip():
        raise InvalidArgumentError("Developer name cannot be null or empty")
    if not experience_level or not experience_level.strip():
        raise InvalidArgumentError("Experience level cannot be null or empty")
    if not _is_positive(productivity_factor):
        raise InvalidArgumentError("Productivity factor must be a positive number")
    if not _is_positive(preferred_work_hours_per_day):
        raise InvalidArgumentError("Preferred work hours per day must be a positive number")


def _require_query(value: Optional[str], label: str) -> str:
    if not value or not value.strip():
        raise InvalidArgumentError(f"{label} cannot be null or empty")
    return value


@dataclass
class DeveloperProfileService:
    store: Store

    def create(
        self,
        name: Optional[str],
        experience_level: Optional[str],
        productivity_factor: Optional[float],
        skills: Optional[Sequence[str]],
        preferred_work_hours_per_day: Optional[float],
    ) -> DeveloperProfile:
        logger.info("Creating developer profile for: %s", name)
        _validate_profile(name, experience_level, productivity_factor, preferred_work_hours_per_day)
        profile = DeveloperProfile(
            name=name,  # type: ignore[arg-type]
            experience_level=experience_level,  # type: ignore[arg-type]
            productivity_factor=float(productivity_factor),  # type: ignore[arg-type]
            preferred_work_hours_per_day=float(preferred_work_hours_per_day),  # type: ignore[arg-type]
            skills=list(skills or []),
        )
        saved = self.store.developers.save(profile)
        logger.info("Created developer profile with ID: %s", saved.id)
        return saved

    def get(self, developer_id: str) -> DeveloperProfile:
        profile = self.store.developers.get(developer_id)
        if profile is None:
            raise NotFoundError(f"Developer profile not found with ID: {developer_id}")
        return profile

    def list(self) -> List[DeveloperProfile]:
        return self.store.developers.list()

    def search_by_name(self, name: Optional[str]) -> List[DeveloperProfile]:
        return self.store.developers_by_name(_require_query(name, "Name"))

    def search_by_experience(self, experience_level: Optional[str]) -> List[DeveloperProfile]:
        return self.store.developers_by_experience(
            _require_query(experience_level, "Experience level")
        )

    def search_by_skill(self, skill: Optional[str]) -> List[DeveloperProfile]:
        return self.store.developers_by_skill(_require_query(skill, "Skill"))

    def update(
        self,
        developer_id: str,
        name: Optional[str],
        experience_level: Optional[str],
        productivity_factor: Optional[float],
        skills: Optional[Sequence[str]],
        preferred_work_hours_per_day: Optional[float],
    ) -> DeveloperProfile:
        logger.info("Updating developer profile with ID: %s", developer_id)
        _validate_profile(name, experience_level, productivity_factor, preferred_work_hours_per_day)
        profile = self.get(developer_id)
        profile.name = name  # type: ignore[assignment]
        profile.experience_level = experience_level  # type: ignore[assignment]
        profile.productivity_factor = float(productivity_factor)  # type: ignore[arg-type]
        profile.skills = list(skills or [])
        profile.preferred_work_hours_per_day = float(preferred_work_hours_per_day)  # type: ignore[arg-type]
        return self.store.developers.save(profile)

    def delete(self, developer_id: str) -> None:
        logger.info("Deleting developer profile with ID: %s", developer_id)
        if not self.store.developers.delete(developer_id):
            logger.warning("Developer profile not found with ID: %s", developer_id)
            raise NotFoundError(f"Developer profile not found with ID: {developer_id}")
