"""Prompt templates for each analysis task.

Every template ends with a fixed instruction naming the JSON keys the reply
must contain; the parser looks those keys up by their literal names.
"""
from __future__ import annotations

from typing import Optional, Sequence

from ..models import DeveloperProfile


def _join_context(context: Sequence[str]) -> str:
    return "\n".join(context)


def ambiguity_question_prompt(text: str, context: Sequence[str]) -> str:
    """Ask for a single clarifying question, or the literal answer 'None'."""
    return (
        "Identify ambiguities in the following feature request:\n"
        f'"{text}"\n'
        "Context:\n"
        f"{_join_context(context)}\n"
        "If there are ambiguities, ask a clarifying question. If none, respond 'None'."
    )


def complexity_prompt(text: str, context: Sequence[str]) -> str:
    return (
        "Analyze the following feature request and the given code context:\n"
        f'"{text}"\n'
        "Context:\n"
        f"{_join_context(context)}\n"
        "Assess the implementation complexity (low/medium/high), estimate story points, "
        "list affected modules/files/classes, break down into subtasks, suggest any refactors, "
        "and highlight potential edge cases or risks. Provide the answer in JSON format with keys: "
        "complexity, storyPoints, affectedModules, subtasks, refactors, risks."
    )


def ambiguity_detection_prompt(text: str) -> str:
    return (
        "Analyze the following software requirement for ambiguities, vagueness, "
        "or unclear specifications:\n\n"
        f"{text}\n\n"
        "Provide a detailed analysis in JSON format with the following structure:\n"
        "{\n"
        '  "ambiguityCategories": [list of ambiguity types found],\n'
        '  "analysis": "detailed explanation of ambiguities",\n'
        '  "confidenceScore": numeric value between 0 and 1,\n'
        '  "suggestedImprovements": "specific suggestions to improve clarity"\n'
        "}"
    )


def scope_estimation_prompt(text: str) -> str:
    return (
        "Analyze the following software requirement and provide a detailed scope estimation:\n\n"
        f"{text}\n\n"
        "Respond in JSON format with the following structure:\n"
        "{\n"
        '  "estimatedHours": numeric estimate of hours required,\n'
        '  "complexityLevel": "Low", "Medium", or "High",\n'
        '  "confidenceLevel": numeric value between 0 and 1,\n'
        '  "justification": "detailed explanation of the estimation",\n'
        '  "riskFactors": "potential risks that could affect the estimate"\n'
        "}"
    )


def implementation_plan_prompt(text: str) -> str:
    return (
        "Create a detailed implementation plan for the following software requirement:\n\n"
        f"{text}\n\n"
        "Respond in JSON format with the following structure:\n"
        "{\n"
        '  "summary": "brief summary of the implementation approach",\n'
        '  "implementationSteps": [ordered list of implementation steps],\n'
        '  "technicalApproach": "detailed technical approach",\n'
        '  "dependencies": "required dependencies and prerequisites"\n'
        "}"
    )


def story_points_prompt(
    text: str,
    repository_complexity: Optional[float] = None,
    developer: Optional[DeveloperProfile] = None,
) -> str:
    parts = [
        "Analyze the following software requirement and calculate appropriate story points:\n\n",
        f"{text}\n\n",
    ]
    if repository_complexity is not None:
        parts.append(
            f"Repository complexity score: {repository_complexity} "
            "(on a scale of 0 to 1, where higher values indicate higher complexity)\n\n"
        )
    if developer is not None:
        parts.append(
            "Developer Profile Information:\n"
            f"- Experience Level: {developer.experience_level}\n"
            f"- Productivity Factor: {developer.productivity_factor}\n"
            f"- Skills: {', '.join(developer.skills)}\n"
            f"- Preferred Work Hours Per Day: {developer.preferred_work_hours_per_day}\n\n"
            "Please consider the developer's experience level, productivity factor, and skills "
            "when calculating story points. Adjust the story points based on the developer's "
            "profile - a more experienced developer with relevant skills might complete the task "
            "with fewer story points, while a less experienced developer might need more story "
            "points.\n\n"
        )
    parts.append(
        "Respond in JSON format with the following structure:\n"
        "{\n"
        '  "storyPoints": numeric value (typically 1, 2, 3, 5, 8, 13, or 21),\n'
        '  "complexity": "Low", "Medium", or "High",\n'
        '  "confidenceLevel": numeric value between 0 and 1,\n'
        '  "justification": "detailed explanation of the story point calculation",\n'
        '  "considerations": [list of factors considered in the calculation],\n'
        '  "developerFactors": "explanation of how the developer profile influenced the story points"\n'
        "}"
    )
    return "".join(parts)


def repository_analysis_prompt(content: str) -> str:
    return (
        "Analyze the following code repository content for complexity and structure:\n\n"
        f"{content}\n\n"
        "Respond in JSON format with the following structure:\n"
        "{\n"
        '  "complexityScore": numeric value between 0 and 1,\n'
        '  "codeQualityAssessment": "assessment of code quality",\n'
        '  "suggestedImprovements": "suggestions for improving the codebase",\n'
        '  "potentialIssues": [list of potential issues or bugs]\n'
        "}"
    )
