"""ContextCoach: LLM-assisted requirement clarification and estimation."""

__version__ = "0.1.0"
