"""AI prompt templates."""

from serendipia.ai.prompts.financial_analysis import (
    FINANCIAL_ANALYSIS_SYSTEM,
    FINANCIAL_ANALYSIS_USER,
    ANALYSIS_TASKS,
)

__all__ = [
    "FINANCIAL_ANALYSIS_SYSTEM",
    "FINANCIAL_ANALYSIS_USER",
    "ANALYSIS_TASKS",
]
