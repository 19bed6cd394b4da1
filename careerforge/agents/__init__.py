# agents package
"""LLM-backed agents for the careerforge scoring core."""

from careerforge.agents.job_matcher_agent import JobMatcherAgent

__all__ = [
    "JobMatcherAgent",
]
