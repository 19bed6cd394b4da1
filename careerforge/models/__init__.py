# models package
"""Data models for the careerforge scoring core."""

from careerforge.models.scoring import (
    SkillMatchResult,
    ScoreWeights,
    ScoreBreakdown,
    OverallMatchResult,
    KeywordDensityResult,
    ATSScoreResult,
    SimilarityMatch,
)
from careerforge.models.resume import ResumeData, JobData, JobPosting
from careerforge.models.llm_response import Parsed, Unparsed, ParseResult, JobMatch

__all__ = [
    "SkillMatchResult",
    "ScoreWeights",
    "ScoreBreakdown",
    "OverallMatchResult",
    "KeywordDensityResult",
    "ATSScoreResult",
    "SimilarityMatch",
    "ResumeData",
    "JobData",
    "JobPosting",
    "Parsed",
    "Unparsed",
    "ParseResult",
    "JobMatch",
]
