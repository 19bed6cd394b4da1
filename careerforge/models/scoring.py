from pydantic import BaseModel
from typing import Dict, List, Optional


class SkillMatchResult(BaseModel):
    score: float = 0.0              # 0-1, arrotondato a 2 decimali
    matched_skills: List[str] = []  # skill del job (normalizzate) trovate nel resume
    total_required: int = 0
    matched_count: int = 0


class ScoreWeights(BaseModel):
    skills: float = 0.5
    experience: float = 0.3
    education: float = 0.2


class ScoreBreakdown(BaseModel):
    skills: SkillMatchResult
    experience: float
    education: float


class OverallMatchResult(BaseModel):
    overall: float  # 0-1
    breakdown: ScoreBreakdown
    weights: ScoreWeights = ScoreWeights()


class KeywordDensityResult(BaseModel):
    score: float = 0.0  # frazione non arrotondata
    matched_keywords: List[str] = []
    total_keywords: int = 0
    matched_count: int = 0


class ATSScoreResult(BaseModel):
    score: float
    # Flag nell'ordine fisso dei controlli ATS
    factors: Dict[str, bool]
    recommendations: List[str] = []


class SimilarityMatch(BaseModel):
    best_match: Optional[str] = None
    similarity: float = -1.0
    index: int = -1
