"""
Lexical Scorer
Score deterministici tra resume e requisiti del job, senza chiamate all'LLM.

Responsabilità:
- Match skill (esatto, per contenimento, per sinonimi)
- Score esperienza ed istruzione da testo libero
- Score complessivo pesato (skill 0.5, esperienza 0.3, istruzione 0.2)
- Densità keyword e score ATS con raccomandazioni

Input assenti o vuoti non sono errori: degradano a un valore neutro o a 0,
così lo scorer può essere chiamato su dati parziali.
"""

import re
from typing import Any, List, Mapping, Optional, Sequence, Union

from careerforge.models.resume import JobData, ResumeData
from careerforge.models.scoring import (
    ATSScoreResult,
    KeywordDensityResult,
    OverallMatchResult,
    ScoreBreakdown,
    ScoreWeights,
    SkillMatchResult,
)
from careerforge.services.skill_synonyms import SkillSynonymTable, load_default_synonyms
from careerforge.services.vector_math import round_score


class ScoringInputError(TypeError):
    """Eccezione per input di tipo errato (es. skill non stringa)."""
    pass


SCORE_WEIGHTS = ScoreWeights()

NEUTRAL_EDUCATION_SCORE = 0.5
DEFAULT_EDUCATION_LEVEL = 3

# Pattern indipendenti: in "2-4 years" anche "4 years" conta come match singolo
YEAR_PATTERNS = [
    re.compile(r"(\d+)\+?\s*years?", re.IGNORECASE),
    re.compile(r"(\d+)\s*-\s*(\d+)\s*years?", re.IGNORECASE),
    re.compile(r"(\d+)\s*to\s*(\d+)\s*years?", re.IGNORECASE),
]

# Ordine di priorità: il primo livello trovato vince
EDUCATION_LEVELS = [
    (5, re.compile(r"phd|doctorate")),
    (4, re.compile(r"master")),
    (3, re.compile(r"bachelor|\bbs\b|\bba\b")),
    (2, re.compile(r"associate|\baa\b|\bas\b")),
    (1, re.compile(r"high school|diploma")),
]

# (flag, pattern, raccomandazione se il flag è falso)
ATS_CHECKS = [
    ("has_contact_info", re.compile(r"phone|email|address", re.IGNORECASE),
     "Add clear contact information (phone, email, address)"),
    ("has_summary", re.compile(r"summary|objective|profile", re.IGNORECASE),
     "Include a professional summary or objective"),
    ("has_skills", re.compile(r"skills|technical skills|technologies", re.IGNORECASE),
     "Add a dedicated skills section"),
    ("has_experience", re.compile(r"experience|employment|work history", re.IGNORECASE),
     "Include detailed work experience"),
    ("has_education", re.compile(r"education|degree|university|college", re.IGNORECASE),
     "Add education section"),
    ("has_keywords", re.compile(r"achieved|developed|implemented|managed|led|created", re.IGNORECASE),
     "Use action verbs and keywords from job descriptions"),
    ("proper_formatting", None,
     "Improve formatting - avoid excessive tabs and spaces"),
    ("has_quantifiable_results", re.compile(r"\d+%|\$\d+|\d+\+|\d+\s*(years?|months?)", re.IGNORECASE),
     "Add quantifiable achievements and metrics"),
]

BAD_FORMATTING_PATTERN = re.compile(r"\t| {4,}")


# ═══════════════════════════════════════════════════════════════════════════
# SKILL
# ═══════════════════════════════════════════════════════════════════════════

def calculate_skill_match_score(
    resume_skills: Optional[Sequence[str]],
    job_skills: Optional[Sequence[str]],
    synonyms: Optional[SkillSynonymTable] = None
) -> SkillMatchResult:
    """
    Calcola la percentuale di skill del job coperte dal resume.

    Una skill del job è coperta se una skill del resume:
    1. è uguale (case-insensitive)
    2. la contiene o è contenuta in essa
    3. compare tra i suoi sinonimi noti

    Args:
        resume_skills: Skill del candidato
        job_skills: Skill richieste dal job
        synonyms: Tabella sinonimi (default: quella distribuita col package)

    Returns:
        SkillMatchResult con score arrotondato a 2 decimali
    """
    if not resume_skills or not job_skills:
        return SkillMatchResult()

    resume_normalized = [s for s in _normalize_skills(resume_skills, "resume_skills") if s]
    job_normalized = [s for s in _normalize_skills(job_skills, "job_skills") if s]

    if not resume_normalized or not job_normalized:
        return SkillMatchResult()

    table = synonyms if synonyms is not None else load_default_synonyms()
    resume_set = set(resume_normalized)

    matched = []
    for job_skill in job_normalized:
        if _skill_matches(job_skill, resume_normalized, resume_set, table):
            matched.append(job_skill)

    return SkillMatchResult(
        score=round_score(len(matched) / len(job_normalized)),
        matched_skills=matched,
        total_required=len(job_normalized),
        matched_count=len(matched),
    )


def _skill_matches(
    job_skill: str,
    resume_skills: List[str],
    resume_set: set,
    table: SkillSynonymTable
) -> bool:
    if job_skill in resume_set:
        return True

    for resume_skill in resume_skills:
        if job_skill in resume_skill or resume_skill in job_skill:
            return True

    return bool(table.expand(job_skill) & resume_set)


def _normalize_skills(skills: Sequence[Any], name: str) -> List[str]:
    normalized = []
    for skill in skills:
        if not isinstance(skill, str):
            raise ScoringInputError(
                f"{name} deve contenere solo stringhe, trovato {type(skill).__name__}: {skill!r}"
            )
        normalized.append(skill.strip().lower())
    return normalized


# ═══════════════════════════════════════════════════════════════════════════
# ESPERIENZA
# ═══════════════════════════════════════════════════════════════════════════

def calculate_experience_score(
    resume_experience: Optional[str],
    required_experience: Optional[str]
) -> float:
    """
    Confronta gli anni di esperienza estratti da due testi liberi.

    Returns:
        1.0 se sufficiente, 0.8 / 0.6 per le fasce all'80% / 60%,
        altrimenti il rapporto resume/required. 0 se un input manca.
    """
    _check_text(resume_experience, "resume_experience")
    _check_text(required_experience, "required_experience")

    if not resume_experience or not required_experience:
        return 0.0

    resume_years = extract_years_from_text(resume_experience)
    required_years = extract_years_from_text(required_experience)

    if resume_years >= required_years:
        return 1.0
    if resume_years >= required_years * 0.8:
        return 0.8
    if resume_years >= required_years * 0.6:
        return 0.6
    if required_years == 0:
        return 0.0
    return resume_years / required_years


def extract_years_from_text(text: Optional[str]) -> float:
    """
    Estrae gli anni da un testo ("3+ years", "2-4 years", "2 to 4 years").

    Un intervallo vale la media degli estremi; su più match, di tutti i
    pattern, vince il massimo (quindi "2-4 years" vale 4).
    """
    if not text:
        return 0.0

    max_years = 0.0
    for pattern in YEAR_PATTERNS:
        for match in pattern.finditer(text):
            numbers = [int(n) for n in match.groups()]
            max_years = max(max_years, sum(numbers) / len(numbers))

    return max_years


# ═══════════════════════════════════════════════════════════════════════════
# ISTRUZIONE
# ═══════════════════════════════════════════════════════════════════════════

def calculate_education_score(
    resume_education: Optional[str],
    required_education: Optional[str]
) -> float:
    """Confronta i livelli di istruzione; 0.5 (neutro) se un input manca."""
    _check_text(resume_education, "resume_education")
    _check_text(required_education, "required_education")

    if not resume_education or not required_education:
        return NEUTRAL_EDUCATION_SCORE

    resume_level = get_education_level(resume_education)
    required_level = get_education_level(required_education)

    if resume_level >= required_level:
        return 1.0
    return resume_level / required_level


def get_education_level(education_text: str) -> int:
    """Livello ordinale 1-5 (high school -> phd); default 3 (bachelor)."""
    text = education_text.lower()
    for level, pattern in EDUCATION_LEVELS:
        if pattern.search(text):
            return level
    return DEFAULT_EDUCATION_LEVEL


# ═══════════════════════════════════════════════════════════════════════════
# SCORE COMPLESSIVO
# ═══════════════════════════════════════════════════════════════════════════

def calculate_overall_match_score(
    resume_data: Union[ResumeData, Mapping[str, Any]],
    job_data: Union[JobData, Mapping[str, Any]]
) -> OverallMatchResult:
    """
    Combina skill, esperienza e istruzione con pesi fissi 0.5 / 0.3 / 0.2.

    Accetta i modelli o dizionari con le stesse chiavi; i campi mancanti
    seguono le regole di assenza dei singoli scorer.
    """
    resume = resume_data if isinstance(resume_data, ResumeData) else ResumeData.model_validate(resume_data or {})
    job = job_data if isinstance(job_data, JobData) else JobData.model_validate(job_data or {})

    skill_score = calculate_skill_match_score(resume.skills, job.required_skills)
    experience_score = calculate_experience_score(resume.experience, job.required_experience)
    education_score = calculate_education_score(resume.education, job.required_education)

    weights = SCORE_WEIGHTS.model_copy()
    overall = (
        skill_score.score * weights.skills +
        experience_score * weights.experience +
        education_score * weights.education
    )

    return OverallMatchResult(
        overall=round_score(overall),
        breakdown=ScoreBreakdown(
            skills=skill_score,
            experience=experience_score,
            education=education_score,
        ),
        weights=weights,
    )


# ═══════════════════════════════════════════════════════════════════════════
# KEYWORD & ATS
# ═══════════════════════════════════════════════════════════════════════════

def calculate_keyword_density_score(
    text: Optional[str],
    keywords: Optional[Sequence[str]]
) -> KeywordDensityResult:
    """Frazione di keyword presenti (substring, case-insensitive) nel testo."""
    _check_text(text, "text")
    if not keywords:
        return KeywordDensityResult()

    for keyword in keywords:
        if not isinstance(keyword, str):
            raise ScoringInputError(
                f"keywords deve contenere solo stringhe, trovato {type(keyword).__name__}: {keyword!r}"
            )

    if not text:
        return KeywordDensityResult(total_keywords=len(keywords))

    text_lower = text.lower()
    matched = [k for k in keywords if k.lower() in text_lower]

    return KeywordDensityResult(
        score=len(matched) / len(keywords),
        matched_keywords=matched,
        total_keywords=len(keywords),
        matched_count=len(matched),
    )


def calculate_ats_score(resume_text: Optional[str]) -> ATSScoreResult:
    """
    Valuta 8 criteri strutturali che un ATS cerca in un resume.

    Per ogni criterio non soddisfatto aggiunge una raccomandazione fissa,
    nell'ordine dei criteri.
    """
    _check_text(resume_text, "resume_text")
    text = resume_text or ""

    factors = {}
    recommendations = []
    for flag, pattern, recommendation in ATS_CHECKS:
        if pattern is None:
            passed = BAD_FORMATTING_PATTERN.search(text) is None
        else:
            passed = pattern.search(text) is not None

        factors[flag] = passed
        if not passed:
            recommendations.append(recommendation)

    passed_count = sum(1 for value in factors.values() if value)

    return ATSScoreResult(
        score=round_score(passed_count / len(ATS_CHECKS)),
        factors=factors,
        recommendations=recommendations,
    )


def _check_text(value: Any, name: str) -> None:
    if value is not None and not isinstance(value, str):
        raise ScoringInputError(f"{name} deve essere una stringa, trovato {type(value).__name__}")
