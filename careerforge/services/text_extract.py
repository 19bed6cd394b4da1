"""
Text Extraction
Lettura di resume/job description da file e estrazione euristica di sezioni.

Responsabilità:
- Legge PDF (PyPDF2), TXT e MD
- Pulisce il testo e ne estrae keyword
- Ricava sezioni del resume e requisiti del job con regex
- Costruisce ResumeData / JobData per lo score complessivo
"""

import re
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Union

from PyPDF2 import PdfReader

from careerforge.models.resume import JobData, ResumeData
from careerforge.services.scoring import extract_years_from_text


class UnsupportedFileFormatError(ValueError):
    """Estensione file non supportata."""
    pass


STOP_WORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "being", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "may", "might", "can", "this", "that", "these", "those",
}

JOB_SKILL_KEYWORDS = [
    "javascript", "python", "java", "react", "node.js", "angular", "vue", "typescript",
    "sql", "mongodb", "postgresql", "mysql", "aws", "azure", "docker", "kubernetes",
    "git", "github", "agile", "scrum", "api", "rest", "graphql", "microservices",
]

JOB_EDUCATION_KEYWORDS = [
    "bachelor", "master", "phd", "degree", "diploma", "certification",
    "computer science", "engineering", "mathematics", "statistics",
]

# Una sezione termina alla prima riga vuota o alla prossima intestazione "TITOLO:"
_SECTION_END = r"(?=\n\s*\n|\n\s*[A-Z][A-Z\s]+:)"


def _section_patterns(*headings: str) -> List[re.Pattern]:
    return [re.compile(rf"(?:{h})[\s\S]*?{_SECTION_END}", re.IGNORECASE) for h in headings]


SUMMARY_PATTERNS = _section_patterns(
    r"summary|profile|objective|about",
    r"professional\s+summary|executive\s+summary",
)
EXPERIENCE_PATTERNS = _section_patterns(
    r"experience|employment|work\s+history|professional\s+experience",
    r"employment|work\s+history",
)
EDUCATION_PATTERNS = _section_patterns(
    r"education|academic|qualifications",
    r"degree|university|college|school",
)
SKILLS_PATTERNS = _section_patterns(
    r"skills|technical\s+skills|technologies|competencies",
    r"programming\s+languages|tools|software",
)
RESPONSIBILITY_PATTERNS = _section_patterns(
    r"responsibilities|duties|what\s+you'll\s+do",
    r"key\s+responsibilities|main\s+duties",
)

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b")
PHONE_PATTERN = re.compile(r"(\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})")
LINKEDIN_PATTERN = re.compile(r"(?:https?://)?(?:www\.)?linkedin\.com/in/[a-zA-Z0-9-]+/?")
GITHUB_PATTERN = re.compile(r"(?:https?://)?(?:www\.)?github\.com/[a-zA-Z0-9-]+/?")
JOB_EXPERIENCE_PATTERNS = [
    re.compile(r"(\d+)\+?\s*years?\s*(?:of\s*)?experience", re.IGNORECASE),
    re.compile(r"(\d+)\s*-\s*(\d+)\s*years?\s*(?:of\s*)?experience", re.IGNORECASE),
]


# ═══════════════════════════════════════════════════════════════════════════
# LETTURA FILE
# ═══════════════════════════════════════════════════════════════════════════

def extract_text_from_pdf(pdf_path: Union[str, Path]) -> str:
    """Estrae testo da un file PDF."""
    reader = PdfReader(str(pdf_path))
    text_parts = []
    for page in reader.pages:
        text = page.extract_text()
        if text:
            text_parts.append(text)
    return "\n".join(text_parts)


def extract_text_from_file(path: Union[str, Path]) -> str:
    """Legge PDF, TXT o MD; altre estensioni sollevano UnsupportedFileFormatError."""
    path = Path(path)
    extension = path.suffix.lower().lstrip(".")

    if extension == "pdf":
        return extract_text_from_pdf(path)
    if extension in {"txt", "md"}:
        return path.read_text(encoding="utf-8", errors="replace")

    raise UnsupportedFileFormatError(f"Unsupported file format: {extension or path.name}")


# ═══════════════════════════════════════════════════════════════════════════
# PULIZIA & KEYWORD
# ═══════════════════════════════════════════════════════════════════════════

def clean_text(text: Optional[str]) -> str:
    """Compatta gli spazi e rimuove i caratteri speciali (tiene la punteggiatura base)."""
    if not text:
        return ""
    text = re.sub(r"\s+", " ", text)
    text = re.sub(r"[^\w\s.,;:!?@()-]", "", text)
    return text.strip()


def extract_keywords(text: Optional[str], min_length: int = 3) -> List[str]:
    """Top 50 parole per frequenza, senza stop word."""
    if not text:
        return []

    words = re.sub(r"[^\w\s]", "", text.lower()).split()
    words = [w for w in words if len(w) >= min_length and w not in STOP_WORDS]

    # most_common è stabile: a pari frequenza resta l'ordine di apparizione
    return [word for word, _ in Counter(words).most_common(50)]


# ═══════════════════════════════════════════════════════════════════════════
# RESUME
# ═══════════════════════════════════════════════════════════════════════════

def _first_section(text: str, patterns: List[re.Pattern]) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return clean_text(match.group(0))
    return None


def _first_match(text: str, pattern: re.Pattern) -> Optional[str]:
    match = pattern.search(text)
    return match.group(0) if match else None


def extract_resume_structure(resume_text: str) -> Dict[str, object]:
    """Contatti e sezioni principali del resume (None se non trovate)."""
    text = resume_text or ""
    return {
        "contact": {
            "email": _first_match(text, EMAIL_PATTERN),
            "phone": _first_match(text, PHONE_PATTERN),
            "linkedin": _first_match(text, LINKEDIN_PATTERN),
            "github": _first_match(text, GITHUB_PATTERN),
        },
        "summary": _first_section(text, SUMMARY_PATTERNS),
        "experience": _first_section(text, EXPERIENCE_PATTERNS),
        "education": _first_section(text, EDUCATION_PATTERNS),
        "skills": _first_section(text, SKILLS_PATTERNS),
    }


def build_resume_data(resume_text: str) -> ResumeData:
    """
    ResumeData per lo score complessivo.

    Le skill sono le keyword note trovate nel testo; l'esperienza è la frase
    "N years" con più anni, se presente, altrimenti la sezione esperienza.
    """
    text = resume_text or ""
    structure = extract_resume_structure(text)

    experience = structure["experience"]
    years_phrase = _best_years_phrase(text)
    if years_phrase:
        experience = years_phrase

    return ResumeData(
        skills=_find_skill_keywords(text),
        experience=experience,
        education=structure["education"],
    )


def _best_years_phrase(text: str) -> Optional[str]:
    phrases = re.findall(r"\d+\+?\s*(?:-|to)?\s*\d*\s*years?", text, flags=re.IGNORECASE)
    if not phrases:
        return None
    return max(phrases, key=extract_years_from_text)


# ═══════════════════════════════════════════════════════════════════════════
# JOB DESCRIPTION
# ═══════════════════════════════════════════════════════════════════════════

def _find_skill_keywords(text: str) -> List[str]:
    text_lower = text.lower()
    return [skill for skill in JOB_SKILL_KEYWORDS if skill in text_lower]


def extract_job_requirements(job_description: str) -> Dict[str, object]:
    """Skill, esperienza, istruzione e responsabilità dalla job description."""
    text = job_description or ""
    text_lower = text.lower()

    experience = None
    for pattern in JOB_EXPERIENCE_PATTERNS:
        experience = _first_match(text, pattern)
        if experience:
            break

    return {
        "skills": _find_skill_keywords(text),
        "experience": experience,
        "education": [edu for edu in JOB_EDUCATION_KEYWORDS if edu in text_lower],
        "responsibilities": _first_section(text, RESPONSIBILITY_PATTERNS),
    }


def build_job_data(job_description: str) -> JobData:
    requirements = extract_job_requirements(job_description)
    education = requirements["education"]
    return JobData(
        required_skills=requirements["skills"],
        required_experience=requirements["experience"],
        required_education=" ".join(education) if education else None,
    )
