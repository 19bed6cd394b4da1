from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ResumeData(BaseModel):
    """Dati strutturati del candidato usati dallo score complessivo."""
    skills: List[str] = []
    experience: Optional[str] = None    # es. "5+ years of backend development"
    education: Optional[str] = None     # es. "Bachelor of Science in CS"


class JobData(BaseModel):
    """Requisiti del job; accetta anche le chiavi camelCase (requiredSkills, ...)."""
    model_config = ConfigDict(populate_by_name=True)

    required_skills: List[str] = Field(default=[], alias="requiredSkills")
    required_experience: Optional[str] = Field(default=None, alias="requiredExperience")
    required_education: Optional[str] = Field(default=None, alias="requiredEducation")


class JobPosting(BaseModel):
    """Annuncio da confrontare con un resume tramite LLM."""
    title: Optional[str] = None
    description: str
