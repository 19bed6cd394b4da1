"""
Job Matcher Agent
Agente che chiede all'LLM quanto un resume si adatta a uno o più annunci.

Responsabilità:
- Costruisce il prompt resume + job description
- Interpreta la risposta come JSON (Parsed) o la conserva grezza (Unparsed)
- Ordina più annunci per score decrescente
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from careerforge.models.llm_response import JobMatch, ParseResult, Parsed
from careerforge.models.resume import JobPosting
from careerforge.services.llm_service import LLMService, parse_json_response
from careerforge.services.logging_utils import log_section, print_with_prefix


MATCH_PROMPT = """
You are a career AI assistant.

Resume:
---
{resume_text}

Job Description:
---
{job_description}

TASKS:
1. Evaluate how well the candidate's skills match this job.
2. Return a SIMILARITY SCORE between 0 and 1 (1 = perfect fit)
3. List the top 5 matching skills/keywords.

Return JSON like this:
{{
  "score": 0.87,
  "matched_skills": ["JavaScript", "Node.js", "React"]
}}
"""


class JobMatcherAgent:
    """
    Agente di matching resume/annuncio basato su LLM.

    Il punteggio è interamente delegato al modello: l'agente si limita a
    formattare il prompt e a interpretare la risposta.
    """

    def __init__(
        self,
        llm_service: Optional[Any] = None,
        temperature: float = 0.1,
        verbose: bool = False
    ):
        self.temperature = temperature
        self.verbose = verbose

        self._llm_service = llm_service

    @property
    def llm_service(self) -> LLMService:
        if self._llm_service is None:
            self._log("Inizializzazione LLMService...")
            self._llm_service = LLMService(verbose=self.verbose)
        return self._llm_service

    def match(self, resume_text: str, job_description: str) -> ParseResult:
        """
        Confronta un resume con una job description.

        Returns:
            Parsed({"score": ..., "matched_skills": [...]}) oppure Unparsed(output grezzo)

        Raises:
            ValueError: resume o job description mancanti
            OllamaNotAvailableError: LLM non disponibile
        """
        if not resume_text or not job_description:
            raise ValueError("Resume text and job description are required")

        prompt = MATCH_PROMPT.format(resume_text=resume_text, job_description=job_description)
        output = self.llm_service.generate(prompt, temperature=self.temperature)

        result = parse_json_response(output)

        if isinstance(result, Parsed):
            self._log(f"Match parsato: {result.value}")
        else:
            self._log("Risposta non JSON, conservo l'output grezzo")
        return result

    def match_list(
        self,
        resume_text: str,
        jobs: Sequence[Union[JobPosting, Mapping[str, Any]]]
    ) -> List[JobMatch]:
        """
        Confronta il resume con ogni annuncio, uno alla volta.

        Returns:
            Lista di JobMatch ordinata per score decrescente
            (risposte non parsate valgono 0)
        """
        if not resume_text or jobs is None:
            raise ValueError("Resume text and jobs list are required")

        log_section(self._log, f"Matching di {len(jobs)} annunci", width=60, char="-")

        results = []
        for job in jobs:
            posting = job if isinstance(job, JobPosting) else JobPosting.model_validate(job)
            result = self.match(resume_text, posting.description)
            results.append(JobMatch(job_title=posting.title, result=result))

        return sorted(results, key=lambda m: m.score, reverse=True)

    def _log(self, message: str) -> None:
        print_with_prefix("[JobMatcherAgent]", message, enabled=self.verbose)
