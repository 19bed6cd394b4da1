"""
Risultati tipizzati per l'output dell'LLM.

Il parsing JSON best-effort produce Parsed(value) oppure Unparsed(raw_text):
il chiamante fa pattern matching invece di cercare un campo "error".
"""

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Parsed:
    """Risposta LLM interpretata come JSON."""
    value: Any


@dataclass(frozen=True)
class Unparsed:
    """Risposta LLM non interpretabile come JSON (testo grezzo)."""
    raw_text: str


ParseResult = Union[Parsed, Unparsed]


@dataclass
class JobMatch:
    """Esito del matching LLM di un resume con un annuncio."""
    job_title: Optional[str]
    result: ParseResult

    @property
    def score(self) -> float:
        """Score numerico del match; 0 se assente o non parsato."""
        if isinstance(self.result, Parsed) and isinstance(self.result.value, dict):
            score = self.result.value.get("score")
            if isinstance(score, (int, float)) and not isinstance(score, bool):
                return float(score)
        return 0.0
