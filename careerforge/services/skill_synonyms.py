"""
Skill Synonym Table
Tabella fissa di sinonimi per il matching lessicale delle skill.

- Caricata da CSV (colonne: skill, synonyms separati da virgola)
- Relazione bidirezionale: skill canonica <-> sinonimo
- Nessuna mutazione dopo il caricamento
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Set

import pandas as pd


DEFAULT_SYNONYMS_CSV = Path(__file__).resolve().parent.parent / "data" / "skill_synonyms.csv"


class SkillSynonymTable:
    """
    Mappa skill canonica -> insieme di sinonimi (tutto lowercase).

    expand("nodejs") restituisce {"node.js"}, expand("node.js")
    restituisce {"nodejs", "node"}: ogni sinonimo punta alle sue canoniche.
    """

    def __init__(self, mapping: Optional[Mapping[str, Iterable[str]]] = None):
        self._canonical: Dict[str, Set[str]] = {}
        self._reverse: Dict[str, Set[str]] = {}

        for skill, synonyms in (mapping or {}).items():
            canonical = self._normalize(skill)
            if not canonical:
                continue
            bucket = self._canonical.setdefault(canonical, set())
            for synonym in synonyms:
                synonym = self._normalize(synonym)
                if not synonym or synonym == canonical:
                    continue
                bucket.add(synonym)
                self._reverse.setdefault(synonym, set()).add(canonical)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "SkillSynonymTable":
        return cls(mapping)

    @classmethod
    def from_csv(cls, csv_path: Optional[Path] = None) -> "SkillSynonymTable":
        """Carica la tabella da CSV (default: quella distribuita col package)."""
        csv_path = Path(csv_path) if csv_path else DEFAULT_SYNONYMS_CSV
        df = pd.read_csv(csv_path)

        mapping: Dict[str, List[str]] = {}
        for _, row in df.iterrows():
            skill = row["skill"]
            if pd.isna(skill):
                continue
            synonyms = []
            if pd.notna(row["synonyms"]) and row["synonyms"]:
                synonyms = [s.strip() for s in str(row["synonyms"]).split(",") if s.strip()]
            mapping.setdefault(str(skill), []).extend(synonyms)

        return cls(mapping)

    def expand(self, skill: str) -> Set[str]:
        """Sinonimi noti della skill (esclusa la skill stessa)."""
        key = self._normalize(skill)
        expanded = set(self._canonical.get(key, set()))
        expanded.update(self._reverse.get(key, set()))
        expanded.discard(key)
        return expanded

    def variations(self, skill: str) -> Set[str]:
        """La skill normalizzata più i suoi sinonimi."""
        return {self._normalize(skill)} | self.expand(skill)

    def __contains__(self, skill: str) -> bool:
        key = self._normalize(skill)
        return key in self._canonical or key in self._reverse

    def __len__(self) -> int:
        return len(self._canonical)

    @staticmethod
    def _normalize(skill: str) -> str:
        return str(skill).strip().lower()


@lru_cache(maxsize=1)
def load_default_synonyms() -> SkillSynonymTable:
    """Tabella di default, caricata una sola volta per processo."""
    return SkillSynonymTable.from_csv(DEFAULT_SYNONYMS_CSV)
