"""
Fallback Embedding Engine
Embedding numerici di testo per confronti di similarità senza un modello dedicato.

Strategie:
1. HashEmbedder - bag-of-hashed-words a 50 bucket, deterministico, locale
2. OracleEmbedder - chiede all'LLM una rappresentazione numerica e ne estrae
   i numeri; se non ne trova o la chiamata fallisce usa HashEmbedder

La strategia è scelta dal chiamante tramite EmbeddingPolicy.
"""

import re
from enum import Enum
from functools import lru_cache
from typing import Any, List, Optional, Sequence

import numpy as np

from careerforge.models.scoring import SimilarityMatch
from careerforge.services.logging_utils import print_with_prefix, truncate
from careerforge.services.vector_math import cosine_similarity, l2_normalize


EMBEDDING_SIZE = 50

NUMERIC_LITERAL_PATTERN = re.compile(r"-?\d+\.?\d*")

EMBEDDING_PROMPT = """
Convert this text into a numerical representation for similarity matching:
"{text}"

Return a JSON array of numbers representing the text embedding.
"""


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def token_hash(token: str) -> int:
    """
    Hash polinomiale a 32 bit con segno (h = h*31 + code, overflow a ogni passo).

    Itera sulle code unit UTF-16, così i bucket coincidono con quelli
    calcolati su stringhe JavaScript.
    """
    data = token.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = _to_int32(h * 31 + code_unit)
    return h


def create_simple_embedding(text: str) -> List[float]:
    """
    Embedding bag-of-hashed-words: ogni token incrementa il bucket abs(hash) % 50.

    Le collisioni si sommano. Il vettore è normalizzato L2; resta nullo se il
    testo non contiene token.
    """
    embedding = np.zeros(EMBEDDING_SIZE, dtype=float)

    for token in (text or "").lower().split():
        index = abs(token_hash(token)) % EMBEDDING_SIZE
        embedding[index] += 1

    return l2_normalize(embedding).tolist()


def parse_numeric_response(response: Any) -> List[float]:
    """Estrae tutti i letterali numerici da una risposta LLM (non fidata)."""
    if not isinstance(response, str):
        return []
    return [float(n) for n in NUMERIC_LITERAL_PATTERN.findall(response)]


class EmbeddingPolicy(str, Enum):
    HASH_ONLY = "hash_only"
    ORACLE_WITH_FALLBACK = "oracle_with_fallback"


class HashEmbedder:
    """Strategia locale, funzione pura del testo."""

    def embed(self, text: str) -> List[float]:
        return create_simple_embedding(text)


class OracleEmbedder:
    """
    Strategia assistita dall'LLM.

    Usa i numeri trovati nella risposta come vettore; se non ce ne sono,
    o se la chiamata solleva un'eccezione, ripiega sul fallback.
    Non propaga mai errori al chiamante.
    """

    def __init__(self, llm_service: Any, fallback: Optional[HashEmbedder] = None, verbose: bool = False):
        self.llm_service = llm_service
        self.fallback = fallback or HashEmbedder()
        self.verbose = verbose

    def embed(self, text: str) -> List[float]:
        try:
            response = self.llm_service.generate(EMBEDDING_PROMPT.format(text=text))
        except Exception as e:
            self._log(f"Errore generazione embedding, uso fallback: {e}")
            return self.fallback.embed(text)

        numbers = parse_numeric_response(response)
        if numbers:
            return numbers

        self._log(f"Nessun numero nella risposta ({truncate(str(response))}), uso fallback")
        return self.fallback.embed(text)

    def _log(self, message: str) -> None:
        print_with_prefix("[OracleEmbedder]", message, enabled=self.verbose)


class EmbeddingEngine:
    """
    Calcola embedding e similarità secondo la policy scelta dal chiamante.

    Con ORACLE_WITH_FALLBACK e senza llm_service esplicito usa l'LLMService
    di default condiviso dal processo (vedi get_default_llm_service).
    """

    def __init__(
        self,
        llm_service: Optional[Any] = None,
        policy: EmbeddingPolicy = EmbeddingPolicy.ORACLE_WITH_FALLBACK,
        verbose: bool = False
    ):
        self.policy = EmbeddingPolicy(policy)
        self.verbose = verbose

        self._llm_service = llm_service
        self._embedder = None

    @property
    def llm_service(self):
        if self._llm_service is None:
            self._llm_service = get_default_llm_service()
        return self._llm_service

    @property
    def embedder(self):
        if self._embedder is None:
            if self.policy == EmbeddingPolicy.HASH_ONLY:
                self._embedder = HashEmbedder()
            else:
                self._embedder = OracleEmbedder(self.llm_service, verbose=self.verbose)
        return self._embedder

    def generate_embedding(self, text: str) -> List[float]:
        return self.embedder.embed(text)

    def generate_embeddings(self, texts: Sequence[str]) -> List[List[float]]:
        """Un testo alla volta, nell'ordine dato."""
        return [self.generate_embedding(text) for text in texts]

    def find_most_similar(self, query_text: str, candidate_texts: Sequence[str]) -> SimilarityMatch:
        """
        Trova il candidato più simile alla query (similarità coseno).

        A parità vince il primo; index=-1 solo se non ci sono candidati.
        """
        query_embedding = self.generate_embedding(query_text)
        candidate_embeddings = self.generate_embeddings(candidate_texts)

        best_index = -1
        best_similarity = -1.0
        for index, embedding in enumerate(candidate_embeddings):
            similarity = cosine_similarity(query_embedding, embedding)
            if best_index == -1 or similarity > best_similarity:
                best_index = index
                best_similarity = similarity

        self._log(f"Most similar: index={best_index} similarity={best_similarity:.3f}")

        return SimilarityMatch(
            best_match=candidate_texts[best_index] if best_index >= 0 else None,
            similarity=best_similarity,
            index=best_index,
        )

    def _log(self, message: str) -> None:
        print_with_prefix("[EmbeddingEngine]", message, enabled=self.verbose)


# ═══════════════════════════════════════════════════════════════════════════
# FUNZIONI DI COMODO
# ═══════════════════════════════════════════════════════════════════════════

@lru_cache(maxsize=1)
def get_default_llm_service():
    """
    LLMService creato alla prima richiesta e poi riusato.

    Il costruttore verifica la disponibilità del backend con una chiamata
    di rete: ricrearlo a ogni embedding raddoppierebbe le chiamate.
    """
    from careerforge.services.llm_service import LLMService
    return LLMService(verbose=False)


def generate_embedding(
    text: str,
    llm_service: Optional[Any] = None,
    policy: EmbeddingPolicy = EmbeddingPolicy.ORACLE_WITH_FALLBACK
) -> List[float]:
    return EmbeddingEngine(llm_service=llm_service, policy=policy).generate_embedding(text)


def generate_embeddings(
    texts: Sequence[str],
    llm_service: Optional[Any] = None,
    policy: EmbeddingPolicy = EmbeddingPolicy.ORACLE_WITH_FALLBACK
) -> List[List[float]]:
    return EmbeddingEngine(llm_service=llm_service, policy=policy).generate_embeddings(texts)


def find_most_similar(
    query_text: str,
    candidate_texts: Sequence[str],
    llm_service: Optional[Any] = None,
    policy: EmbeddingPolicy = EmbeddingPolicy.ORACLE_WITH_FALLBACK
) -> SimilarityMatch:
    return EmbeddingEngine(llm_service=llm_service, policy=policy).find_most_similar(
        query_text, candidate_texts
    )
