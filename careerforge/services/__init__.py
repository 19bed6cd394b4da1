# services package
"""Scoring, embedding and LLM services."""

from careerforge.services.llm_service import LLMService, OllamaNotAvailableError, parse_json_response
from careerforge.services.skill_synonyms import SkillSynonymTable, load_default_synonyms
from careerforge.services.scoring import (
    ScoringInputError,
    calculate_skill_match_score,
    calculate_experience_score,
    calculate_education_score,
    calculate_overall_match_score,
    calculate_keyword_density_score,
    calculate_ats_score,
)
from careerforge.services.embeddings import (
    EmbeddingPolicy,
    EmbeddingEngine,
    HashEmbedder,
    OracleEmbedder,
    create_simple_embedding,
    generate_embedding,
    generate_embeddings,
    find_most_similar,
)
from careerforge.services.vector_math import cosine_similarity, round_score

__all__ = [
    "LLMService",
    "OllamaNotAvailableError",
    "parse_json_response",
    "SkillSynonymTable",
    "load_default_synonyms",
    "ScoringInputError",
    "calculate_skill_match_score",
    "calculate_experience_score",
    "calculate_education_score",
    "calculate_overall_match_score",
    "calculate_keyword_density_score",
    "calculate_ats_score",
    "EmbeddingPolicy",
    "EmbeddingEngine",
    "HashEmbedder",
    "OracleEmbedder",
    "create_simple_embedding",
    "generate_embedding",
    "generate_embeddings",
    "find_most_similar",
    "cosine_similarity",
    "round_score",
]
