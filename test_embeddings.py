"""
Test Fallback Embedding Engine
"""

import math

import pytest

from careerforge.services.embeddings import (
    EMBEDDING_SIZE,
    EmbeddingEngine,
    EmbeddingPolicy,
    HashEmbedder,
    OracleEmbedder,
    create_simple_embedding,
    find_most_similar,
    generate_embedding,
    generate_embeddings,
    get_default_llm_service,
    parse_numeric_response,
    token_hash,
)
from careerforge.services.vector_math import cosine_similarity


def _norm(vector):
    return math.sqrt(sum(v * v for v in vector))


# ═══════════════════════════════════════════════════════════════════════════
# HASH
# ═══════════════════════════════════════════════════════════════════════════

def test_token_hash_known_values():
    assert token_hash("a") == 97
    assert token_hash("ab") == 97 * 31 + 98
    assert token_hash("hello") == 99162322


def test_token_hash_wraps_to_signed_32_bit():
    assert token_hash("polygenelubricants") == -2147483648


def test_token_hash_uses_utf16_code_units():
    # U+1F600 -> surrogate pair D83D DE00
    assert token_hash("\U0001F600") == 0xD83D * 31 + 0xDE00


def test_simple_embedding_shape_and_norm():
    embedding = create_simple_embedding("Senior Python developer with AWS experience")

    assert len(embedding) == EMBEDDING_SIZE
    assert _norm(embedding) == pytest.approx(1.0)


def test_simple_embedding_is_deterministic():
    text = "Machine learning engineer"
    assert create_simple_embedding(text) == create_simple_embedding(text)
    assert create_simple_embedding(text) == create_simple_embedding(text.upper())


def test_simple_embedding_buckets():
    embedding = create_simple_embedding("a")
    assert embedding[47] == pytest.approx(1.0)
    assert sum(embedding) == pytest.approx(1.0)

    embedding = create_simple_embedding("a a b")
    assert embedding[47] == pytest.approx(2 / math.sqrt(5))
    assert embedding[48] == pytest.approx(1 / math.sqrt(5))


def test_simple_embedding_collisions_accumulate():
    # "b" -> 98 % 50 = 48, abs(-2147483648) % 50 = 48
    embedding = create_simple_embedding("b polygenelubricants")

    assert embedding[48] == pytest.approx(1.0)
    assert _norm(embedding) == pytest.approx(1.0)


def test_simple_embedding_empty_text_is_zero_vector():
    for text in ["", "   ", None]:
        embedding = create_simple_embedding(text)
        assert embedding == [0.0] * EMBEDDING_SIZE


# ═══════════════════════════════════════════════════════════════════════════
# COSINE
# ═══════════════════════════════════════════════════════════════════════════

def test_cosine_similarity():
    vector = create_simple_embedding("python developer")

    assert cosine_similarity(vector, vector) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)


def test_cosine_similarity_degenerate_inputs():
    assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
    assert cosine_similarity([], []) == 0.0


# ═══════════════════════════════════════════════════════════════════════════
# ORACOLO
# ═══════════════════════════════════════════════════════════════════════════

def test_parse_numeric_response():
    assert parse_numeric_response("[0.1, -0.2, 3]") == [0.1, -0.2, 3.0]
    assert parse_numeric_response("Here you go: 1. and 2.5") == [1.0, 2.5]
    assert parse_numeric_response("no numbers") == []
    assert parse_numeric_response(None) == []


def test_oracle_embedding_uses_numbers(fake_oracle):
    oracle = fake_oracle("[0.1, -0.2, 3]")

    embedding = generate_embedding("python developer", llm_service=oracle)

    assert embedding == [0.1, -0.2, 3.0]
    assert '"python developer"' in oracle.prompts[0]


def test_oracle_embedding_falls_back_on_error(fake_oracle):
    oracle = fake_oracle(RuntimeError("LLM down"))

    embedding = generate_embedding("python developer", llm_service=oracle)

    assert embedding == create_simple_embedding("python developer")


def test_oracle_embedding_falls_back_without_numbers(fake_oracle):
    oracle = fake_oracle("I cannot produce embeddings.")

    embedding = OracleEmbedder(oracle).embed("python developer")

    assert embedding == create_simple_embedding("python developer")


def test_oracle_embedding_falls_back_on_non_string(fake_oracle):
    oracle = fake_oracle(default=None)

    assert OracleEmbedder(oracle).embed("data analyst") == create_simple_embedding("data analyst")


def test_hash_only_policy_never_calls_oracle(fake_oracle):
    oracle = fake_oracle("[1, 2, 3]")
    engine = EmbeddingEngine(llm_service=oracle, policy=EmbeddingPolicy.HASH_ONLY)

    assert engine.generate_embedding("python") == HashEmbedder().embed("python")
    assert oracle.prompts == []


def test_generate_embeddings_is_sequential(fake_oracle):
    oracle = fake_oracle({"first": "[1, 0]", "second": "[0, 1]", "third": "[1, 1]"})

    embeddings = generate_embeddings(["first", "second", "third"], llm_service=oracle)

    assert embeddings == [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]]
    assert ['"first"' in p for p in oracle.prompts] == [True, False, False]
    assert '"third"' in oracle.prompts[2]


# ═══════════════════════════════════════════════════════════════════════════
# MOST SIMILAR
# ═══════════════════════════════════════════════════════════════════════════

def test_find_most_similar(fake_oracle):
    oracle = fake_oracle({
        "query": "[1, 0]",
        "far": "[0, 1]",
        "near": "[1, 0.1]",
        "near twin": "[1, 0.1]",
    })

    result = find_most_similar("query", ["far", "near", "near twin"], llm_service=oracle)

    assert result.index == 1
    assert result.best_match == "near"
    assert result.similarity == pytest.approx(1 / math.sqrt(1.01))


def test_find_most_similar_tie_keeps_first():
    result = find_most_similar(
        "python developer",
        ["python developer", "python developer"],
        policy=EmbeddingPolicy.HASH_ONLY,
    )

    assert result.index == 0
    assert result.similarity == pytest.approx(1.0)


def test_find_most_similar_empty_candidates():
    result = find_most_similar("python developer", [], policy=EmbeddingPolicy.HASH_ONLY)

    assert result.best_match is None
    assert result.similarity == -1.0
    assert result.index == -1


def test_find_most_similar_zero_vectors_still_pick_first():
    result = find_most_similar("", ["", ""], policy=EmbeddingPolicy.HASH_ONLY)

    assert result.index == 0
    assert result.similarity == 0.0


# ═══════════════════════════════════════════════════════════════════════════
# LLM DI DEFAULT
# ═══════════════════════════════════════════════════════════════════════════

def test_default_llm_service_is_built_once(monkeypatch, fake_oracle):
    import careerforge.services.llm_service as llm_module

    created = []

    def build(**kwargs):
        created.append(kwargs)
        return fake_oracle("[0.5, 0.5]")

    monkeypatch.setattr(llm_module, "LLMService", build)
    get_default_llm_service.cache_clear()
    try:
        assert generate_embedding("python") == [0.5, 0.5]
        assert generate_embeddings(["go", "rust"]) == [[0.5, 0.5], [0.5, 0.5]]
        find_most_similar("python", ["go"])
        assert len(created) == 1
    finally:
        get_default_llm_service.cache_clear()


def test_hash_only_never_builds_default_llm_service(monkeypatch):
    import careerforge.services.llm_service as llm_module

    def build(**kwargs):
        raise AssertionError("LLMService non deve essere creato")

    monkeypatch.setattr(llm_module, "LLMService", build)
    get_default_llm_service.cache_clear()
    try:
        assert generate_embedding("python", policy=EmbeddingPolicy.HASH_ONLY) == create_simple_embedding("python")
    finally:
        get_default_llm_service.cache_clear()
