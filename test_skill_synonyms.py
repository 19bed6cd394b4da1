"""
Test Skill Synonym Table
"""

from careerforge.services.skill_synonyms import SkillSynonymTable, load_default_synonyms


def test_default_table_loaded_from_csv():
    table = load_default_synonyms()

    assert len(table) == 10
    assert "javascript" in table
    assert "k8s" in table
    assert "cobol" not in table


def test_default_table_is_cached():
    assert load_default_synonyms() is load_default_synonyms()


def test_expand_is_bidirectional():
    table = load_default_synonyms()

    assert table.expand("node.js") == {"nodejs", "node"}
    assert table.expand("nodejs") == {"node.js"}
    assert table.expand("JS") == {"javascript"}


def test_expand_shared_synonym():
    table = load_default_synonyms()

    # "ai" è sinonimo di entrambe le canoniche
    assert table.expand("ai") == {"machine learning", "artificial intelligence"}
    assert table.expand("machine learning") == {"ml", "ai", "artificial intelligence"}


def test_expand_unknown_skill():
    assert load_default_synonyms().expand("cobol") == set()


def test_variations_include_skill():
    table = SkillSynonymTable.from_mapping({"Python": ["py", " PY ", ""]})

    assert table.variations("python") == {"python", "py"}
    assert len(table) == 1


def test_from_csv(tmp_path):
    csv_path = tmp_path / "synonyms.csv"
    csv_path.write_text('skill,synonyms\ngo,"golang"\nrust,\n', encoding="utf-8")

    table = SkillSynonymTable.from_csv(csv_path)

    assert table.expand("golang") == {"go"}
    assert table.expand("rust") == set()
    assert len(table) == 2
