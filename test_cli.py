"""
Test CLI (output JSON su stdout)
"""

import json

import careerforge.cli as cli
from conftest import FakeOracle
from test_text_extract import JOB_TEXT, RESUME_TEXT


def _run(capsys, argv):
    assert cli.main(argv) == 0
    return json.loads(capsys.readouterr().out)


def test_score_from_files(tmp_path, capsys):
    resume = tmp_path / "resume.txt"
    resume.write_text(RESUME_TEXT, encoding="utf-8")
    job = tmp_path / "job.md"
    job.write_text(JOB_TEXT, encoding="utf-8")

    output = _run(capsys, ["score", str(resume), str(job)])

    assert output["resume"]["skills"] == ["python", "aws", "docker"]
    assert output["job"]["required_skills"] == ["python", "aws", "kubernetes"]
    assert output["result"]["breakdown"]["education"] == 0.75


def test_ats_from_inline_text(capsys):
    output = _run(capsys, ["ats", "\tlorem\tipsum"])

    assert output["score"] == 0.0
    assert len(output["recommendations"]) == 8


def test_similar_hash_only(capsys):
    output = _run(capsys, ["similar", "python developer", "java", "python developer"])

    assert output["index"] == 1
    assert output["best_match"] == "python developer"


def test_similar_without_candidates(capsys):
    output = _run(capsys, ["similar", "python developer"])

    assert output == {"best_match": None, "similarity": -1.0, "index": -1}


def test_match_uses_llm(monkeypatch, capsys):
    oracle = FakeOracle({"Backend role": '{"score": 0.9}', "Frontend role": "no json"})
    monkeypatch.setattr(cli, "LLMService", lambda **kwargs: oracle)

    output = _run(capsys, ["match", RESUME_TEXT, "Frontend role", "Backend role"])

    assert output["total_jobs"] == 2
    assert [m["score"] for m in output["matches"]] == [0.9, 0.0]
    assert output["matches"][0]["match"] == {"parsed": True, "value": {"score": 0.9}}
    assert output["matches"][1]["match"] == {"parsed": False, "raw_output": "no json"}
