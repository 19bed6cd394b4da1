import argparse
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from careerforge.agents.job_matcher_agent import JobMatcherAgent
from careerforge.models.llm_response import JobMatch, Parsed, ParseResult
from careerforge.models.resume import JobPosting
from careerforge.services.embeddings import EmbeddingEngine, EmbeddingPolicy
from careerforge.services.llm_service import LLMService
from careerforge.services.scoring import calculate_ats_score, calculate_overall_match_score
from careerforge.services.text_extract import (
    build_job_data,
    build_resume_data,
    extract_text_from_file,
)


def _json_dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, indent=2)


def _read_input(value: str) -> str:
    """Se value è un file esistente ne legge il testo, altrimenti lo usa così com'è."""
    if os.path.isfile(value):
        return extract_text_from_file(value)
    return value


def _result_to_dict(result: ParseResult) -> Dict[str, Any]:
    if isinstance(result, Parsed):
        return {"parsed": True, "value": result.value}
    return {"parsed": False, "raw_output": result.raw_text}


def _job_match_to_dict(match: JobMatch) -> Dict[str, Any]:
    return {"job_title": match.job_title, "score": match.score, "match": _result_to_dict(match.result)}


def _build_llm_service(args: argparse.Namespace) -> LLMService:
    return LLMService(
        provider=args.llm_provider,
        model=args.model,
        temperature=args.temperature,
        timeout=args.timeout,
        verbose=args.verbose,
    )


# ═══════════════════════════════════════════════════════════════════════
# COMANDI
# ═══════════════════════════════════════════════════════════════════════

def _cmd_score(args: argparse.Namespace) -> Dict[str, Any]:
    resume_data = build_resume_data(_read_input(args.resume))
    job_data = build_job_data(_read_input(args.job))
    result = calculate_overall_match_score(resume_data, job_data)
    return {
        "resume": resume_data.model_dump(),
        "job": job_data.model_dump(),
        "result": result.model_dump(),
    }


def _cmd_ats(args: argparse.Namespace) -> Dict[str, Any]:
    return calculate_ats_score(_read_input(args.resume)).model_dump()


def _cmd_similar(args: argparse.Namespace) -> Dict[str, Any]:
    if args.use_llm:
        engine = EmbeddingEngine(
            llm_service=_build_llm_service(args),
            policy=EmbeddingPolicy.ORACLE_WITH_FALLBACK,
            verbose=args.verbose,
        )
    else:
        engine = EmbeddingEngine(policy=EmbeddingPolicy.HASH_ONLY, verbose=args.verbose)

    candidates = [_read_input(c) for c in args.candidates]
    return engine.find_most_similar(_read_input(args.query), candidates).model_dump()


def _cmd_match(args: argparse.Namespace) -> Dict[str, Any]:
    agent = JobMatcherAgent(llm_service=_build_llm_service(args), verbose=args.verbose)
    resume_text = _read_input(args.resume)

    jobs = [
        JobPosting(title=Path(j).stem if os.path.isfile(j) else None, description=_read_input(j))
        for j in args.jobs
    ]
    matches = agent.match_list(resume_text, jobs)
    return {"matches": [_job_match_to_dict(m) for m in matches], "total_jobs": len(jobs)}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="careerforge",
        description="Score lessicali, score ATS e similarità tra resume e job description.",
    )
    parser.add_argument("--verbose", action="store_true", help="Abilita log verbose.")
    parser.add_argument("--llm-provider", choices=["ollama", "lmstudio"], default=os.getenv("LLM_PROVIDER", "ollama"))
    parser.add_argument("--model", default=None, help="Modello LLM (default: env OLLAMA_MODEL o mistral).")
    parser.add_argument("--temperature", type=float, default=0.3)
    parser.add_argument("--timeout", type=int, default=120)

    subparsers = parser.add_subparsers(dest="command", required=True)

    score = subparsers.add_parser("score", help="Score complessivo resume vs job (nessun LLM).")
    score.add_argument("resume", help="File (PDF, TXT, MD) o testo del resume.")
    score.add_argument("job", help="File o testo della job description.")
    score.set_defaults(handler=_cmd_score)

    ats = subparsers.add_parser("ats", help="Score ATS e raccomandazioni per un resume.")
    ats.add_argument("resume", help="File o testo del resume.")
    ats.set_defaults(handler=_cmd_ats)

    similar = subparsers.add_parser("similar", help="Candidato più simile alla query (embedding).")
    similar.add_argument("query", help="File o testo della query.")
    similar.add_argument("candidates", nargs="*", help="File o testi candidati.")
    similar.add_argument("--use-llm", action="store_true", help="Chiede gli embedding all'LLM (fallback hash).")
    similar.set_defaults(handler=_cmd_similar)

    match = subparsers.add_parser("match", help="Matching LLM del resume con uno o più annunci.")
    match.add_argument("resume", help="File o testo del resume.")
    match.add_argument("jobs", nargs="+", help="File o testi delle job description.")
    match.set_defaults(handler=_cmd_match)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    output = args.handler(args)
    print(_json_dumps(output))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
