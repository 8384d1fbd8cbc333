"""Console tool that clarifies a feature request and then assesses its complexity.

Phase 1 asks the LLM for clarifying questions and collects answers from the
terminal; phase 2 prints a JSON complexity report for the clarified text. Run
with:

    python -m contextcoach.cli feature.txt

Pass ``--answers path/to/answers.json`` (a JSON list of strings) to answer the
clarifying questions without prompting.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, TextIO

from .analysis import ComplexityAnalyzer, ComplexityReport, FeatureClarifier
from .analysis.clarifier import AskHuman
from .config import configure_logging, get_settings
from .llm import get_default_client
from .search import get_default_search


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Clarify a feature request and estimate its implementation complexity."
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        default=None,
        help="File holding the feature description. If omitted, read it from the terminal.",
    )
    parser.add_argument(
        "--answers",
        type=Path,
        default=None,
        help=(
            "Optional JSON list of answers to the clarifying questions, used in order. "
            "If omitted, each question is asked interactively."
        ),
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    description = _read_description(args.file, sys.stdin)
    if not description.strip():
        raise SystemExit("Feature description cannot be empty.")
    ask_human = _scripted_answers(_load_answers(args.answers)) if args.answers else _ask_terminal

    llm = get_default_client(settings)
    search = get_default_search(settings)
    clarifier = FeatureClarifier(search_client=search, llm=llm)
    analyzer = ComplexityAnalyzer(search_client=search, llm=llm)

    print("\n=== Phase 1: Feature Clarification ===")
    clarified = clarifier.clarify(description, ask_human)
    print("\n--- Clarified Feature Description ---")
    print(clarified)

    print("\n=== Phase 2: Complexity Analysis ===")
    report = analyzer.analyze(clarified)
    _print_report(report)


def _read_description(path: Optional[Path], stream: TextIO) -> str:
    if path is not None:
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise SystemExit(f"Unable to read feature description: {exc}") from exc
    print("Enter the feature description (finish with an empty line):")
    lines: List[str] = []
    for line in stream:
        line = line.rstrip("\r\n")
        if not line:
            break
        lines.append(line)
    return "\n".join(lines).strip()


def _load_answers(path: Path) -> List[str]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SystemExit(f"Unable to read scripted answers: {exc}") from exc
    if not isinstance(payload, list):
        raise SystemExit("Answers file must contain a JSON list of strings.")
    return [str(item) for item in payload]


def _scripted_answers(answers: Sequence[str]) -> AskHuman:
    remaining: Iterator[str] = iter(answers)

    def ask(question: str) -> str:
        _print_question(question)
        answer = next(remaining, "")
        print(f"Your answer: {answer}")
        return answer

    return ask


def _ask_terminal(question: str) -> str:
    _print_question(question)
    try:
        return input("Your answer: ")
    except EOFError:
        return ""


def _print_question(question: str) -> None:
    print("\n>> LLM identifies an ambiguity:")
    print(question)


def _print_report(report: ComplexityReport) -> None:
    print("\n=== Feature Complexity Analysis Report ===")
    print(json.dumps(report.as_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
