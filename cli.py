import argparse
import sys
from collections import Counter
from pathlib import Path

from quiz_api.config import (
    CASE_STUDIES_PATH,
    PROGRESS_DIR,
    PROGRESS_STORAGE_KEY,
    QUESTIONS_PATH,
)
from quiz_api.errors import LoadError
from quiz_api.logging_setup import setup_console_logging
from quiz_api.services.progress_service import ProgressStore
from quiz_api.services.question_service import LocalQuestionSource
from quiz_api.utils import epoch_ms_to_iso


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Exam prep question bank tools")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Validate a question bank JSON file")
    check.add_argument(
        "file",
        type=Path,
        nargs="?",
        default=QUESTIONS_PATH,
        help="Path to questions.json",
    )

    for name, help_text in (
        ("progress", "Show saved progress"),
        ("reset", "Delete saved progress"),
    ):
        command = sub.add_parser(name, help=help_text)
        command.add_argument(
            "--dir",
            type=Path,
            default=PROGRESS_DIR,
            help="Progress directory",
        )
    return parser.parse_args(argv)


def check_bank(path: Path) -> int:
    source = LocalQuestionSource(path, CASE_STUDIES_PATH)
    try:
        questions = source.load_questions()
    except LoadError as e:
        print(f"Invalid question bank: {e}", file=sys.stderr)
        return 1

    by_type = Counter(q.type for q in questions)
    by_domain = Counter(q.domain or "(none)" for q in questions)
    print(f"{path}: {len(questions)} questions")
    for name, count in sorted(by_type.items()):
        print(f"  {name:<16} {count}")
    print("Domains:")
    for name, count in sorted(by_domain.items()):
        print(f"  {name:<16} {count}")
    return 0


def show_progress(directory: Path) -> int:
    snapshot = ProgressStore(directory, PROGRESS_STORAGE_KEY).load()
    if snapshot is None:
        print("No saved progress")
        return 0
    answers = list(snapshot.answers.values())
    correct = sum(1 for a in answers if a.isCorrect)
    print(f"Answered: {len(answers)}  correct: {correct}  score: {snapshot.score}")
    print(f"Bookmarked: {len(snapshot.bookmarkedQuestionIds)}")
    if answers:
        last = max(answers, key=lambda a: a.timestamp)
        print(f"Last answer: question {last.questionId} at {epoch_ms_to_iso(last.timestamp)}")
    return 0


def reset_progress(directory: Path) -> int:
    if not ProgressStore(directory, PROGRESS_STORAGE_KEY).clear():
        return 1
    print("Progress cleared")
    return 0


def main(argv: list[str] | None = None) -> int:
    setup_console_logging()
    args = parse_args(argv)
    if args.command == "check":
        return check_bank(args.file)
    if args.command == "progress":
        return show_progress(args.dir)
    return reset_progress(args.dir)


if __name__ == "__main__":
    sys.exit(main())
