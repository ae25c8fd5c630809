"""Answer evaluation: exact-match correctness per question variant."""
from collections.abc import Callable, Mapping

from quiz_api.models.questions import (
    AreaQuestion,
    ChoiceQuestion,
    FillQuestion,
    MatchingQuestion,
    Question,
)

# Selected ids (choice, hotspot) or id -> id mapping (drag-and-drop, dropdown)
Submission = Mapping[str, str] | list[str] | tuple[str, ...] | set[str] | frozenset[str]


def is_id_selection(submission: object) -> bool:
    return isinstance(submission, (list, tuple, set, frozenset)) and all(
        isinstance(item, str) for item in submission
    )


def is_id_mapping(submission: object) -> bool:
    return isinstance(submission, Mapping)


def _evaluate_choice(question: ChoiceQuestion, submission: Submission) -> bool:
    if not is_id_selection(submission):
        return False
    return set(submission) == set(question.correctOptionIds)


def _evaluate_matching(question: MatchingQuestion, submission: Submission) -> bool:
    if not is_id_mapping(submission):
        return False
    if len(submission) != len(question.items):
        return False
    return all(
        submission.get(item.id) == question.correctMapping[item.id]
        for item in question.items
    )


def _evaluate_area(question: AreaQuestion, submission: Submission) -> bool:
    if not is_id_selection(submission):
        return False
    return set(submission) == set(question.correctAreaIds)


def _evaluate_fill(question: FillQuestion, submission: Submission) -> bool:
    if not is_id_mapping(submission):
        return False
    return all(
        submission.get(menu.id) == question.correctMapping[menu.id]
        for menu in question.menus
    )


_EVALUATORS: dict[type, Callable[[Question, Submission], bool]] = {
    ChoiceQuestion: _evaluate_choice,
    MatchingQuestion: _evaluate_matching,
    AreaQuestion: _evaluate_area,
    FillQuestion: _evaluate_fill,
}


def evaluate(question: Question, submission: Submission) -> bool:
    """
    Return whether ``submission`` answers ``question`` exactly.

    No partial credit. A submission of the wrong shape for the variant
    (a mapping for a choice question, say) is incorrect.
    """
    evaluator = _EVALUATORS.get(type(question))
    if evaluator is None:
        raise TypeError(f"Unsupported question type: {type(question).__name__}")
    return evaluator(question, submission)


def accepts_mapping(question: Question) -> bool:
    """Whether the variant is answered with an id -> id mapping."""
    return isinstance(question, (MatchingQuestion, FillQuestion))
