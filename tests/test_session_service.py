import pytest

from quiz_api.errors import (
    EmptyResultError,
    InvalidSelectionError,
    LoadError,
    SessionStateError,
)
from quiz_api.models import AnswerRecord, ProgressSnapshot, QuestionFilter
from quiz_api.services.progress_service import ProgressStore
from quiz_api.services.question_service import LocalQuestionSource, QuestionStore
from quiz_api.services.session_service import (
    STATUS_ANSWERING,
    STATUS_COMPLETE,
    STATUS_EMPTY,
    SessionController,
)


@pytest.fixture
def three_choice_controller(write_bank, make_choice, progress_store) -> SessionController:
    path = write_bank([make_choice(1, ["a"]), make_choice(2, ["b"]), make_choice(3, ["c"])])
    return SessionController(QuestionStore(LocalQuestionSource(path)), progress_store)


def _record(question_id: int, correct: bool) -> AnswerRecord:
    return AnswerRecord(
        questionId=question_id,
        selectedOptionIds=["a"],
        isCorrect=correct,
        timestamp=1700000000000,
    )


def test_fresh_session_starts_empty_at_zero(controller: SessionController) -> None:
    controller.load()
    assert controller.progress_store.load() is None
    assert controller.state.position == 0
    assert controller.state.answers == {}
    assert controller.status == STATUS_ANSWERING


def test_all_correct_run_completes_with_full_score(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()

    for option in ("a", "b", "c"):
        record = session.submit([option])
        assert record.isCorrect
        session.advance()

    assert session.status == STATUS_COMPLETE
    assert session.score() == 30
    assert session.percentage() == 100


def test_submit_does_not_advance(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    session.submit(["b"])
    assert session.state.position == 0
    assert session.answer_for(1).isCorrect is False


def test_answered_question_is_locked(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    session.submit(["b"])

    with pytest.raises(SessionStateError):
        session.submit(["a"])
    assert len(session.state.answers) == 1
    assert session.answer_for(1).isCorrect is False


def test_review_does_not_unlock_answers(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    session.submit(["b"])
    for _ in range(3):
        session.advance()
    session.review_again()

    with pytest.raises(SessionStateError):
        session.submit(["a"])
    assert session.answer_for(1).isCorrect is False
    assert session.score() == 0
    assert session.progress_store.load().answers[1].isCorrect is False


def test_score_is_derived_and_idempotent(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    session.submit(["a"])
    assert session.score() == session.score() == 10

    session.advance()
    session.submit(["b"])
    assert session.score() == 20


def test_retreat_stops_at_first_question(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    session.retreat()
    assert session.state.position == 0
    session.advance()
    session.retreat()
    assert session.state.position == 0


def test_complete_session_rejects_answering(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    for _ in range(3):
        session.advance()

    with pytest.raises(SessionStateError):
        session.submit(["a"])
    with pytest.raises(SessionStateError):
        session.advance()


def test_review_again_keeps_answers(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    session.submit(["a"])
    for _ in range(3):
        session.advance()

    session.review_again()

    assert session.status == STATUS_ANSWERING
    assert session.state.position == 0
    assert session.answer_for(1) is not None


def test_review_again_requires_complete(three_choice_controller) -> None:
    three_choice_controller.load()
    with pytest.raises(SessionStateError):
        three_choice_controller.review_again()


def test_reset_clears_everything(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    session.submit(["a"])
    session.toggle_bookmark(2)
    session.advance()

    session.reset()

    assert session.state.answers == {}
    assert session.state.bookmarks == set()
    assert session.state.position == 0
    assert session.status == STATUS_ANSWERING
    assert session.progress_store.load() is None


def test_reset_from_complete_starts_over(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    session.submit(["a"])
    for _ in range(3):
        session.advance()
    assert session.status == STATUS_COMPLETE

    session.reset()

    assert session.status == STATUS_ANSWERING
    assert session.state.position == 0
    assert session.score() == 0
    assert session.submit(["a"]).isCorrect


def test_every_mutation_is_persisted(three_choice_controller) -> None:
    session = three_choice_controller
    session.load()
    session.submit(["a"])
    session.toggle_bookmark(3)

    saved = session.progress_store.load()
    assert set(saved.answers) == {1}
    assert saved.bookmarkedQuestionIds == [3]
    assert saved.score == 10


def test_toggle_bookmark(controller: SessionController) -> None:
    controller.load()
    assert controller.toggle_bookmark(4) is True
    assert controller.toggle_bookmark(4) is False
    with pytest.raises(LookupError):
        controller.toggle_bookmark(99)


def test_toggle_bookmark_outside_current_filter(controller: SessionController) -> None:
    controller.load(QuestionFilter(domain="Prepare"))
    assert [q.id for q in controller.questions] == [2, 5]

    assert controller.toggle_bookmark(1) is True
    assert controller.progress_store.load().bookmarkedQuestionIds == [1]

    controller.load()
    assert controller.view()["isBookmarked"] is True


def test_resume_starts_at_first_unanswered(controller: SessionController) -> None:
    controller.progress_store.save(
        ProgressSnapshot(answers={1: _record(1, True), 2: _record(2, False)})
    )
    controller.load()
    assert controller.state.position == 2
    assert controller.score() == 10


def test_resume_all_answered_is_complete(three_choice_controller) -> None:
    session = three_choice_controller
    session.progress_store.save(
        ProgressSnapshot(answers={i: _record(i, True) for i in (1, 2, 3)}, isReviewMode=False)
    )
    session.load()
    assert session.status == STATUS_COMPLETE
    assert session.percentage() == 100


def test_completion_depends_on_loaded_filter(controller: SessionController) -> None:
    controller.progress_store.save(ProgressSnapshot(answers={1: _record(1, True)}))
    controller.load(QuestionFilter(domain="Maintain"))
    assert controller.status == STATUS_COMPLETE

    controller.load(QuestionFilter(domain="All"))
    assert controller.status == STATUS_ANSWERING
    assert controller.state.position == 1


def test_score_follows_filter_changes(controller: SessionController) -> None:
    controller.load()
    controller.submit(["a"])  # question 1, Maintain
    assert controller.score() == 10

    controller.load(QuestionFilter(domain="Prepare"))
    assert controller.score() == 0
    assert controller.max_score() == 20


def test_bookmarked_only_view(controller: SessionController) -> None:
    controller.load()
    controller.toggle_bookmark(3)
    controller.toggle_bookmark(5)

    controller.load(bookmarked_only=True)
    assert [q.id for q in controller.questions] == [3, 5]
    assert controller.state.position == 0

    controller.reset()
    assert controller.bookmarked_only is False
    assert len(controller.questions) == 5


def test_empty_filter_result(controller: SessionController) -> None:
    controller.load(QuestionFilter(domain="Nothing"))
    assert controller.status == STATUS_EMPTY
    assert controller.view()["question"] is None
    with pytest.raises(EmptyResultError):
        controller.submit(["a"])


def test_failed_load_keeps_previous_state(controller: SessionController, tmp_path) -> None:
    controller.load()
    controller.submit(["a"])
    controller.question_store.local.questions_path = tmp_path / "gone.json"

    with pytest.raises(LoadError):
        controller.load()
    assert len(controller.questions) == 5
    assert controller.answer_for(1) is not None


def test_selection_shape_is_checked(controller: SessionController) -> None:
    controller.load()
    with pytest.raises(InvalidSelectionError):
        controller.submit({"a": "b"})


def test_mapping_answers_are_recorded(controller: SessionController) -> None:
    controller.load()
    controller.advance()
    controller.advance()
    record = controller.submit({"import": "cache", "dq": "source", "dl": "delta"})
    assert record.isCorrect
    assert record.dragDropMapping == {"import": "cache", "dq": "source", "dl": "delta"}

    controller.advance()
    record = controller.submit(["l2"])
    assert record.selectedAreaIds == ["l2"]


def test_unwritable_progress_keeps_session_in_memory(three_choice_controller, tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    session = three_choice_controller
    session.progress_store = ProgressStore(blocker / "progress", "key")

    session.load()
    session.submit(["a"])
    assert session.score() == 10


def test_view_shape(controller: SessionController) -> None:
    controller.load()
    controller.toggle_bookmark(1)
    view = controller.view()
    assert view["status"] == STATUS_ANSWERING
    assert view["total"] == 5
    assert view["question"]["id"] == 1
    assert view["isBookmarked"] is True
    assert view["maxScore"] == 50
