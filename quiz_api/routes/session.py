"""Quiz session endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from quiz_api.dependencies import get_session_controller, session_lock
from quiz_api.models import AnswerSubmission, QuestionFilter, SessionStartRequest
from quiz_api.services.session_service import SessionController

router = APIRouter(prefix="/api/session", tags=["session"])

Controller = Annotated[SessionController, Depends(get_session_controller)]


@router.post("/start")
def start_session(payload: SessionStartRequest, controller: Controller) -> dict[str, object]:
    """Load questions for the filters and resume saved progress."""
    filters = QuestionFilter(
        domain=payload.domain,
        caseStudy=payload.caseStudy,
        shuffle=payload.shuffle,
    )
    with session_lock:
        controller.load(filters, bookmarked_only=payload.bookmarkedOnly)
        return controller.view()


@router.get("")
def get_session(controller: Controller) -> dict[str, object]:
    """Current session view; loads with default filters on first call."""
    with session_lock:
        if not controller.loaded:
            controller.load()
        return controller.view()


@router.post("/answer")
def submit_answer(payload: AnswerSubmission, controller: Controller) -> dict[str, object]:
    """Evaluate and record the answer for the current question."""
    with session_lock:
        record = controller.submit(payload.selection)
        view = controller.view()
    return {"answer": record.model_dump(mode="json"), "session": view}


@router.post("/next")
def next_question(controller: Controller) -> dict[str, object]:
    with session_lock:
        controller.advance()
        return controller.view()


@router.post("/previous")
def previous_question(controller: Controller) -> dict[str, object]:
    with session_lock:
        controller.retreat()
        return controller.view()


@router.post("/review")
def review_again(controller: Controller) -> dict[str, object]:
    """Go back to the first question after finishing, keeping answers."""
    with session_lock:
        controller.review_again()
        return controller.view()


@router.post("/reset")
def reset_session(controller: Controller) -> dict[str, object]:
    """Clear answers and bookmarks."""
    with session_lock:
        controller.reset()
        return controller.view()


@router.post("/bookmarks/{question_id}")
def toggle_bookmark(question_id: int, controller: Controller) -> dict[str, object]:
    with session_lock:
        try:
            bookmarked = controller.toggle_bookmark(question_id)
        except LookupError:
            raise HTTPException(status_code=404, detail="Question not found")
        return {"questionId": question_id, "isBookmarked": bookmarked, "session": controller.view()}
