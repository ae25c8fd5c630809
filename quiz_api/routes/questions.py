"""Question bank endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from quiz_api.config import ALL_FILTER
from quiz_api.dependencies import get_question_store
from quiz_api.services.question_service import QuestionStore

router = APIRouter(prefix="/api", tags=["questions"])


@router.get("/questions")
def list_questions(
    store: Annotated[QuestionStore, Depends(get_question_store)],
    domain: str = ALL_FILTER,
    case_study: Annotated[str, Query(alias="caseStudy")] = ALL_FILTER,
    shuffle: bool = False,
) -> list[dict[str, object]]:
    """List questions matching the filters."""
    questions = store.fetch(domain=domain, case_study=case_study, shuffle=shuffle)
    return [q.model_dump(mode="json") for q in questions]


@router.get("/questions/domains")
def list_domains(
    store: Annotated[QuestionStore, Depends(get_question_store)],
) -> list[str]:
    """Distinct domain tags, for filter menus."""
    return store.domains()


@router.get("/case-studies")
def list_case_studies(
    store: Annotated[QuestionStore, Depends(get_question_store)],
) -> list[str]:
    """Case study refs used by questions."""
    return store.case_study_refs()


@router.get("/case-studies/{ref}")
def get_case_study(
    ref: str,
    store: Annotated[QuestionStore, Depends(get_question_store)],
) -> dict[str, str]:
    """Reference text for one case study."""
    try:
        return store.case_study(ref)
    except LookupError:
        raise HTTPException(status_code=404, detail="Case study not found")
