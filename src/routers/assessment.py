from functools import lru_cache
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from config.settings import settings
from services.assessment_engine.engine import AssessmentEngine
from services.assessment_engine.models import (
    MissingAnswerError,
    ScoringError,
    UnreachableModuleError,
)
from src.db.session import get_db
from src.schemas.assessment import (
    AssessmentSubmitRequest,
    AssessmentSubmitResponse,
    QuestionView,
    ScoreRequest,
    ScoreResponse,
)
from src.services import storage

router = APIRouter()
logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_assessment_engine() -> AssessmentEngine:
    return AssessmentEngine(
        question_bank_path=settings.question_bank_path,
        suggestions_path=settings.suggestions_path,
    )


def scoring_error_to_http(e: ScoringError) -> HTTPException:
    if isinstance(e, (MissingAnswerError, UnreachableModuleError)):
        return HTTPException(status_code=422, detail=str(e))
    # InvalidOptionIndexError, UnknownQuestionError
    return HTTPException(status_code=400, detail=str(e))


@router.get("/questions", response_model=List[QuestionView])
async def list_questions(engine: AssessmentEngine = Depends(get_assessment_engine)):
    return engine.get_questions()


@router.post("/assessments/score", response_model=ScoreResponse)
async def score_assessment(
    request: ScoreRequest,
    engine: AssessmentEngine = Depends(get_assessment_engine),
):
    """
    Scores an answer set and resolves suggestions without persisting anything.
    """
    try:
        result = engine.calculate(request.answers)
    except ScoringError as e:
        logger.error(f"Scoring rejected: {e}")
        raise scoring_error_to_http(e)

    return ScoreResponse(
        result=result,
        suggestions=engine.suggest(result),
        levels=engine.describe_levels(result),
    )


@router.post("/assessments", response_model=AssessmentSubmitResponse)
def submit_assessment(
    request: AssessmentSubmitRequest,
    engine: AssessmentEngine = Depends(get_assessment_engine),
    db: Session = Depends(get_db),
):
    """
    Scores the submitted answers on the server and stores the result for the
    registered user identified by phone.
    """
    try:
        result = engine.calculate(request.answers)
    except ScoringError as e:
        logger.error(f"Scoring rejected for submission: {e}")
        raise scoring_error_to_http(e)

    try:
        assessment = storage.store_assessment(db, request.user_info.phone, result, request.timestamp)
    except storage.UserNotFoundError as e:
        logger.warning(f"Assessment submitted for unregistered phone ending {request.user_info.phone[-4:]}")
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception(f"Unexpected error while storing assessment: {e}")
        raise HTTPException(status_code=500, detail="测评结果保存失败")

    return AssessmentSubmitResponse(
        id=assessment.id,
        message="测评结果保存成功",
        result=result,
        suggestions=engine.suggest(result),
    )
