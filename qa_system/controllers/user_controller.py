import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from qa_system.core.database import get_db
from qa_system.core.exceptions import QASystemError, StoreError
from qa_system.controllers.dependencies import get_answer_service, get_statistics_service
from qa_system.schemas.answer import SubmitSurveyRequest
from qa_system.utils.response import http_error, success_response

logger = logging.getLogger("user_controller")

router = APIRouter(prefix="/user", tags=["user"])

@router.post("/submit")
async def submit_survey(
    request: SubmitSurveyRequest,
    db: Session = Depends(get_db),
    service=Depends(get_answer_service),
):
    """Submit one answer sheet"""
    try:
        await service.submit_survey(db, request)
        return success_response(message="Submitted")
    except StoreError as e:
        logger.error(f"Submitting survey {request.id} failed: {e}")
        raise http_error(e)
    except QASystemError as e:
        raise http_error(e)

@router.get("/statistics")
async def get_survey_statistics(
    id: int = Query(..., description="Survey ID"),
    db: Session = Depends(get_db),
    service=Depends(get_statistics_service),
):
    """Vote counts and ranks per option"""
    try:
        statistics = await service.get_survey_statistics(db, id)
        return success_response(data={"statistics": statistics})
    except StoreError as e:
        logger.error(f"Statistics of survey {id} failed: {e}")
        raise http_error(e)
    except QASystemError as e:
        raise http_error(e)
