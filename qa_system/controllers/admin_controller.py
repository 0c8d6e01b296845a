import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from qa_system.core.database import get_db
from qa_system.core.exceptions import QASystemError, StoreError
from qa_system.controllers.dependencies import get_answer_service
from qa_system.utils.response import http_error, success_response

logger = logging.getLogger("admin_controller")

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/answers")
async def get_survey_answers(
    id: int = Query(..., description="Survey ID"),
    page_num: int = Query(0, ge=0),
    page_size: int = Query(0, ge=0),
    text: str = Query("", description="Case-insensitive substring of any answer"),
    unique: bool = Query(False, description="Only the live sheet of each tracked answer"),
    db: Session = Depends(get_db),
    service=Depends(get_answer_service),
):
    try:
        data = await service.get_survey_answers(db, id, page_num, page_size, text, unique)
        return success_response(data=data)
    except StoreError as e:
        logger.error(f"Listing answers of survey {id} failed: {e}")
        raise http_error(e)
    except QASystemError as e:
        raise http_error(e)

@router.delete("/answers")
async def delete_survey_answers(
    id: int = Query(..., description="Survey ID"),
    db: Session = Depends(get_db),
    service=Depends(get_answer_service),
):
    try:
        deleted = await service.delete_survey_answers(db, id)
        return success_response(data={"deleted": deleted})
    except StoreError as e:
        logger.error(f"Deleting answers of survey {id} failed: {e}")
        raise http_error(e)
    except QASystemError as e:
        raise http_error(e)
