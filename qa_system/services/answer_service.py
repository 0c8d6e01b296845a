import logging
from datetime import datetime
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from qa_system.core.config import settings
from qa_system.repositories.answer_repository import MatchClause, answer_repository
from qa_system.schemas.answer import (
    Answer, AnswerListResponse, AnswerSheet, AnswersData, QuestionAnswers, SubmitSurveyRequest
)
from qa_system.services.survey_service import survey_service as default_survey_service

logger = logging.getLogger("answer_service")

def build_match_clauses(sheet: AnswerSheet, tracked_question_ids: Iterable[int]) -> List[MatchClause]:
    """One (question_id, content) clause per answer to a tracked question.

    Content is compared verbatim, multi-select encoding included.
    """
    tracked = set(tracked_question_ids)
    return [
        (answer.question_id, answer.content)
        for answer in sheet.answers
        if answer.question_id in tracked
    ]

class AnswerService:
    def __init__(self, repository=None, survey_service=None):
        self.repository = repository if repository is not None else answer_repository
        self.survey_service = survey_service if survey_service is not None else default_survey_service

    async def save_answer_sheet(self, sheet: AnswerSheet, tracked_question_ids: Iterable[int]):
        """Store ``sheet``, superseding the live sheet that shares a tracked answer.

        Without tracked answers the sheet is inserted as is. Otherwise the
        unique sheet matching any tracked answer is demoted and ``sheet`` is
        inserted as the new unique one; with no match ``sheet`` is inserted as
        submitted. Store failures propagate as StoreError, no retry.
        """
        clauses = build_match_clauses(sheet, tracked_question_ids)
        if not clauses:
            await self.repository.insert_one(sheet)
            logger.info(f"Inserted answer sheet for survey {sheet.survey_id} (no tracked answers)")
            return

        async with self.repository.transaction(sheet.survey_id) as session:
            existing = await self.repository.find_unique_match(sheet.survey_id, clauses, session=session)
            if existing is None:
                await self.repository.insert_one(sheet, session=session)
                logger.info(f"No matching unique answer sheet for survey {sheet.survey_id}, inserted new one")
                return

            await self.repository.demote(existing["_id"], session=session)
            await self.repository.insert_one(sheet.model_copy(update={"unique": True}), session=session)
        logger.info(f"Superseded answer sheet {existing['_id']} of survey {sheet.survey_id}")

    async def submit_survey(
        self, db: Session, request: SubmitSurveyRequest, now: Optional[datetime] = None
    ) -> AnswerSheet:
        survey = self.survey_service.get_survey(db, request.id)
        questions = self.survey_service.validate_submission(db, survey, request.questions_list, now)

        now = now or datetime.now()
        sheet = AnswerSheet(
            survey_id=survey.id,
            time=now.strftime(settings.time_format),
            unique=True,
            answers=[
                Answer(
                    question_id=item.question_id,
                    serial_num=questions[item.question_id].serial_num,
                    subject=questions[item.question_id].subject,
                    content=item.answer,
                )
                for item in request.questions_list
            ],
        )
        tracked = {qid for qid, question in questions.items() if question.unique}
        await self.save_answer_sheet(sheet, tracked)
        return sheet

    async def get_survey_answers(
        self,
        db: Session,
        survey_id: int,
        page_num: int = 0,
        page_size: int = 0,
        text: str = "",
        unique: bool = False,
    ) -> AnswerListResponse:
        """Answer sheets of a survey laid out as one column per question."""
        survey = self.survey_service.get_survey(db, survey_id)
        questions = self.survey_service.surveys.get_questions_by_survey(db, survey.id)
        sheets, total = await self.repository.find_by_survey(
            survey_id, page_num, page_size, text, unique
        )

        columns = [
            QuestionAnswers(title=q.subject, question_type=q.question_type, answers=[])
            for q in questions
        ]
        times = []
        for sheet in sheets:
            contents = {answer.question_id: answer.content for answer in sheet.answers}
            for column, question in zip(columns, questions):
                column.answers.append(contents.get(question.id, ""))
            times.append(sheet.time)

        return AnswerListResponse(
            answers_data=AnswersData(question_answers=columns, time=times),
            total=total,
        )

    async def delete_survey_answers(self, db: Session, survey_id: int) -> int:
        self.survey_service.get_survey(db, survey_id)
        return await self.repository.delete_by_survey(survey_id)

answer_service = AnswerService()
