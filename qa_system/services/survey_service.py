from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from qa_system.core.exceptions import (
    DuplicateAnswerError, NotFoundError, OptionCountError, QuestionCountMismatchError, RequiredAnswerError,
    SurveyNotOpenError, SurveyTimeError, ValidationError
)
from qa_system.models.survey import (
    SURVEY_STATUS_OPEN, SURVEY_TYPE_RESEARCH, SURVEY_TYPE_VOTE, Question, Survey
)
from qa_system.repositories.survey_repository import survey_repository
from qa_system.schemas.answer import QuestionAnswerRequest, split_selections

def is_multi_select(survey: Survey, question: Question) -> bool:
    # Type 2 is multi-select in research surveys, type 1 in vote surveys
    return (
        (survey.survey_type == SURVEY_TYPE_RESEARCH and question.question_type == 2)
        or (survey.survey_type == SURVEY_TYPE_VOTE and question.question_type == 1)
    )

def is_counted_question(survey: Survey, question: Question) -> bool:
    """Only the vote questions of a vote survey are tallied."""
    return survey.survey_type == SURVEY_TYPE_VOTE and question.question_type == 1

class SurveyService:
    def __init__(self, surveys=None):
        self.surveys = surveys if surveys is not None else survey_repository

    def get_survey(self, db: Session, survey_id: int) -> Survey:
        survey = self.surveys.get_survey(db, survey_id)
        if not survey:
            raise NotFoundError(f"Survey {survey_id} not found")
        return survey

    def check_open(self, survey: Survey, now: Optional[datetime] = None):
        now = now or datetime.now()
        if survey.deadline and survey.deadline < now:
            raise SurveyTimeError("The survey deadline has passed")
        if survey.start_time and survey.start_time > now:
            raise SurveyTimeError("The survey has not started yet")
        if survey.status != SURVEY_STATUS_OPEN:
            raise SurveyNotOpenError(f"Survey {survey.id} is not open")

    def validate_submission(
        self,
        db: Session,
        survey: Survey,
        answers: List[QuestionAnswerRequest],
        now: Optional[datetime] = None,
    ) -> Dict[int, Question]:
        """Reject a malformed submission; returns the answered questions by id."""
        questions = self.surveys.get_questions_by_survey(db, survey.id)
        if len(questions) != len(answers):
            raise QuestionCountMismatchError(
                f"Survey has {len(questions)} questions but {len(answers)} answers were submitted"
            )
        self.check_open(survey, now)

        by_id = {q.id: q for q in questions}
        seen = set()
        for item in answers:
            if item.question_id in seen:
                raise DuplicateAnswerError(f"Question {item.question_id} is answered more than once")
            seen.add(item.question_id)
            question = by_id.get(item.question_id)
            if question is None:
                if self.surveys.get_question(db, item.question_id) is None:
                    raise NotFoundError(f"Question {item.question_id} not found")
                raise ValidationError(
                    f"Question {item.question_id} does not belong to survey {survey.id}"
                )
            if question.required and item.answer == "":
                raise RequiredAnswerError(f"Question {question.serial_num} is required")
            if is_multi_select(survey, question):
                selected = len(split_selections(item.answer))
                if question.minimum_option and selected < question.minimum_option:
                    raise OptionCountError(
                        f"Question {question.serial_num} needs at least {question.minimum_option} options"
                    )
                if question.maximum_option and selected > question.maximum_option:
                    raise OptionCountError(
                        f"Question {question.serial_num} allows at most {question.maximum_option} options"
                    )
        return by_id

survey_service = SurveyService()
