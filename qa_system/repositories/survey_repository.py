from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from .base import BaseRepository
from qa_system.models.survey import Survey, Question, Option

class SurveyRepository(BaseRepository[Survey]):
    """Read-only survey metadata, questions and options ordered by serial number"""

    def __init__(self):
        super().__init__(Survey)
        self.questions = BaseRepository(Question)
        self.options = BaseRepository(Option)

    def get_survey(self, db: Session, survey_id: int) -> Optional[Survey]:
        return self.get_by_id(db, survey_id)

    def get_question(self, db: Session, question_id: int) -> Optional[Question]:
        return self.questions.get_by_id(db, question_id)

    def get_questions_by_survey(self, db: Session, survey_id: int) -> List[Question]:
        return self.questions.list_by(
            db, Question.survey_id == survey_id, order_by=Question.serial_num
        )

    def get_options_by_question(self, db: Session, question_id: int) -> List[Option]:
        return self.options.list_by(
            db, Option.question_id == question_id, order_by=Option.serial_num
        )

    def get_options_by_questions(self, db: Session, question_ids: List[int]) -> Dict[int, List[Option]]:
        result = {qid: [] for qid in question_ids}
        if not question_ids:
            return result
        options = self.options.list_by(
            db, Option.question_id.in_(question_ids), order_by=Option.serial_num
        )
        for option in options:
            result[option.question_id].append(option)
        return result

survey_repository = SurveyRepository()
