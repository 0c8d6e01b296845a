import logging
from typing import Dict, List, Optional, Sequence
from sqlalchemy.orm import Session

from qa_system.core.config import settings
from qa_system.core.exceptions import NotFoundError, SurveyTypeError
from qa_system.models.survey import SURVEY_TYPE_VOTE
from qa_system.repositories.answer_repository import answer_repository
from qa_system.repositories.survey_repository import survey_repository
from qa_system.schemas.answer import AnswerSheet
from qa_system.schemas.statistics import (
    OTHER_SERIAL_NUM, OptionCount, OptionMeta, QuestionMeta, QuestionStatistics
)
from qa_system.services.survey_service import is_counted_question
from qa_system.utils.ranking import assign_ranks

logger = logging.getLogger("statistics_service")

def aggregate(
    sheets: Sequence[AnswerSheet],
    questions: Sequence[QuestionMeta],
    options_by_question: Dict[int, List[OptionMeta]],
    other_label: Optional[str] = None,
) -> List[QuestionStatistics]:
    """Per-question option counts with competition ranks.

    Only questions flagged ``counted`` are tallied. A selection that matches no
    configured option lands in the "other" bucket (serial number 0) whether or
    not the question offers "other". Output follows the order of ``questions``
    and, within a question, "other" first then ascending serial number.
    """
    if other_label is None:
        other_label = settings.other_option_label

    counts: Dict[int, Dict[int, int]] = {}
    serial_by_content: Dict[int, Dict[str, int]] = {}
    for question in questions:
        if not question.counted:
            continue
        options = options_by_question.get(question.id, [])
        counts[question.id] = {OTHER_SERIAL_NUM: 0}
        counts[question.id].update({option.serial_num: 0 for option in options})
        serial_by_content[question.id] = {option.content: option.serial_num for option in options}

    known_ids = {question.id for question in questions}
    for sheet in sheets:
        for answer in sheet.answers:
            question_counts = counts.get(answer.question_id)
            if question_counts is None:
                if answer.question_id not in known_ids:
                    logger.debug(f"Ignoring answer to unknown question {answer.question_id} in survey {sheet.survey_id}")
                continue
            lookup = serial_by_content[answer.question_id]
            for value in answer.selections:
                question_counts[lookup.get(value, OTHER_SERIAL_NUM)] += 1

    statistics = []
    for question in questions:
        question_counts = counts.get(question.id, {})
        other_count = question_counts.get(OTHER_SERIAL_NUM, 0)

        option_counts = []
        if question.other_option or other_count:
            option_counts.append(OptionCount(
                serial_num=OTHER_SERIAL_NUM, content=other_label, count=other_count
            ))
        for option in sorted(options_by_question.get(question.id, []), key=lambda o: o.serial_num):
            if option.serial_num == OTHER_SERIAL_NUM:
                continue
            option_counts.append(OptionCount(
                serial_num=option.serial_num,
                content=option.content,
                count=question_counts.get(option.serial_num, 0),
            ))

        statistics.append(QuestionStatistics(
            serial_num=question.serial_num,
            question=question.subject,
            question_type=question.question_type,
            options=assign_ranks(option_counts),
        ))
    return statistics

class StatisticsService:
    def __init__(self, repository=None, surveys=None):
        self.repository = repository if repository is not None else answer_repository
        self.surveys = surveys if surveys is not None else survey_repository

    async def get_survey_statistics(self, db: Session, survey_id: int) -> List[QuestionStatistics]:
        """Vote tallies of one survey.

        The answer sheets are read in one pass without a snapshot; submissions
        landing during the read may or may not be counted.
        """
        survey = self.surveys.get_survey(db, survey_id)
        if not survey:
            raise NotFoundError(f"Survey {survey_id} not found")
        if survey.survey_type != SURVEY_TYPE_VOTE:
            raise SurveyTypeError(f"Survey {survey_id} is not a vote survey")

        sheets = await self.repository.find_all_by_survey(survey_id)
        questions = self.surveys.get_questions_by_survey(db, survey_id)
        options = self.surveys.get_options_by_questions(db, [q.id for q in questions])

        metas = [
            QuestionMeta(
                id=q.id,
                serial_num=q.serial_num,
                subject=q.subject,
                question_type=q.question_type,
                other_option=bool(q.other_option),
                counted=is_counted_question(survey, q),
            )
            for q in questions
        ]
        options_by_question = {
            qid: [OptionMeta.model_validate(o) for o in opts] for qid, opts in options.items()
        }
        logger.debug(f"Aggregating {len(sheets)} answer sheets for survey {survey_id}")
        return aggregate(sheets, metas, options_by_question)

statistics_service = StatisticsService()
