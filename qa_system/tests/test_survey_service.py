from datetime import datetime, timedelta

import pytest

from qa_system.core.exceptions import (
    DuplicateAnswerError, NotFoundError, OptionCountError, QuestionCountMismatchError, RequiredAnswerError,
    SurveyNotOpenError, SurveyTimeError, ValidationError
)
from qa_system.models.survey import Question, Survey, SURVEY_TYPE_RESEARCH, SURVEY_TYPE_VOTE
from qa_system.schemas.answer import QuestionAnswerRequest
from qa_system.services.survey_service import is_counted_question, is_multi_select


def _answers(survey, db, *values):
    questions = db.query(Question).filter(Question.survey_id == survey.id).order_by(Question.serial_num).all()
    return [QuestionAnswerRequest(question_id=q.id, answer=v) for q, v in zip(questions, values)]


@pytest.mark.parametrize("survey_type, question_type, multi, counted", [
    (SURVEY_TYPE_RESEARCH, 1, False, False),
    (SURVEY_TYPE_RESEARCH, 2, True, False),
    (SURVEY_TYPE_VOTE, 1, True, True),
    (SURVEY_TYPE_VOTE, 2, False, False),
])
def test_question_type_conventions(survey_type, question_type, multi, counted):
    survey = Survey(survey_type=survey_type)
    question = Question(question_type=question_type)
    assert is_multi_select(survey, question) is multi
    assert is_counted_question(survey, question) is counted


def test_valid_submission_returns_questions(db, research_survey, survey_service):
    answers = _answers(research_survey, db, "Ada", "music┋books")
    questions = survey_service.validate_submission(db, research_survey, answers)
    assert sorted(q.subject for q in questions.values()) == ["Hobbies", "Name"]


def test_answer_count_must_match(db, research_survey, survey_service):
    answers = _answers(research_survey, db, "Ada")
    with pytest.raises(QuestionCountMismatchError):
        survey_service.validate_submission(db, research_survey, answers)


def test_required_answer(db, research_survey, survey_service):
    with pytest.raises(RequiredAnswerError):
        survey_service.validate_submission(db, research_survey, _answers(research_survey, db, "", "music┋sport"))


def test_multi_select_option_bounds(db, research_survey, survey_service):
    with pytest.raises(OptionCountError):
        survey_service.validate_submission(db, research_survey, _answers(research_survey, db, "Ada", "music"))
    with pytest.raises(OptionCountError):
        survey_service.validate_submission(
            db, research_survey, _answers(research_survey, db, "Ada", "music┋sport┋books┋films")
        )


def test_question_from_another_survey(db, research_survey, vote_survey, survey_service):
    _, colour, _ = vote_survey
    answers = _answers(research_survey, db, "Ada")
    answers.append(QuestionAnswerRequest(question_id=colour.id, answer="red"))
    with pytest.raises(ValidationError):
        survey_service.validate_submission(db, research_survey, answers)


def test_unknown_question(db, research_survey, survey_service):
    answers = _answers(research_survey, db, "Ada")
    answers.append(QuestionAnswerRequest(question_id=4040, answer="x"))
    with pytest.raises(NotFoundError):
        survey_service.validate_submission(db, research_survey, answers)


def test_survey_must_be_open(db, make_survey, survey_service):
    with pytest.raises(SurveyNotOpenError):
        survey_service.check_open(make_survey(status=1))


def test_deadline_and_start_time(db, make_survey, survey_service):
    now = datetime(2024, 5, 1, 12, 0)
    expired = make_survey(deadline=now - timedelta(minutes=1))
    upcoming = make_survey(start_time=now + timedelta(minutes=1))
    with pytest.raises(SurveyTimeError):
        survey_service.check_open(expired, now)
    with pytest.raises(SurveyTimeError):
        survey_service.check_open(upcoming, now)


def test_unknown_survey(db, survey_service):
    with pytest.raises(NotFoundError):
        survey_service.get_survey(db, 404)


def test_question_answered_twice(db, research_survey, survey_service):
    name = _answers(research_survey, db, "Ada")[0]
    answers = [name, QuestionAnswerRequest(question_id=name.question_id, answer="Grace")]
    with pytest.raises(DuplicateAnswerError):
        survey_service.validate_submission(db, research_survey, answers)
