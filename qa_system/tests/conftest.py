"""Shared fixtures.

Metadata lives in an in-memory SQLite database; answer sheets go to
``InMemoryAnswerStore``, a stand-in for the Mongo repository exposing the
same coroutine methods so the services run without a MongoDB server.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MONGO_TRANSACTIONS"] = "false"

from contextlib import asynccontextmanager
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from qa_system.core.database import Base
from qa_system.core.exceptions import StoreConflictError
from qa_system.models.survey import (
    SURVEY_STATUS_OPEN, SURVEY_TYPE_RESEARCH, SURVEY_TYPE_VOTE, Option, Question, Survey
)
from qa_system.repositories.answer_repository import document_to_sheet, sheet_to_document
from qa_system.repositories.survey_repository import SurveyRepository
from qa_system.services.answer_service import AnswerService
from qa_system.services.statistics_service import StatisticsService
from qa_system.services.survey_service import SurveyService


class InMemoryAnswerStore:
    def __init__(self):
        self.documents = []
        self.transactions = 0
        self._next_id = 1

    @asynccontextmanager
    async def transaction(self, survey_id):
        self.transactions += 1
        yield None

    async def insert_one(self, sheet, session=None):
        doc = sheet_to_document(sheet)
        doc["_id"] = self._next_id
        self._next_id += 1
        self.documents.append(doc)
        return str(doc["_id"])

    async def find_unique_match(self, survey_id, clauses, session=None):
        for doc in self.documents:
            if doc["surveyid"] != survey_id or not doc["unique"]:
                continue
            for question_id, content in clauses:
                if any(a["questionid"] == question_id and a["content"] == content for a in doc["answers"]):
                    return dict(doc)
        return None

    async def demote(self, document_id, session=None):
        for doc in self.documents:
            if doc["_id"] == document_id and doc["unique"]:
                doc["unique"] = False
                return
        raise StoreConflictError(f"Answer sheet {document_id} was already superseded")

    async def find_by_survey(self, survey_id, page_num=0, page_size=0, text="", unique=False):
        docs = [d for d in self.documents if d["surveyid"] == survey_id]
        if unique:
            docs = [d for d in docs if d["unique"]]
        if text:
            docs = [
                d for d in docs
                if any(text.lower() in a["content"].lower() for a in d["answers"])
            ]
        total = len(docs)
        if page_num and page_size:
            docs = docs[(page_num - 1) * page_size:page_num * page_size]
        return [document_to_sheet(d) for d in docs], total

    async def find_all_by_survey(self, survey_id):
        return [document_to_sheet(d) for d in self.documents if d["surveyid"] == survey_id]

    async def delete_by_survey(self, survey_id):
        before = len(self.documents)
        self.documents = [d for d in self.documents if d["surveyid"] != survey_id]
        return before - len(self.documents)

    def unique_flags(self):
        return [d["unique"] for d in self.documents]


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def add_survey(db, survey_type=SURVEY_TYPE_VOTE, status=SURVEY_STATUS_OPEN, **fields):
    survey = Survey(title="Campus poll", status=status, survey_type=survey_type, **fields)
    db.add(survey)
    db.commit()
    db.refresh(survey)
    return survey


def add_question(db, survey, serial_num, subject, options=(), **fields):
    question = Question(survey_id=survey.id, serial_num=serial_num, subject=subject, **fields)
    db.add(question)
    db.commit()
    db.refresh(question)
    for index, content in enumerate(options, start=1):
        db.add(Option(question_id=question.id, serial_num=index, content=content))
    db.commit()
    return question


@pytest.fixture
def vote_survey(db):
    """Vote survey: a tracked colour vote with "other" and a free-text comment."""
    survey = add_survey(db)
    colour = add_question(
        db, survey, 1, "Favourite colour", options=("red", "blue", "green"),
        question_type=1, unique=True, other_option=True, maximum_option=2,
    )
    comment = add_question(db, survey, 2, "Comment", question_type=3)
    return survey, colour, comment


@pytest.fixture
def research_survey(db):
    survey = add_survey(
        db, survey_type=SURVEY_TYPE_RESEARCH,
        start_time=datetime.now() - timedelta(days=1),
        deadline=datetime.now() + timedelta(days=1),
    )
    add_question(db, survey, 1, "Name", question_type=3, required=True)
    add_question(
        db, survey, 2, "Hobbies", options=("music", "sport", "books"),
        question_type=2, minimum_option=2, maximum_option=3,
    )
    return survey


@pytest.fixture
def store():
    return InMemoryAnswerStore()


@pytest.fixture
def survey_service():
    return SurveyService(SurveyRepository())


@pytest.fixture
def answer_service(store, survey_service):
    return AnswerService(store, survey_service)


@pytest.fixture
def statistics_service(store):
    return StatisticsService(store, SurveyRepository())


@pytest.fixture
def make_survey(db):
    return lambda **fields: add_survey(db, **fields)


@pytest.fixture
def make_question(db):
    return lambda survey, serial_num, subject, **fields: add_question(db, survey, serial_num, subject, **fields)
