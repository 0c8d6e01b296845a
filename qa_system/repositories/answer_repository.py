import logging
import re
from contextlib import asynccontextmanager
from typing import Iterable, List, Optional, Tuple

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from qa_system.core.config import settings
from qa_system.core.exceptions import StoreConflictError, StoreError
from qa_system.core.mongo import mongo_db
from qa_system.schemas.answer import Answer, AnswerSheet

logger = logging.getLogger("answer_repository")

# (question_id, content) pairs a stored sheet must contain to count as a duplicate
MatchClause = Tuple[int, str]

def sheet_to_document(sheet: AnswerSheet) -> dict:
    return {
        "surveyid": sheet.survey_id,
        "time": sheet.time,
        "unique": sheet.unique,
        "answers": [
            {
                "questionid": answer.question_id,
                "serialnum": answer.serial_num,
                "subject": answer.subject,
                "content": answer.content,
            }
            for answer in sheet.answers
        ],
    }

def document_to_sheet(doc: dict) -> AnswerSheet:
    return AnswerSheet(
        survey_id=doc["surveyid"],
        time=doc.get("time", ""),
        unique=doc.get("unique", False),
        answers=[
            Answer(
                question_id=a["questionid"],
                serial_num=a.get("serialnum", 0),
                subject=a.get("subject", ""),
                content=a.get("content", ""),
            )
            for a in doc.get("answers", [])
        ],
    )

def build_unique_match_filter(survey_id: int, clauses: Iterable[MatchClause]) -> dict:
    """Live (unique) sheet of the survey sharing at least one tracked answer verbatim."""
    return {
        "surveyid": survey_id,
        "unique": True,
        "$or": [
            {"answers": {"$elemMatch": {"questionid": question_id, "content": content}}}
            for question_id, content in clauses
        ],
    }

def build_survey_filter(survey_id: int, text: str = "", unique: bool = False) -> dict:
    query = {"surveyid": survey_id}
    if text:
        # Substring search, user text is never interpreted as a pattern
        query["answers.content"] = {"$regex": re.escape(text), "$options": "i"}
    if unique:
        query["unique"] = True
    return query

class AnswerRepository:
    def __init__(self, database=None, use_transactions: bool = None):
        database = database if database is not None else mongo_db
        self.client = database.client
        self.collection = database[settings.answer_collection]
        self.guard_collection = database[settings.guard_collection]
        self.use_transactions = (
            settings.mongo_transactions if use_transactions is None else use_transactions
        )

    async def ensure_indexes(self):
        try:
            await self.collection.create_index([("surveyid", ASCENDING), ("unique", ASCENDING)])
            await self.collection.create_index([("answers.questionid", ASCENDING)])
            await self.guard_collection.create_index([("surveyid", ASCENDING)], unique=True)
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    @asynccontextmanager
    async def transaction(self, survey_id: int):
        """Scope for the find → demote → insert sequence of one survey.

        Yields the session to pass to each call, or None when transactions are
        disabled. The guard document write makes two concurrent sequences on the
        same survey conflict at commit instead of both inserting a unique sheet.
        """
        if not self.use_transactions:
            yield None
            return
        try:
            async with await self.client.start_session() as session:
                async with session.start_transaction():
                    await self.guard_collection.update_one(
                        {"surveyid": survey_id},
                        {"$inc": {"version": 1}},
                        upsert=True,
                        session=session,
                    )
                    yield session
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def insert_one(self, sheet: AnswerSheet, session=None) -> str:
        try:
            result = await self.collection.insert_one(sheet_to_document(sheet), session=session)
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return str(result.inserted_id)

    async def find_unique_match(
        self, survey_id: int, clauses: List[MatchClause], session=None
    ) -> Optional[dict]:
        """Return the matching unique sheet, or None when there is none."""
        try:
            return await self.collection.find_one(
                build_unique_match_filter(survey_id, clauses), session=session
            )
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def demote(self, document_id, session=None):
        """Compare-and-swap unique true → false on one stored sheet."""
        try:
            result = await self.collection.update_one(
                {"_id": document_id, "unique": True},
                {"$set": {"unique": False}},
                session=session,
            )
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        if result.matched_count == 0:
            raise StoreConflictError(f"Answer sheet {document_id} was already superseded")

    async def find_by_survey(
        self,
        survey_id: int,
        page_num: int = 0,
        page_size: int = 0,
        text: str = "",
        unique: bool = False,
    ) -> Tuple[List[AnswerSheet], int]:
        query = build_survey_filter(survey_id, text, unique)
        try:
            total = await self.collection.count_documents(query)
            cursor = self.collection.find(query).sort("_id", ASCENDING)
            if page_num and page_size:
                cursor = cursor.skip((page_num - 1) * page_size).limit(page_size)
            sheets = [document_to_sheet(doc) async for doc in cursor]
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return sheets, total

    async def find_all_by_survey(self, survey_id: int) -> List[AnswerSheet]:
        try:
            cursor = self.collection.find({"surveyid": survey_id})
            return [document_to_sheet(doc) async for doc in cursor]
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def delete_by_survey(self, survey_id: int) -> int:
        try:
            result = await self.collection.delete_many({"surveyid": survey_id})
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        logger.info(f"Deleted {result.deleted_count} answer sheets of survey {survey_id}")
        return result.deleted_count

answer_repository = AnswerRepository()
