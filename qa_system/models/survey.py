from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text, Boolean
from sqlalchemy.orm import relationship
from .base import BaseModel

# Survey.status
SURVEY_STATUS_OPEN = 2

# Survey.survey_type
SURVEY_TYPE_RESEARCH = 0
SURVEY_TYPE_VOTE = 1

class Survey(BaseModel):
    """Survey metadata (authoring happens elsewhere)"""
    __tablename__ = "surveys"

    title = Column(String(200), nullable=False, default="")
    desc = Column(Text)
    status = Column(Integer, nullable=False, default=1)  # 1 draft, 2 open
    survey_type = Column(Integer, nullable=False, default=SURVEY_TYPE_RESEARCH)
    start_time = Column(DateTime)
    deadline = Column(DateTime)

    questions = relationship(
        "Question", back_populates="survey", order_by="Question.serial_num",
        cascade="all, delete-orphan"
    )

class Question(BaseModel):
    __tablename__ = "questions"

    survey_id = Column(Integer, ForeignKey("surveys.id"), nullable=False, index=True)
    serial_num = Column(Integer, nullable=False)
    subject = Column(String(500), nullable=False, default="")
    question_type = Column(Integer, nullable=False, default=1)  # 1 / 2, meaning depends on survey type
    required = Column(Boolean, default=False)
    unique = Column(Boolean, default=False)  # answer content is a dedup key
    other_option = Column(Boolean, default=False)
    minimum_option = Column(Integer, default=0)  # 0 = unbounded
    maximum_option = Column(Integer, default=0)

    survey = relationship("Survey", back_populates="questions")
    options = relationship(
        "Option", back_populates="question", order_by="Option.serial_num",
        cascade="all, delete-orphan"
    )

class Option(BaseModel):
    __tablename__ = "options"

    question_id = Column(Integer, ForeignKey("questions.id"), nullable=False, index=True)
    serial_num = Column(Integer, nullable=False)  # 0 is reserved for "other"
    content = Column(String(500), nullable=False)

    question = relationship("Question", back_populates="options")
