from typing import List, Union
from pydantic import BaseModel, Field, field_validator

# Reserved separator between the selected option texts of a multi-select answer
MULTI_SELECT_DELIMITER = "┋"

def join_selections(selections: List[str]) -> str:
    return MULTI_SELECT_DELIMITER.join(selections)

def split_selections(content: str) -> List[str]:
    return content.split(MULTI_SELECT_DELIMITER)

class Answer(BaseModel):
    question_id: int
    serial_num: int
    subject: str = ""
    content: str = Field("", description="Stored encoding; multi-select values joined by the delimiter")

    @property
    def selections(self) -> List[str]:
        return split_selections(self.content)

class AnswerSheet(BaseModel):
    survey_id: int
    time: str
    unique: bool = True
    answers: List[Answer] = Field(default_factory=list)

class QuestionAnswerRequest(BaseModel):
    question_id: int
    answer: Union[str, List[str]] = Field("", description="Answer text, or the list of selected options")

    @field_validator("answer")
    @classmethod
    def encode_selections(cls, value):
        if isinstance(value, list):
            return join_selections(value)
        return value

class SubmitSurveyRequest(BaseModel):
    id: int = Field(..., description="Survey ID")
    questions_list: List[QuestionAnswerRequest] = Field(default_factory=list)

class QuestionAnswers(BaseModel):
    title: str
    question_type: int
    answers: List[str]

class AnswersData(BaseModel):
    question_answers: List[QuestionAnswers]
    time: List[str]

class AnswerListResponse(BaseModel):
    answers_data: AnswersData
    total: int
