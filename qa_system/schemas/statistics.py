from typing import List
from pydantic import BaseModel, Field
from .base import BaseSchema

# Option.serial_num reserved for the synthetic "other" bucket
OTHER_SERIAL_NUM = 0

class OptionMeta(BaseSchema):
    serial_num: int
    content: str

class QuestionMeta(BaseSchema):
    id: int
    serial_num: int
    subject: str
    question_type: int
    other_option: bool = False
    counted: bool = Field(False, description="Whether answers to this question are tallied")

class OptionCount(BaseModel):
    serial_num: int
    content: str
    count: int = 0
    rank: int = 1

class QuestionStatistics(BaseModel):
    serial_num: int
    question: str
    question_type: int
    options: List[OptionCount]

class StatisticsResponse(BaseModel):
    statistics: List[QuestionStatistics]
