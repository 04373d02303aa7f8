from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime


# 🏷️ Reference data
class CategoryOut(BaseModel):
    category_id: int
    label: str

    class Config:
        from_attributes = True


class LevelOut(BaseModel):
    level_id: int
    label: str

    class Config:
        from_attributes = True


# 🧩 Quiz summary
class QuizOut(BaseModel):
    quiz_id: int
    title: str
    category: CategoryOut
    level: LevelOut
    img: Optional[str] = None
    date_created: Optional[datetime] = None
    creator_id: int
    creator_nickname: str


class QuizWithLikeAndFavourite(QuizOut):
    is_liked: bool
    is_favourite: bool


# 📖 Quiz with its questions and answers
class AnswerOut(BaseModel):
    answer_id: int
    answer: str
    num_answer: int
    is_correct: bool

    class Config:
        from_attributes = True


class QuestionOut(BaseModel):
    question_id: int
    question: str
    num_question: int
    answers: List[AnswerOut]


class QuizWithDetails(BaseModel):
    quiz: QuizOut
    questions: List[QuestionOut]


# ✍️ Creation payload
class AnswerCreate(BaseModel):
    answer: str = Field(..., min_length=1)
    num_answer: int
    is_correct: bool = False

    class Config:
        str_strip_whitespace = True


class QuestionCreate(BaseModel):
    question: str = Field(..., min_length=1)
    num_question: int
    answers: List[AnswerCreate] = Field(default_factory=list)

    class Config:
        str_strip_whitespace = True

    @field_validator("answers")
    @classmethod
    def unique_answer_positions(cls, answers: List[AnswerCreate]):
        positions = [a.num_answer for a in answers]
        if len(positions) != len(set(positions)):
            raise ValueError("num_answer must be unique within a question")
        return answers


class QuizCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    category_id: int
    level_id: int
    img: Optional[str] = None
    questions: List[QuestionCreate] = Field(default_factory=list)

    class Config:
        str_strip_whitespace = True

    @field_validator("questions")
    @classmethod
    def unique_question_positions(cls, questions: List[QuestionCreate]):
        positions = [q.num_question for q in questions]
        if len(positions) != len(set(positions)):
            raise ValueError("num_question must be unique within a quiz")
        return questions
