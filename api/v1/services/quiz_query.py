"""
Filter criteria for quiz discovery and their translation into a query.

Every query built here only ever returns visible quizzes, newest first.
"""
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import false, or_
from sqlalchemy.orm import Session, selectinload

from api.db.database import fits_id

from api.v1.models.favourite import QuizFavourite
from api.v1.models.like import QuizLike
from api.v1.models.quiz import Quiz
from api.v1.models.user import User


@dataclass(frozen=True)
class QuizFilter:
    """
    Optional criteria for listing quizzes.

    title and nickname are matched case-insensitively as substrings and are
    OR-ed together when both are given. Every other criterion is AND-ed.
    category_id and level_id only filter when non-negative.
    """

    title: Optional[str] = None
    nickname: Optional[str] = None
    category_id: Optional[int] = None
    level_id: Optional[int] = None
    liked_by: Optional[int] = None
    favourited_by: Optional[int] = None


def _has_text(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _has_id(value: Optional[int]) -> bool:
    return value is not None and value >= 0


def _id_equals(column, value: int):
    # ids beyond the store's range cannot exist
    return column == value if fits_id(value) else false()


def build_quiz_query(db: Session, criteria: QuizFilter):
    query = (
        db.query(Quiz)
        .join(User, Quiz.creator_id == User.user_id)
        .options(
            selectinload(Quiz.creator),
            selectinload(Quiz.category),
            selectinload(Quiz.level),
        )
    )

    text_clauses = []
    if _has_text(criteria.title):
        text_clauses.append(Quiz.title.icontains(criteria.title, autoescape=True))
    if _has_text(criteria.nickname):
        text_clauses.append(User.nickname.icontains(criteria.nickname, autoescape=True))
    if text_clauses:
        query = query.filter(or_(*text_clauses))

    if _has_id(criteria.category_id):
        query = query.filter(_id_equals(Quiz.category_id, criteria.category_id))
    if _has_id(criteria.level_id):
        query = query.filter(_id_equals(Quiz.level_id, criteria.level_id))

    if criteria.liked_by is not None:
        query = query.join(QuizLike, QuizLike.quiz_id == Quiz.quiz_id).filter(
            _id_equals(QuizLike.user_id, criteria.liked_by)
        )
    if criteria.favourited_by is not None:
        query = query.join(QuizFavourite, QuizFavourite.quiz_id == Quiz.quiz_id).filter(
            _id_equals(QuizFavourite.user_id, criteria.favourited_by)
        )

    return query.filter(Quiz.is_visible.is_(True)).order_by(
        Quiz.date_created.desc(), Quiz.quiz_id.desc()
    )
