from typing import List, Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from api.db.database import fits_id
from api.utils.exceptions import ConflictError, NotFoundError
from api.utils.pagination import paginate
from api.v1.models.answer import Answer
from api.v1.models.category import Category
from api.v1.models.favourite import QuizFavourite
from api.v1.models.level import Level
from api.v1.models.like import QuizLike
from api.v1.models.question import Question
from api.v1.models.quiz import Quiz
from api.v1.models.user import User
from api.v1.schemas import quiz as schemas
from api.v1.services.quiz_query import QuizFilter, build_quiz_query

logger = logging.getLogger(__name__)


def to_quiz_out(quiz: Quiz) -> schemas.QuizOut:
    return schemas.QuizOut(
        quiz_id=quiz.quiz_id,
        title=quiz.title,
        category=schemas.CategoryOut.model_validate(quiz.category),
        level=schemas.LevelOut.model_validate(quiz.level),
        img=quiz.img,
        date_created=quiz.date_created,
        creator_id=quiz.creator_id,
        creator_nickname=quiz.creator.nickname,
    )


def get_quiz_or_404(db: Session, quiz_id: int, current_user: User, method: str) -> Quiz:
    quiz = db.query(Quiz).filter(Quiz.quiz_id == quiz_id).first() if fits_id(quiz_id) else None
    if not quiz:
        logger.warning(
            f"Method {method}: Quiz with ID {quiz_id} not found. "
            f"Current User nickname: {current_user.nickname}"
        )
        raise NotFoundError("Quiz not found")
    return quiz


def get_quiz_with_details(db: Session, quiz_id: int, current_user: User) -> schemas.QuizWithDetails:
    logger.info(f"Entering method get_quiz_with_details: User '{current_user.nickname}'")

    quiz = (
        db.query(Quiz)
        .options(selectinload(Quiz.questions).selectinload(Question.answers))
        .filter(Quiz.quiz_id == quiz_id)
        .first()
        if fits_id(quiz_id)
        else None
    )
    if not quiz:
        logger.warning(
            f"Method get_quiz_with_details: Quiz with ID {quiz_id} not found. "
            f"Current User nickname: {current_user.nickname}"
        )
        raise NotFoundError("Quiz not found")

    questions = [
        schemas.QuestionOut(
            question_id=q.question_id,
            question=q.question,
            num_question=q.num_question,
            answers=[
                schemas.AnswerOut.model_validate(a)
                for a in sorted(q.answers, key=lambda a: a.num_answer)
            ],
        )
        for q in sorted(quiz.questions, key=lambda q: q.num_question)
    ]

    return schemas.QuizWithDetails(quiz=to_quiz_out(quiz), questions=questions)


def mark_quiz_as_hidden(db: Session, quiz_id: int, current_user: User) -> None:
    logger.info(f"Entering method mark_quiz_as_hidden: User '{current_user.nickname}'")

    quiz = get_quiz_or_404(db, quiz_id, current_user, "mark_quiz_as_hidden")
    quiz.is_visible = False
    db.commit()

    logger.info(
        f"Method mark_quiz_as_hidden: Quiz with ID {quiz_id} marked as hidden successfully. "
        f"Current User nickname: {current_user.nickname}"
    )


def create_quiz(db: Session, payload: schemas.QuizCreate, current_user: User) -> schemas.QuizOut:
    """
    Persist a quiz together with its questions and answers in one transaction.

    Positions and correctness flags are stored exactly as supplied. If any
    part of the write fails nothing is kept.
    """
    logger.info(f"Entering method create_quiz: User '{current_user.nickname}'")

    creator = db.query(User).filter(User.user_id == current_user.user_id).first()
    if not creator:
        logger.warning(
            f"Method create_quiz: User with ID {current_user.user_id} not found. "
            f"Current User nickname: {current_user.nickname}"
        )
        raise NotFoundError("User not found")

    level = (
        db.query(Level).filter(Level.level_id == payload.level_id).first()
        if fits_id(payload.level_id)
        else None
    )
    if not level:
        logger.warning(
            f"Method create_quiz: Level with ID {payload.level_id} not found. "
            f"Current User nickname: {current_user.nickname}"
        )
        raise NotFoundError("Level not found")

    category = (
        db.query(Category).filter(Category.category_id == payload.category_id).first()
        if fits_id(payload.category_id)
        else None
    )
    if not category:
        logger.warning(
            f"Method create_quiz: Category with ID {payload.category_id} not found. "
            f"Current User nickname: {current_user.nickname}"
        )
        raise NotFoundError("Category not found")

    quiz = Quiz(
        title=payload.title,
        creator=creator,
        level=level,
        category=category,
        is_visible=True,
        img=payload.img,
    )
    for question_data in payload.questions:
        question = Question(
            question=question_data.question,
            num_question=question_data.num_question,
        )
        for answer_data in question_data.answers:
            question.answers.append(
                Answer(
                    answer=answer_data.answer,
                    num_answer=answer_data.num_answer,
                    is_correct=answer_data.is_correct,
                )
            )
        quiz.questions.append(question)

    try:
        db.add(quiz)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error(
            f"Method create_quiz: Failed to create quiz '{payload.title}'. "
            f"Current User nickname: {current_user.nickname}",
            exc_info=True,
        )
        raise
    db.refresh(quiz)

    logger.info(
        f"Method create_quiz: Quiz with ID {quiz.quiz_id} created successfully with "
        f"{len(payload.questions)} questions. Current User nickname: {current_user.nickname}"
    )
    return to_quiz_out(quiz)


def get_quizzes(
    db: Session,
    current_user: User,
    page: int,
    size: int,
    title: Optional[str] = None,
    nickname: Optional[str] = None,
    category_id: Optional[int] = None,
    level_id: Optional[int] = None,
) -> dict:
    logger.info(f"Entering method get_quizzes: User '{current_user.nickname}'")

    criteria = QuizFilter(
        title=title, nickname=nickname, category_id=category_id, level_id=level_id
    )
    result = paginate(build_quiz_query(db, criteria), page, size)

    quiz_ids = [quiz.quiz_id for quiz in result["content"]]
    liked = {
        row.quiz_id
        for row in db.query(QuizLike.quiz_id).filter(
            QuizLike.user_id == current_user.user_id, QuizLike.quiz_id.in_(quiz_ids)
        )
    }
    favourites = {
        row.quiz_id
        for row in db.query(QuizFavourite.quiz_id).filter(
            QuizFavourite.user_id == current_user.user_id,
            QuizFavourite.quiz_id.in_(quiz_ids),
        )
    }

    result["content"] = [
        schemas.QuizWithLikeAndFavourite(
            **to_quiz_out(quiz).model_dump(),
            is_liked=quiz.quiz_id in liked,
            is_favourite=quiz.quiz_id in favourites,
        )
        for quiz in result["content"]
    ]
    logger.info(
        f"Method get_quizzes: Get quizzes successfully. Current User nickname: {current_user.nickname}"
    )
    return result


def _get_member_quizzes(db: Session, criteria: QuizFilter, page: int, size: int) -> dict:
    result = paginate(build_quiz_query(db, criteria), page, size)
    result["content"] = [to_quiz_out(quiz) for quiz in result["content"]]
    return result


def get_liked_quizzes(
    db: Session,
    current_user: User,
    user_id: int,
    page: int,
    size: int,
    title: Optional[str] = None,
    category_id: Optional[int] = None,
    level_id: Optional[int] = None,
) -> dict:
    logger.info(f"Entering method get_liked_quizzes: User '{current_user.nickname}'")
    criteria = QuizFilter(
        title=title, category_id=category_id, level_id=level_id, liked_by=user_id
    )
    result = _get_member_quizzes(db, criteria, page, size)
    logger.info(
        f"Method get_liked_quizzes: Get liked quizzes successfully. "
        f"Current User nickname: {current_user.nickname}"
    )
    return result


def get_favourite_quizzes(
    db: Session,
    current_user: User,
    user_id: int,
    page: int,
    size: int,
    title: Optional[str] = None,
    category_id: Optional[int] = None,
    level_id: Optional[int] = None,
) -> dict:
    logger.info(f"Entering method get_favourite_quizzes: User '{current_user.nickname}'")
    criteria = QuizFilter(
        title=title, category_id=category_id, level_id=level_id, favourited_by=user_id
    )
    result = _get_member_quizzes(db, criteria, page, size)
    logger.info(
        f"Method get_favourite_quizzes: Get favourite quizzes successfully. "
        f"Current User nickname: {current_user.nickname}"
    )
    return result


# kind -> (duplicate message, missing message)
MARK_MESSAGES = {
    "like": ("Quiz already liked", "Like not found"),
    "favourite": ("Quiz already in favourites", "Favourite not found"),
}


def find_mark(db: Session, model, user_id: int, quiz_id: int):
    if not fits_id(quiz_id):
        return None
    return db.query(model).filter(model.user_id == user_id, model.quiz_id == quiz_id).first()


def _add_mark(db: Session, model, quiz_id: int, current_user: User, kind: str) -> None:
    quiz = get_quiz_or_404(db, quiz_id, current_user, f"{kind}_quiz")
    if not quiz.is_visible:
        # hidden quizzes accept no new likes or favourites
        logger.warning(
            f"Method {kind}_quiz: Quiz with ID {quiz_id} is hidden. "
            f"Current User nickname: {current_user.nickname}"
        )
        raise NotFoundError("Quiz not found")

    if find_mark(db, model, current_user.user_id, quiz_id):
        raise ConflictError(MARK_MESSAGES[kind][0])

    db.add(model(user_id=current_user.user_id, quiz_id=quiz_id))
    try:
        db.commit()
    except IntegrityError:
        # a concurrent request inserted the same pair first
        db.rollback()
        logger.warning(f"User '{current_user.nickname}' already has a {kind} stored on quiz {quiz_id}")
        raise ConflictError(MARK_MESSAGES[kind][0])

    logger.info(f"User '{current_user.nickname}' added {kind} on quiz {quiz_id}")


def _remove_mark(db: Session, model, quiz_id: int, current_user: User, kind: str) -> None:
    existing = find_mark(db, model, current_user.user_id, quiz_id)
    if not existing:
        logger.warning(f"User '{current_user.nickname}' has no {kind} on quiz {quiz_id}")
        raise NotFoundError(MARK_MESSAGES[kind][1])

    db.delete(existing)
    db.commit()
    logger.info(f"User '{current_user.nickname}' removed {kind} on quiz {quiz_id}")


def like_quiz(db: Session, quiz_id: int, current_user: User) -> None:
    _add_mark(db, QuizLike, quiz_id, current_user, "like")


def unlike_quiz(db: Session, quiz_id: int, current_user: User) -> None:
    _remove_mark(db, QuizLike, quiz_id, current_user, "like")


def favourite_quiz(db: Session, quiz_id: int, current_user: User) -> None:
    _add_mark(db, QuizFavourite, quiz_id, current_user, "favourite")


def unfavourite_quiz(db: Session, quiz_id: int, current_user: User) -> None:
    _remove_mark(db, QuizFavourite, quiz_id, current_user, "favourite")


def get_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.category_id).all()


def get_levels(db: Session) -> List[Level]:
    return db.query(Level).order_by(Level.level_id).all()
