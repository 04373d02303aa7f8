from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from api.db.database import get_db
from api.v1.models.user import User
from api.utils.authentication import get_current_user
from api.utils.authorization import require_permission
from api.utils.pagination import PageParams
from api.v1.schemas import quiz as schemas
from api.v1.schemas.common import Message, Page
from api.v1.services import quiz_service

quiz = APIRouter(prefix="/quizzes", tags=["Quizzes"])


# --- Reference data ---
@quiz.get("/categories", response_model=List[schemas.CategoryOut])
def get_categories(db: Session = Depends(get_db)):
    return quiz_service.get_categories(db)


@quiz.get("/levels", response_model=List[schemas.LevelOut])
def get_levels(db: Session = Depends(get_db)):
    return quiz_service.get_levels(db)


# --- Discovery ---
@quiz.get("", response_model=Page[schemas.QuizWithLikeAndFavourite])
def get_quizzes(
    params: PageParams = Depends(),
    title: Optional[str] = None,
    nickname: Optional[str] = None,
    category_id: Optional[int] = None,
    level_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return quiz_service.get_quizzes(
        db,
        current_user,
        params.page,
        params.size,
        title=title,
        nickname=nickname,
        category_id=category_id,
        level_id=level_id,
    )


@quiz.get("/users/{user_id}/liked", response_model=Page[schemas.QuizOut])
def get_liked_quizzes(
    user_id: int,
    params: PageParams = Depends(),
    title: Optional[str] = None,
    category_id: Optional[int] = None,
    level_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return quiz_service.get_liked_quizzes(
        db, current_user, user_id, params.page, params.size,
        title=title, category_id=category_id, level_id=level_id,
    )


@quiz.get("/users/{user_id}/favourites", response_model=Page[schemas.QuizOut])
def get_favourite_quizzes(
    user_id: int,
    params: PageParams = Depends(),
    title: Optional[str] = None,
    category_id: Optional[int] = None,
    level_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return quiz_service.get_favourite_quizzes(
        db, current_user, user_id, params.page, params.size,
        title=title, category_id=category_id, level_id=level_id,
    )


# --- Authoring and moderation ---
@quiz.post("", status_code=status.HTTP_201_CREATED)
def create_quiz(
    payload: schemas.QuizCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    created = quiz_service.create_quiz(db, payload, current_user)
    location = request.url_for("get_quiz_with_details", quiz_id=created.quiz_id)
    return Response(
        status_code=status.HTTP_201_CREATED, headers={"Location": location.path}
    )


@quiz.get("/{quiz_id}", response_model=schemas.QuizWithDetails)
def get_quiz_with_details(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return quiz_service.get_quiz_with_details(db, quiz_id, current_user)


@quiz.put("/{quiz_id}/hide", response_model=Message)
def hide_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("quizzes:hide")),
):
    quiz_service.mark_quiz_as_hidden(db, quiz_id, current_user)
    return {"message": "Quiz hidden successfully"}


# --- Likes and favourites ---
@quiz.post("/{quiz_id}/like", status_code=status.HTTP_201_CREATED)
def like_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quiz_service.like_quiz(db, quiz_id, current_user)
    return Response(status_code=status.HTTP_201_CREATED)


@quiz.delete("/{quiz_id}/like", status_code=status.HTTP_204_NO_CONTENT)
def unlike_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quiz_service.unlike_quiz(db, quiz_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@quiz.post("/{quiz_id}/favourite", status_code=status.HTTP_201_CREATED)
def favourite_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quiz_service.favourite_quiz(db, quiz_id, current_user)
    return Response(status_code=status.HTTP_201_CREATED)


@quiz.delete("/{quiz_id}/favourite", status_code=status.HTTP_204_NO_CONTENT)
def unfavourite_quiz(
    quiz_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quiz_service.unfavourite_quiz(db, quiz_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
