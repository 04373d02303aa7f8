from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
import logging

from api.db.database import get_db
from api.utils.authentication import get_current_user
from api.utils.pagination import PageParams
from api.v1.models.user import User
from api.v1.schemas.common import Page
from api.v1.schemas.follower import FollowerOut, FollowingOut
from api.v1.services import follower_service

followers = APIRouter(prefix="/followers", tags=["Followers"])
logger = logging.getLogger(__name__)


@followers.get("/users/{user_id}/followers", response_model=Page[FollowerOut])
def get_followers(
    user_id: int,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = follower_service.get_followers_by_user_id(db, user_id, params.page, params.size)
    logger.info(
        f"User with the nickname '{current_user.nickname}' has successfully retrieved "
        f"all followers of user with id '{user_id}'"
    )
    return result


@followers.get("/users/{user_id}/followings", response_model=Page[FollowingOut])
def get_followings(
    user_id: int,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = follower_service.get_followings_by_user_id(db, user_id, params.page, params.size)
    logger.info(
        f"User with the nickname '{current_user.nickname}' has successfully retrieved "
        f"all followings of user with id '{user_id}'"
    )
    return result


@followers.post("/follow/{id_user_followed}", status_code=status.HTTP_201_CREATED)
def follow_user(
    id_user_followed: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    follower_service.follow_user(db, current_user.user_id, id_user_followed)
    logger.info(
        f"User with the nickname '{current_user.nickname}' has successfully followed "
        f"the user with id '{id_user_followed}'"
    )
    return Response(status_code=status.HTTP_201_CREATED)


@followers.delete("/unfollow/{id_user_followed}", status_code=status.HTTP_204_NO_CONTENT)
def unfollow_user(
    id_user_followed: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    follower_service.unfollow_user(db, current_user.user_id, id_user_followed)
    logger.info(
        f"User with the nickname '{current_user.nickname}' has successfully unfollowed "
        f"the user with id '{id_user_followed}'"
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
