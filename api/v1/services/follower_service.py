import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.db.database import fits_id
from api.utils.exceptions import ConflictError, NotFoundError, ValidationError
from api.utils.pagination import empty_page, paginate
from api.v1.models.follower import Follower
from api.v1.models.user import User
from api.v1.schemas.follower import FollowerOut, FollowingOut

logger = logging.getLogger(__name__)


def find_edge(db: Session, follower_id: int, followed_id: int) -> Optional[Follower]:
    if not (fits_id(follower_id) and fits_id(followed_id)):
        return None
    return (
        db.query(Follower)
        .filter(Follower.follower_id == follower_id, Follower.followed_id == followed_id)
        .first()
    )


def get_followers_by_user_id(db: Session, user_id: int, page: int, size: int) -> dict:
    if not fits_id(user_id):
        return empty_page(page, size)
    query = (
        db.query(User)
        .join(Follower, Follower.follower_id == User.user_id)
        .filter(Follower.followed_id == user_id)
        .order_by(User.nickname.asc(), User.user_id.asc())
    )
    result = paginate(query, page, size)
    result["content"] = [FollowerOut.model_validate(user) for user in result["content"]]
    return result


def get_followings_by_user_id(db: Session, user_id: int, page: int, size: int) -> dict:
    if not fits_id(user_id):
        return empty_page(page, size)
    query = (
        db.query(User)
        .join(Follower, Follower.followed_id == User.user_id)
        .filter(Follower.follower_id == user_id)
        .order_by(User.nickname.asc(), User.user_id.asc())
    )
    result = paginate(query, page, size)
    result["content"] = [FollowingOut.model_validate(user) for user in result["content"]]
    return result


def follow_user(db: Session, follower_id: int, followed_id: int) -> None:
    if follower_id == followed_id:
        raise ValidationError("A user cannot follow themselves")

    if not fits_id(followed_id) or not db.query(User).filter(User.user_id == followed_id).first():
        logger.warning(f"Method follow_user: User with ID {followed_id} not found")
        raise NotFoundError("User not found")

    if find_edge(db, follower_id, followed_id):
        raise ConflictError("User already followed")

    db.add(Follower(follower_id=follower_id, followed_id=followed_id))
    try:
        db.commit()
    except IntegrityError:
        # a concurrent request inserted the same pair first
        db.rollback()
        logger.warning(
            f"Method follow_user: Edge {follower_id} -> {followed_id} already stored"
        )
        raise ConflictError("User already followed")


def unfollow_user(db: Session, follower_id: int, followed_id: int) -> None:
    edge = find_edge(db, follower_id, followed_id)
    if not edge:
        logger.warning(
            f"Method unfollow_user: User {follower_id} does not follow user {followed_id}"
        )
        raise NotFoundError("Follow relationship not found")

    db.delete(edge)
    db.commit()
