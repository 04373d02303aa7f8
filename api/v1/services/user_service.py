import logging

from sqlalchemy.orm import Session

from api.db.database import fits_id
from api.utils.exceptions import ConflictError, NotFoundError, ValidationError
from api.utils.pagination import paginate
from api.v1.models.follower import Follower
from api.v1.models.like import QuizLike
from api.v1.models.quiz import Quiz
from api.v1.models.user import User, Role
from api.v1.schemas.user import UserDetails, UserProfile

logger = logging.getLogger(__name__)


def get_user_or_404(db: Session, user_id: int, current_user: User, method: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first() if fits_id(user_id) else None
    if not user:
        logger.warning(
            f"Method {method}: User with ID {user_id} not found. "
            f"Current User nickname: {current_user.nickname}"
        )
        raise NotFoundError("User not found")
    return user


def get_user_profile(db: Session, user_id: int, current_user: User) -> UserProfile:
    user = get_user_or_404(db, user_id, current_user, "get_user_profile")

    followers_count = db.query(Follower).filter(Follower.followed_id == user_id).count()
    following_count = db.query(Follower).filter(Follower.follower_id == user_id).count()
    created_quizzes_count = (
        db.query(Quiz).filter(Quiz.creator_id == user_id, Quiz.is_visible.is_(True)).count()
    )
    liked_quizzes_count = (
        db.query(QuizLike)
        .join(Quiz, Quiz.quiz_id == QuizLike.quiz_id)
        .filter(QuizLike.user_id == user_id, Quiz.is_visible.is_(True))
        .count()
    )
    is_following = (
        db.query(Follower)
        .filter(
            Follower.follower_id == current_user.user_id,
            Follower.followed_id == user_id,
        )
        .first()
        is not None
    )

    return UserProfile(
        user_id=user.user_id,
        nickname=user.nickname,
        email=user.email,
        followers_count=followers_count,
        following_count=following_count,
        created_quizzes_count=created_quizzes_count,
        liked_quizzes_count=liked_quizzes_count,
        is_following=is_following,
    )


def get_filtered_users(db: Session, nickname: str, page: int, size: int) -> dict:
    query = db.query(User).order_by(User.nickname.asc(), User.user_id.asc())
    if nickname:
        query = query.filter(User.nickname.icontains(nickname, autoescape=True))

    result = paginate(query, page, size)
    result["content"] = [UserDetails.model_validate(user) for user in result["content"]]
    return result


def ban_user(db: Session, user_id: int, current_user: User) -> None:
    """Ban a user, remembering their role so unban can give it back."""
    user = get_user_or_404(db, user_id, current_user, "ban_user")

    if user.is_banned:
        raise ConflictError("User is already banned")
    if user.role == Role.chief:
        logger.warning(
            f"Method ban_user: '{current_user.nickname}' tried to ban chief with ID {user_id}"
        )
        raise ValidationError("A chief cannot be banned")

    user.role_before_ban = user.role
    user.role = Role.user
    user.is_banned = True
    db.commit()

    logger.info(
        f"Method ban_user: User with ID {user_id} banned by '{current_user.nickname}'"
    )


def unban_user(db: Session, user_id: int, current_user: User) -> None:
    user = get_user_or_404(db, user_id, current_user, "unban_user")

    if not user.is_banned:
        raise ConflictError("User is not banned")

    user.role = user.role_before_ban or Role.user
    user.role_before_ban = None
    user.is_banned = False
    db.commit()

    logger.info(
        f"Method unban_user: User with ID {user_id} unbanned and restored to role "
        f"'{user.role.value}' by '{current_user.nickname}'"
    )


def _change_role(
    db: Session, user_id: int, current_user: User, source: Role, target: Role, method: str
) -> None:
    user = get_user_or_404(db, user_id, current_user, method)

    if user.is_banned:
        raise ConflictError("User is banned")
    if user.role != source:
        logger.warning(
            f"Method {method}: User with ID {user_id} has role '{user.role.value}', "
            f"expected '{source.value}'. Current User nickname: {current_user.nickname}"
        )
        raise ConflictError(f"User must have role '{source.value}'")

    user.role = target
    db.commit()

    logger.info(
        f"Method {method}: User with ID {user_id} moved from '{source.value}' to "
        f"'{target.value}' by '{current_user.nickname}'"
    )


def promote_user_to_admin(db: Session, user_id: int, current_user: User) -> None:
    _change_role(db, user_id, current_user, Role.user, Role.admin, "promote_user_to_admin")


def promote_admin_to_chief(db: Session, user_id: int, current_user: User) -> None:
    _change_role(db, user_id, current_user, Role.admin, Role.chief, "promote_admin_to_chief")


def demote_admin_to_user(db: Session, user_id: int, current_user: User) -> None:
    _change_role(db, user_id, current_user, Role.admin, Role.user, "demote_admin_to_user")
