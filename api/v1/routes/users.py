from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from api.db.database import get_db
from api.utils.authentication import get_current_user
from api.utils.authorization import require_permission
from api.utils.pagination import PageParams
from api.v1.models.user import User
from api.v1.schemas.common import Message, Page
from api.v1.schemas.user import UserDetails, UserProfile
from api.v1.services import user_service

users = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@users.get("/{user_id}/profile", response_model=UserProfile)
def get_user_profile(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = user_service.get_user_profile(db, user_id, current_user)
    logger.info(
        f"User with the nickname '{current_user.nickname}' has successfully retrieved "
        f"the profile of user with id '{user_id}'"
    )
    return profile


@users.get("", response_model=Page[UserDetails])
def get_filtered_users(
    nickname: str = "",
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    result = user_service.get_filtered_users(db, nickname, params.page, params.size)
    logger.info(
        f"User with the nickname '{current_user.nickname}' has successfully retrieved users "
        f"using params nickname '{nickname}', page '{params.page}' and size '{params.size}'"
    )
    return result


@users.put("/{user_id}/ban", response_model=Message)
def ban_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:ban")),
):
    user_service.ban_user(db, user_id, current_user)
    return {"message": "User banned successfully"}


@users.put("/{user_id}/unban", response_model=Message)
def unban_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:unban")),
):
    user_service.unban_user(db, user_id, current_user)
    return {"message": "User unbanned successfully"}


@users.put("/{user_id}/promote-to-admin", response_model=Message)
def promote_user_to_admin(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:promote-to-admin")),
):
    user_service.promote_user_to_admin(db, user_id, current_user)
    return {"message": "User promoted to admin successfully"}


@users.put("/{user_id}/promote-to-chief", response_model=Message)
def promote_admin_to_chief(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:promote-to-chief")),
):
    user_service.promote_admin_to_chief(db, user_id, current_user)
    return {"message": "Admin promoted to chief successfully"}


@users.put("/{user_id}/demote-to-user", response_model=Message)
def demote_admin_to_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:demote-to-user")),
):
    user_service.demote_admin_to_user(db, user_id, current_user)
    return {"message": "Admin demoted to user successfully"}
