from pydantic import BaseModel
from api.v1.models.user import Role


class UserProfile(BaseModel):
    user_id: int
    nickname: str
    email: str
    followers_count: int
    following_count: int
    created_quizzes_count: int
    liked_quizzes_count: int
    is_following: bool


class UserDetails(BaseModel):
    user_id: int
    nickname: str
    email: str
    role: Role
    is_banned: bool

    class Config:
        from_attributes = True
