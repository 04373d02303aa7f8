from pydantic import BaseModel


class FollowerOut(BaseModel):
    user_id: int
    nickname: str

    class Config:
        from_attributes = True


class FollowingOut(BaseModel):
    user_id: int
    nickname: str

    class Config:
        from_attributes = True
