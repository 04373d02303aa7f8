from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from api.db.database import Base


class Follower(Base):
    __tablename__ = "follower"
    __table_args__ = (
        CheckConstraint("follower_id <> followed_id", name="ck_follower_not_self"),
    )

    follower_id = Column(
        Integer, ForeignKey("user.user_id", ondelete="CASCADE"), primary_key=True
    )
    followed_id = Column(
        Integer, ForeignKey("user.user_id", ondelete="CASCADE"), primary_key=True, index=True
    )

    follower = relationship("User", foreign_keys=[follower_id])
    followed = relationship("User", foreign_keys=[followed_id])
