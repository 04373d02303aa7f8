from sqlalchemy import Column, String, Boolean, Enum, Integer, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from api.db.database import Base
import enum


class Role(str, enum.Enum):
    user = "user"
    admin = "admin"
    chief = "chief"


class User(Base):
    __tablename__ = "user"

    user_id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    nickname = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(Enum(Role), nullable=False, default=Role.user)
    is_banned = Column(Boolean, nullable=False, default=False)
    role_before_ban = Column(Enum(Role), nullable=True)  # restored on unban
    date_created = Column(TIMESTAMP, server_default=func.now())

    quizzes = relationship("Quiz", back_populates="creator")
    likes = relationship("QuizLike", back_populates="user", cascade="all, delete")
    favourites = relationship(
        "QuizFavourite", back_populates="user", cascade="all, delete"
    )
