from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, TIMESTAMP
from sqlalchemy.sql import func, expression
from sqlalchemy.orm import relationship
from api.db.database import Base


class Quiz(Base):
    __tablename__ = "quiz"

    quiz_id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    creator_id = Column(Integer, ForeignKey("user.user_id"), nullable=False, index=True)
    category_id = Column(
        Integer, ForeignKey("quiz_category.category_id"), nullable=False, index=True
    )
    level_id = Column(Integer, ForeignKey("quiz_level.level_id"), nullable=False, index=True)
    is_visible = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    img = Column(String(512), nullable=True)
    date_created = Column(TIMESTAMP, server_default=func.now(), index=True)

    creator = relationship("User", back_populates="quizzes")
    category = relationship("Category")
    level = relationship("Level")
    questions = relationship(
        "Question", back_populates="quiz", cascade="all, delete-orphan"
    )
    likes = relationship("QuizLike", back_populates="quiz", cascade="all, delete")
    favourites = relationship(
        "QuizFavourite", back_populates="quiz", cascade="all, delete"
    )
