from sqlalchemy import Column, Integer, ForeignKey
from sqlalchemy.orm import relationship
from api.db.database import Base


class QuizLike(Base):
    __tablename__ = "quiz_like"

    user_id = Column(Integer, ForeignKey("user.user_id", ondelete="CASCADE"), primary_key=True)
    quiz_id = Column(
        Integer, ForeignKey("quiz.quiz_id", ondelete="CASCADE"), primary_key=True, index=True
    )

    user = relationship("User", back_populates="likes")
    quiz = relationship("Quiz", back_populates="likes")
