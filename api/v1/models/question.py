from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from api.db.database import Base


class Question(Base):
    __tablename__ = "quiz_question"

    question_id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(
        Integer, ForeignKey("quiz.quiz_id", ondelete="CASCADE"), nullable=False, index=True
    )
    question = Column(Text, nullable=False)
    num_question = Column(Integer, nullable=False)  # display order within the quiz

    quiz = relationship("Quiz", back_populates="questions")
    answers = relationship(
        "Answer", back_populates="question", cascade="all, delete-orphan"
    )
