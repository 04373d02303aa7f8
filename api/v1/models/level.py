from sqlalchemy import Column, Integer, String
from api.db.database import Base


class Level(Base):
    __tablename__ = "quiz_level"

    level_id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(100), unique=True, nullable=False)
