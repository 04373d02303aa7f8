from sqlalchemy import Column, Integer, String
from api.db.database import Base


class Category(Base):
    __tablename__ = "quiz_category"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(100), unique=True, nullable=False)
