from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv
import os

load_dotenv(".env")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./quizz.db")

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create every table known to the models."""
    # models register themselves on Base.metadata when imported
    from api.v1.models import user, follower, category, level, quiz, question, answer, like, favourite  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


# widest integer the store accepts for keys, limits and offsets
MAX_ID = 2**63 - 1


def fits_id(value: int) -> bool:
    return -MAX_ID - 1 <= value <= MAX_ID
