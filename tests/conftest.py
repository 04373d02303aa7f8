import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.db.database import Base, get_db, init_db
from api.utils.authentication import create_access_token
from api.v1.models.category import Category
from api.v1.models.level import Level
from api.v1.models.quiz import Quiz
from api.v1.models.user import User, Role
from main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reference_data(db):
    db.add_all(
        [
            Category(category_id=1, label="Geography"),
            Category(category_id=2, label="Science"),
            Level(level_id=1, label="Easy"),
            Level(level_id=2, label="Medium"),
        ]
    )
    db.commit()


@pytest.fixture
def make_user(db):
    def _make(nickname, role=Role.user, is_banned=False):
        user = User(
            nickname=nickname,
            email=f"{nickname.lower()}@quizz.io",
            role=role,
            is_banned=is_banned,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_quiz(db):
    def _make(creator, title, category_id=1, level_id=1, is_visible=True):
        quiz = Quiz(
            title=title,
            creator_id=creator.user_id,
            category_id=category_id,
            level_id=level_id,
            is_visible=is_visible,
        )
        db.add(quiz)
        db.commit()
        db.refresh(quiz)
        return quiz

    return _make


@pytest.fixture
def auth_header():
    def _header(user):
        token = create_access_token({"id": user.user_id})
        return {"Authorization": f"Bearer {token}"}

    return _header
