import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timesheets.core.context import CurrentCaller
from timesheets.db import models, session
from timesheets.db.session import init_db
from timesheets.main import app
from timesheets.schemas.employee import EmployeeCreate
from timesheets.services.directory import EmployeeDirectory
from timesheets.services.store import TimesheetStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    yield engine
    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    init_db(bind=engine, db=db)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def directory(db):
    return EmployeeDirectory(db)


@pytest.fixture
def store(db, directory):
    return TimesheetStore(db, directory)


@pytest.fixture
def alice(directory):
    return directory.add(EmployeeCreate(user_name="alice", name="Alice Example"))


@pytest.fixture
def caller(alice):
    return CurrentCaller(employee=alice)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[session.get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    def _login(user_name, password):
        response = client.post("/auth/token", data={"username": user_name, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
