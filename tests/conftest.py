import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect

from app.models.user import User
from app.services.notifications import NotificationError
from app.services.notifications.mailer import AuthMailer
from app.services.store import UserStore
from main import create_app


class RecordingSender:
    def __init__(self):
        self.sent = []

    def send(self, to, subject, body):
        self.sent.append((to, subject, body))


class FailingSender:
    def __init__(self):
        self.attempts = 0

    def send(self, to, subject, body):
        self.attempts += 1
        raise NotificationError("mail server unavailable")


@pytest.fixture(autouse=True)
def mongo():
    connect(
        db="mern_auth_test",
        alias="default",
        host="mongodb://localhost",
        mongo_client_class=mongomock.MongoClient,
        tz_aware=True,
    )
    yield
    User.drop_collection()
    disconnect(alias="default")


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def store():
    return UserStore()


@pytest.fixture
def app(sender, store):
    app = create_app(lifespan=None)
    app.state.user_store = store
    app.state.mailer = AuthMailer(sender, client_url="http://localhost:5173")
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def signup(client):
    def _signup(email="a@x.com", password="Secret1!", name="Ann"):
        return client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
    return _signup


@pytest.fixture
def failing_sender(app):
    failing = FailingSender()
    app.state.mailer = AuthMailer(failing, client_url="http://localhost:5173")
    return failing
