import pytest

from app import create_app
from config import TestConfig
from extensions import db, socketio
from livequiz.models import Question, Quiz


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user over the API; returns ``(user, token)``."""
    def _register(username="alice", email=None, password="secret123"):
        res = client.post("/api/auth/register", json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
        })
        assert res.status_code == 201, res.get_json()
        data = res.get_json()["data"]
        return data["user"], data["token"]
    return _register


@pytest.fixture
def make_quiz(app):
    """Insert a quiz directly; returns its id."""
    def _make_quiz(n_questions=3, title="General", time_limit=30, points=100):
        with app.app_context():
            quiz = Quiz(title=title, category="General Knowledge", difficulty="easy")
            db.session.add(quiz)
            db.session.flush()
            for i in range(n_questions):
                db.session.add(Question(
                    quiz_id=quiz.id,
                    position=i + 1,
                    question=f"Question {i + 1}?",
                    options=["A", "B", "C", "D"],
                    correct_answer=i % 4,
                    time_limit=time_limit,
                    points=points,
                ))
            db.session.commit()
            return quiz.id
    return _make_quiz


@pytest.fixture
def socket_client(app):
    clients = []

    def _connect(token=None):
        kwargs = {"auth": {"token": token}} if token else {}
        c = socketio.test_client(app, **kwargs)
        clients.append(c)
        return c

    yield _connect
    for c in clients:
        if c.is_connected():
            c.disconnect()


def received(sock, name):
    """Payloads of every ``name`` event the test client has received."""
    return [msg["args"][0] for msg in sock.get_received() if msg["name"] == name]
