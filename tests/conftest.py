"""
Pytest configuration and fixtures for testing the errands tracking API.
"""

import os
import sys
from datetime import datetime, timedelta
import jwt
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from errands import create_app, db, limiter  # noqa: E402
from errands.models import Task, TaskStatus, User  # noqa: E402

fake = Faker()

TEST_SECRET = 'test-secret-key-for-testing'

# Lagos, used as the default pickup point
PICKUP = (6.5244, 3.3792)


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing on a file-backed SQLite database."""
    db_file = tmp_path_factory.mktemp('db') / 'errands-test.db'
    os.environ['FLASK_ENV'] = 'testing'
    os.environ['JWT_SECRET_KEY'] = TEST_SECRET
    os.environ['DATABASE_URL'] = f'sqlite:///{db_file}'
    os.environ['REDEEM_RATE_LIMIT'] = '3 per minute'
    os.environ.pop('REDIS_URL', None)

    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        limiter.reset()
        yield db.session
        db.session.rollback()


def make_token(user_id, expires_in=timedelta(hours=1)):
    """Mint a JWT the way the identity provider does."""
    payload = {'user_id': user_id, 'exp': datetime.utcnow() + expires_in}
    return jwt.encode(payload, TEST_SECRET, algorithm='HS256')


def auth_header(user_id):
    return {'Authorization': f'Bearer {make_token(user_id)}'}


def _create_user(**overrides):
    """Helper to create a user with sensible defaults."""
    data = {
        'username': fake.user_name() + fake.pystr(min_chars=4, max_chars=6),
        'email': fake.unique.email(),
        'first_name': fake.first_name(),
    }
    data.update(overrides)
    user = User(**data)
    db.session.add(user)
    db.session.commit()
    return {'id': user.id, 'username': user.username, 'email': user.email}


@pytest.fixture
def creator(db_session):
    """User who posts tasks."""
    return _create_user()


@pytest.fixture
def runner(db_session):
    """User who runs tasks."""
    return _create_user()


@pytest.fixture
def outsider(db_session):
    """User with no relation to the test tasks."""
    return _create_user()


@pytest.fixture
def admin_user(db_session):
    return _create_user(is_admin=True)


@pytest.fixture
def make_task(db_session, creator, runner):
    """Factory for tasks in any status, with the Lagos pickup by default."""
    def _make_task(status=TaskStatus.IN_PROGRESS, pickup=PICKUP, with_runner=True):
        now = datetime.utcnow()
        task = Task(
            title=fake.sentence(nb_words=4),
            status=status,
            creator_id=creator['id'],
            runner_id=runner['id'] if with_runner and status != TaskStatus.POSTED else None,
            pickup_address='Lagos, Nigeria' if pickup else None,
            pickup_latitude=pickup[0] if pickup else None,
            pickup_longitude=pickup[1] if pickup else None,
            accepted_at=now if status != TaskStatus.POSTED else None,
            started_at=now if status == TaskStatus.IN_PROGRESS else None,
        )
        db.session.add(task)
        db.session.commit()
        return task.id
    return _make_task


@pytest.fixture
def task_id(make_task):
    """An in-progress task with a pickup point and an assigned runner."""
    return make_task()


@pytest.fixture
def creator_headers(creator):
    return auth_header(creator['id'])


@pytest.fixture
def runner_headers(runner):
    return auth_header(runner['id'])


@pytest.fixture
def outsider_headers(outsider):
    return auth_header(outsider['id'])


@pytest.fixture
def admin_headers(admin_user):
    return auth_header(admin_user['id'])


def offset_north(point, meters):
    """A point `meters` due north of `point` (1 deg latitude ~ 111,195 m)."""
    return (point[0] + meters / 111195.0, point[1])
