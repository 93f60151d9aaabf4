"""
Pytest configuration and fixtures for recruitment tests
"""
from datetime import date, datetime, time
import pytest
from recruitment import create_app, db
from recruitment.models.application import Application
from recruitment.models.interview import Interview
from recruitment.models.room import Interviewer, Room
from recruitment.services.notification_queue import get_notification_queue


INTERVIEW_DAY = date(2025, 3, 14)

FULL_SCORES = {
    'technical': 8,
    'communication': 7,
    'teamwork': 9,
    'motivation': 8,
    'overall': 8,
}


@pytest.fixture(scope='session')
def app():
    """Create and configure a test application instance"""
    app = create_app('testing')

    # Establish an application context
    ctx = app.app_context()
    ctx.push()

    yield app

    ctx.pop()


@pytest.fixture(scope='session')
def _db(app):
    """Create test database"""
    db.create_all()
    yield db
    db.session.remove()


@pytest.fixture(scope='function', autouse=True)
def cleanup_db(_db):
    """Clean up database after each test"""
    yield

    # Rollback any open transactions
    _db.session.remove()

    for table in reversed(_db.metadata.sorted_tables):
        _db.session.execute(table.delete())
    _db.session.commit()


@pytest.fixture(scope='function')
def db_session(_db):
    """Provide the database session for tests"""
    return _db.session


@pytest.fixture
def client(app):
    """Create a test client"""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Create a test CLI runner"""
    return app.test_cli_runner()


class FakeTransport:
    """Mail transport that records sends and fails on demand"""

    def __init__(self):
        self.sent = []
        self.fail_next = 0
        self.fail_always = False
        self.raise_error = None

    def send(self, to, subject, html_content, text_content=None):
        if self.raise_error:
            raise self.raise_error
        if self.fail_always or self.fail_next > 0:
            self.fail_next = max(self.fail_next - 1, 0)
            return False
        self.sent.append({'to': to, 'subject': subject, 'html': html_content})
        return True


@pytest.fixture
def transport(monkeypatch):
    """Swap the notification queue's mail transport for a FakeTransport"""
    fake = FakeTransport()
    monkeypatch.setattr(get_notification_queue(), 'transport', fake)
    return fake


@pytest.fixture
def room(db_session):
    """Create an active interview room with one interviewer"""
    room = Room(name='Lab 1', location='Building A', capacity=1, is_active=True)
    room.interviewers.append(Interviewer(name='Dana Interviewer', email='dana@example.com'))
    db_session.add(room)
    db_session.commit()
    return room


@pytest.fixture
def make_applications(db_session):
    """Factory creating approved applications"""
    counter = {'n': 0}

    def make(count=1):
        created = []
        for _ in range(count):
            counter['n'] += 1
            application = Application(
                first_name=f'Candidate{counter["n"]}',
                last_name='Test',
                email=f'candidate{counter["n"]}@example.com',
                status='approved'
            )
            db_session.add(application)
            created.append(application)
        db_session.commit()
        return created

    return make


@pytest.fixture
def make_interview(db_session, room, make_applications):
    """Factory creating an interview, optionally already scored"""
    counter = {'hour': 8}

    def make(result='pending', notified=False):
        counter['hour'] += 1
        application = make_applications(1)[0]
        interview = Interview(
            application=application,
            room=room,
            scheduled_at=datetime.combine(INTERVIEW_DAY, time(counter['hour'], 0)),
            status='scheduled',
            result='pending'
        )
        application.status = 'interview_scheduled'

        if result != 'pending':
            for field, value in FULL_SCORES.items():
                setattr(interview, field, value)
            interview.result = result
            interview.status = 'completed'
            interview.completed_at = datetime.utcnow()
            application.status = 'interviewed'

        if notified:
            interview.notification_sent = True
            interview.notified_at = datetime.utcnow()

        db_session.add(interview)
        db_session.commit()
        return interview

    return make


@pytest.fixture
def passed_interview(make_interview):
    return make_interview(result='passed')


@pytest.fixture
def failed_interview(make_interview):
    return make_interview(result='failed')
