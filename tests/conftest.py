import os

import pytest

os.environ['HACKATHON_SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
os.environ['HACKATHON_PROBLEM_LOCK_TOKEN_SECRET'] = 'test-lock-secret'
os.environ['HACKATHON_STATS_API_KEY'] = 'stats-key'
os.environ['HACKATHON_RATELIMIT_ENABLED'] = 'false'
os.environ['HACKATHON_TESTING'] = 'true'

from app import Team, User, app as flask_app, db  # noqa: E402

ORIGIN_HEADERS = {'Origin': 'http://localhost'}
PASSWORD = 'correct-horse'


@pytest.fixture
def app(tmp_path):
    flask_app.config.update(
        PRESENTATION_UPLOAD_FOLDER=str(tmp_path / 'presentations'),
        PROBLEM_LOCK_TOKEN_SECRET='test-lock-secret',
        PROBLEM_STATEMENT_CAP=15,
        STATS_EXCLUDED_EMAILS='',
    )
    # No context stays pushed during requests: Flask-Login caches the user on g
    with flask_app.app_context():
        db.create_all()
    yield flask_app
    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_client(app):
    """Return a factory of logged-in test clients, one per participant."""
    def factory(email):
        client = app.test_client()
        response = client.post('/signup', json={'email': email, 'password': PASSWORD})
        assert response.status_code == 201
        return client
    return factory


@pytest.fixture
def seed_registrations(app):
    """Insert ``count`` teams against a statement, each owned by a fresh user."""
    def seed(problem_statement_id, count, **overrides):
        with app.app_context():
            _seed(problem_statement_id, count, overrides)

    def _seed(problem_statement_id, count, overrides):
        existing = User.query.count()
        for i in range(count):
            user = User(email=f'seed{existing + i}@example.com')
            user.set_password(PASSWORD)
            db.session.add(user)
            db.session.flush()
            fields = {
                'team_name': f'Seed Team {existing + i}',
                'team_type': 'non_srm',
                'lead': {'name': f'Lead {i}', 'contact': '9876543210'},
                'members': [{'name': 'A'}, {'name': 'B'}],
                'member_count': 3,
                'registration_email': user.email,
            }
            fields.update(overrides)
            db.session.add(Team(
                id=f'seed-{existing + i}',
                owner_id=user.id,
                problem_statement_id=problem_statement_id,
                **fields,
            ))
        db.session.commit()
    return seed


def team_payload(**overrides):
    payload = {
        'teamName': 'Null Pointers',
        'teamType': 'non_srm',
        'lead': {'name': 'Asha Rao', 'contact': '9876543210'},
        'members': [{'name': 'Ben Thomas'}, {'name': 'Chitra Iyer'}],
    }
    payload.update(overrides)
    return payload
