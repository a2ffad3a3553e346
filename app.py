from flask import Flask, request, jsonify
from flask_limiter import Limiter
from flask_login import LoginManager, UserMixin, login_user, logout_user, login_required, current_user
from flask_sqlalchemy import SQLAlchemy
from flask_socketio import SocketIO
from werkzeug.security import generate_password_hash, check_password_hash
from sqlalchemy import func, insert, literal, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import validates
from functools import wraps
from urllib.parse import urlsplit
import hmac
import os
import uuid
from datetime import datetime, timedelta, UTC

from presentation import PRESENTATION_MAX_FILE_SIZE_BYTES, presentation_storage_path, validate_presentation
from problem_statements import PROBLEM_STATEMENT_CAP, PROBLEM_STATEMENTS, get_problem_statement_by_id
from registration_stats import (
    APPROVAL_STATUS_ORDER,
    build_registration_stats,
    export_statement_results_csv,
    statement_occupancy,
)
from statement_lock import LockConfig, LockError, issue_lock, verify_and_consume
from team_form import validate_team_submission


app = Flask(__name__)
app.config.from_mapping(
    SECRET_KEY='change-me-in-production',
    SQLALCHEMY_DATABASE_URI='sqlite:///hackathon.db',
    EVENT_TITLE='Foundathon 3.0',
    PROBLEM_LOCK_TOKEN_SECRET=None,
    PROBLEM_LOCK_TTL_SECONDS=300,
    PROBLEM_STATEMENT_CAP=PROBLEM_STATEMENT_CAP,
    STATS_API_KEY=None,
    STATS_EXCLUDED_EMAILS='',
    PRESENTATION_UPLOAD_FOLDER=os.path.join(app.instance_path, 'presentations'),
    RATELIMIT_ENABLED=True,
    RATELIMIT_STORAGE_URI='memory://',
    SOCKETIO_CORS_ALLOWED_ORIGINS='*',
    ADMIN_EMAIL=None,
    ADMIN_PASSWORD=None,
)
# HACKATHON_PROBLEM_LOCK_TOKEN_SECRET, HACKATHON_SQLALCHEMY_DATABASE_URI, ...
app.config.from_prefixed_env('HACKATHON')

BLOCKED_LOGIN_EMAIL_DOMAIN = '@srmist.edu.in'
MIN_PASSWORD_LENGTH = 8


def client_ip():
    for header in ('CF-Connecting-IP', 'X-Real-IP', 'X-Forwarded-For'):
        value = request.headers.get(header, '')
        first = next((part.strip() for part in value.split(',') if part.strip()), '')
        if first:
            return first
    return request.remote_addr or 'unknown'


def current_user_key():
    if current_user.is_authenticated:
        return f'user:{current_user.id}'
    return f'ip:{client_ip()}'


db = SQLAlchemy(app)
login_manager = LoginManager()
login_manager.init_app(app)
limiter = Limiter(client_ip, app=app, storage_uri=app.config['RATELIMIT_STORAGE_URI'])
socketio = SocketIO(
    app,
    cors_allowed_origins=app.config['SOCKETIO_CORS_ALLOWED_ORIGINS'],
    async_mode='threading',
)


# Models
class User(UserMixin, db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='participant')
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC))

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == 'admin'


class Team(db.Model):
    __tablename__ = 'teams'
    id = db.Column(db.String(36), primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)
    registration_email = db.Column(db.String(255))
    team_name = db.Column(db.String(100), nullable=False)
    team_type = db.Column(db.String(20), nullable=False)
    lead = db.Column(db.JSON, nullable=False)
    members = db.Column(db.JSON, nullable=False)
    member_count = db.Column(db.Integer, nullable=False)
    problem_statement_id = db.Column(db.String(20), nullable=False, index=True)
    problem_statement_locked_at = db.Column(db.DateTime)
    approval_status = db.Column(db.String(20), nullable=False, default='not_reviewed')
    presentation_file_name = db.Column(db.String(255))
    presentation_storage_path = db.Column(db.String(500))
    presentation_file_size_bytes = db.Column(db.Integer)
    presentation_uploaded_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC))
    updated_at = db.Column(db.DateTime, onupdate=lambda: datetime.now(UTC))

    owner = db.relationship('User', backref=db.backref('team', uselist=False))

    @validates('problem_statement_id')
    def validate_problem_statement_id(self, key, value):
        # Locking is final: the statement is set once at creation
        if self.problem_statement_id is not None and value != self.problem_statement_id:
            raise ValueError('Problem statement is locked and cannot be changed')
        return value

    @property
    def lead_name(self):
        return (self.lead or {}).get('name') or 'Unknown Lead'

    def to_summary(self):
        statement = get_problem_statement_by_id(self.problem_statement_id)
        return {
            'id': self.id,
            'teamName': self.team_name,
            'teamType': self.team_type,
            'leadName': self.lead_name,
            'memberCount': self.member_count,
            'problemStatementId': self.problem_statement_id,
            'problemStatementTitle': statement.title if statement else None,
            'approvalStatus': self.approval_status,
            'presentationSubmitted': bool(self.presentation_file_name),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at or self.created_at),
        }

    def to_detail(self):
        detail = self.to_summary()
        detail['lead'] = self.lead
        detail['members'] = self.members
        detail['presentationFileName'] = self.presentation_file_name
        detail['presentationUploadedAt'] = isoformat(self.presentation_uploaded_at)
        return detail


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return json_error('Unauthorized', 401)


# Helper functions
def isoformat(value):
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec='milliseconds')


def json_error(message, status, code=None, **extras):
    body = {'error': message}
    if code:
        body['code'] = code
    body.update(extras)
    return jsonify(body), status


def read_json_body():
    if not request.is_json:
        return None, json_error('Content-Type must be application/json.', 415)
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, json_error('Invalid JSON payload.', 400)
    return data, None


def credentials_payload():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else request.form


def safe_user_id(user_id):
    return str(user_id)[:8] if user_id is not None else None


def is_blocked_login_email(email):
    return isinstance(email, str) and email.strip().lower().endswith(BLOCKED_LOGIN_EMAIL_DOMAIN)


def statement_cap():
    return int(app.config['PROBLEM_STATEMENT_CAP'])


def config_string(key):
    # from_prefixed_env parses values as JSON, so a numeric secret arrives as an int
    value = app.config.get(key)
    return '' if value is None else str(value)


def lock_config():
    """Build the lock configuration; raises ValueError when misconfigured."""
    return LockConfig(
        secret=config_string('PROBLEM_LOCK_TOKEN_SECRET'),
        ttl=timedelta(seconds=int(app.config['PROBLEM_LOCK_TTL_SECONDS'])),
        cap=statement_cap(),
    )


def stats_excluded_emails():
    raw = app.config.get('STATS_EXCLUDED_EMAILS') or ''
    if isinstance(raw, str):
        raw = raw.split(',')
    return sorted({email.strip().lower() for email in raw if email and email.strip()})


def count_registrations(problem_statement_id):
    return db.session.scalar(
        select(func.count(Team.id)).where(Team.problem_statement_id == problem_statement_id)
    )


def registration_counts():
    rows = db.session.execute(
        select(Team.problem_statement_id, func.count(Team.id)).group_by(Team.problem_statement_id)
    ).all()
    return {problem_statement_id: count for problem_statement_id, count in rows}


def insert_registration_if_under_cap(values, cap):
    """Insert a team only while its statement is below ``cap``.

    The occupancy check and the insert are one INSERT ... SELECT statement.
    That is atomic on SQLite, where writers are serialized by the database
    lock. Under READ COMMITTED on a server database two writers can both
    count below the cap, so such deployments need SERIALIZABLE isolation.
    Returns the new Team, or None when the statement was already full.
    """
    table = Team.__table__
    occupancy = (
        select(func.count(table.c.id))
        .where(table.c.problem_statement_id == values['problem_statement_id'])
        .correlate(None)
        .scalar_subquery()
    )
    columns = list(values)
    source = select(*[literal(values[c], type_=table.c[c].type) for c in columns]).where(occupancy < cap)

    result = db.session.execute(insert(table).from_select(columns, source))
    if result.rowcount != 1:
        db.session.rollback()
        return None
    db.session.commit()
    return db.session.get(Team, values['id'])


def broadcast_occupancy(problem_statement_id):
    registered = count_registrations(problem_statement_id)
    try:
        socketio.emit('statement_occupancy_changed', {
            'problemStatementId': problem_statement_id,
            'registeredTeams': registered,
            'remainingTeams': max(statement_cap() - registered, 0),
        })
    except Exception as e:
        app.logger.warning('Error emitting occupancy update: %s', e)


def get_owned_team(team_id):
    team = db.session.get(Team, team_id)
    if team is None or team.owner_id != current_user.id:
        return None
    return team


def same_origin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = request.host_url.rstrip('/')
        origin = request.headers.get('Origin')
        referer = request.headers.get('Referer')

        if origin and origin.strip() == expected:
            return f(*args, **kwargs)
        if referer:
            parts = urlsplit(referer)
            if f'{parts.scheme}://{parts.netloc}' == expected:
                return f(*args, **kwargs)

        app.logger.warning('security.csrf_rejected route=%s ip=%s has_origin=%s has_referer=%s',
                           request.path, client_ip(), bool(origin), bool(referer))
        return json_error('CSRF validation failed.', 403, code='CSRF_FAILED')
    return decorated_function


def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return json_error('Unauthorized', 401)
        if not current_user.is_admin:
            return json_error('Access denied', 403)
        return f(*args, **kwargs)
    return decorated_function


def stats_access_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_user.is_authenticated and current_user.is_admin:
            return f(*args, **kwargs)

        expected_key = config_string('STATS_API_KEY').strip()
        provided_key = request.headers.get('X-Stats-Key', '')
        if expected_key and provided_key and hmac.compare_digest(
                expected_key.encode('utf-8'), provided_key.encode('utf-8')):
            return f(*args, **kwargs)

        return json_error('Unauthorized', 401)
    return decorated_function


LOCK_ERROR_RESPONSES = {
    LockError.UNKNOWN_STATEMENT: (404, 'Problem statement not found.'),
    LockError.STATEMENT_FULL: (409, 'This problem statement is full. Please pick another one.'),
    LockError.INVALID_SIGNATURE: (400, 'Problem statement lock is invalid. Please lock again.'),
    LockError.EXPIRED: (409, 'Problem statement lock expired. Please lock again.'),
    LockError.MISMATCHED_CLAIM: (403, 'Problem statement lock does not match this registration.'),
}


def lock_not_configured():
    app.logger.error('PROBLEM_LOCK_TOKEN_SECRET is not configured')
    return json_error('Problem statement locking is not configured.', 500)


@app.after_request
def no_store(response):
    if response.mimetype == 'application/json':
        response.headers['Cache-Control'] = 'no-store'
    return response


@app.errorhandler(429)
def rate_limited(e):
    app.logger.warning('security.rate_limit_denied route=%s ip=%s user=%s limit=%s',
                       request.path, client_ip(),
                       safe_user_id(current_user.get_id()) if current_user.is_authenticated else None,
                       getattr(e, 'description', ''))
    return json_error('Too many requests. Please try again later.', 429, code='RATE_LIMITED')


# Routes
@app.route('/signup', methods=['POST'])
@limiter.limit('20 per 10 minutes')
def signup():
    data = credentials_payload()
    email = str(data.get('email') or '').strip().lower()
    password = str(data.get('password') or '')

    if not email or '@' not in email:
        return json_error('A valid email is required', 400)
    if is_blocked_login_email(email):
        return json_error('SRM email addresses cannot be used to sign in', 403, code='SRM_EMAIL_BLOCKED')
    if len(password) < MIN_PASSWORD_LENGTH:
        return json_error(f'Password must be at least {MIN_PASSWORD_LENGTH} characters', 400)
    if User.query.filter_by(email=email).first():
        return json_error('An account with this email already exists', 409)

    user = User(email=email, role='participant')
    user.set_password(password)
    try:
        db.session.add(user)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.error('Failed to create user: %s', e)
        return json_error('Failed to create account', 500)

    login_user(user)
    return jsonify({'success': True, 'user': {'id': user.id, 'email': user.email, 'role': user.role}}), 201


@app.route('/login', methods=['POST'])
@limiter.limit('20 per 10 minutes')
def login():
    data = credentials_payload()
    email = str(data.get('email') or '').strip().lower()
    password = str(data.get('password') or '')

    if is_blocked_login_email(email):
        return json_error('SRM email addresses cannot be used to sign in', 403, code='SRM_EMAIL_BLOCKED')

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return json_error('Invalid email or password', 401)

    login_user(user)
    return jsonify({'success': True, 'user': {'id': user.id, 'email': user.email, 'role': user.role}})


@app.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True})


@app.route('/api/problem-statements')
def list_problem_statements():
    occupancy = {row['problemStatementId']: row
                 for row in statement_occupancy(registration_counts(), statement_cap())}
    statements = []
    for statement in PROBLEM_STATEMENTS:
        row = occupancy[statement.id]
        statements.append({
            **statement.to_dict(),
            'cap': row['cap'],
            'registeredTeams': row['registeredTeams'],
            'remainingTeams': row['remainingTeams'],
            'isFull': row['isFull'],
        })
    return jsonify({'problemStatements': statements})


@app.route('/api/problem-statements/lock', methods=['POST'])
@limiter.limit('40 per 10 minutes')
@limiter.limit('10 per 10 minutes', key_func=current_user_key)
@same_origin_required
@login_required
def lock_problem_statement():
    data, error_response = read_json_body()
    if error_response:
        return error_response

    problem_statement_id = data.get('problemStatementId')
    if not isinstance(problem_statement_id, str) or not problem_statement_id.strip():
        return json_error('Problem statement id is required.', 400)

    if current_user.team is not None:
        return jsonify({
            'locked': False,
            'error': 'AlreadyRegistered',
            'message': 'You have already registered a team for this event.',
        }), 409

    try:
        config = lock_config()
    except ValueError:
        return lock_not_configured()

    result = issue_lock(problem_statement_id, current_user.id, count_registrations, config)
    if not result.ok:
        status, message = LOCK_ERROR_RESPONSES[result.error]
        app.logger.info('Lock rejected statement=%s user=%s reason=%s',
                        problem_statement_id, safe_user_id(current_user.id), result.error.value)
        return jsonify({'locked': False, 'error': result.error.value, 'message': message}), status

    app.logger.info('Lock issued statement=%s user=%s expires=%s',
                    result.problem_statement.id, safe_user_id(current_user.id), isoformat(result.expires_at))
    return jsonify({
        'locked': True,
        'lockToken': result.token,
        'lockExpiresAt': isoformat(result.expires_at),
        'problemStatement': result.problem_statement.to_dict(),
    })


@app.route('/api/register', methods=['GET'])
@login_required
def list_registrations():
    teams = Team.query.filter_by(owner_id=current_user.id).order_by(Team.created_at.desc()).all()
    return jsonify({'teams': [team.to_summary() for team in teams]})


@app.route('/api/register/<team_id>', methods=['GET'])
@login_required
def get_registration(team_id):
    team = get_owned_team(team_id)
    if team is None:
        return json_error('Team not found.', 404)
    return jsonify({'team': team.to_detail()})


@app.route('/api/register', methods=['POST'])
@limiter.limit('20 per 10 minutes')
@limiter.limit('5 per 10 minutes', key_func=current_user_key)
@same_origin_required
@login_required
def create_registration():
    data, error_response = read_json_body()
    if error_response:
        return error_response

    submission, error = validate_team_submission(data)
    if error:
        return json_error(error, 400)

    lock_token = data.get('lockToken')
    problem_statement_id = data.get('problemStatementId')
    if not isinstance(lock_token, str) or not lock_token or not isinstance(problem_statement_id, str):
        return json_error('Lock a problem statement before creating your team.', 400, code='LOCK_REQUIRED')

    statement = get_problem_statement_by_id(problem_statement_id)
    if statement is None:
        status, message = LOCK_ERROR_RESPONSES[LockError.UNKNOWN_STATEMENT]
        return json_error(message, status, code=LockError.UNKNOWN_STATEMENT.value)

    if Team.query.filter_by(owner_id=current_user.id).first():
        return json_error('You have already registered for this event.', 409)

    try:
        config = lock_config()
    except ValueError:
        return lock_not_configured()

    verification = verify_and_consume(
        lock_token, statement.id, current_user.id, count_registrations(statement.id), config
    )
    if not verification.ok:
        status, message = LOCK_ERROR_RESPONSES[verification.error]
        app.logger.info('Registration rejected statement=%s user=%s reason=%s',
                        statement.id, safe_user_id(current_user.id), verification.error.value)
        return json_error(message, status, code=verification.error.value)

    now = datetime.now(UTC)
    values = {
        'id': str(uuid.uuid4()),
        'owner_id': current_user.id,
        'registration_email': current_user.email,
        'team_name': submission.team_name,
        'team_type': submission.team_type,
        'lead': submission.lead.to_dict(),
        'members': [member.to_dict() for member in submission.members],
        'member_count': submission.member_count,
        'problem_statement_id': statement.id,
        'problem_statement_locked_at': verification.claims.issued_at,
        'approval_status': 'not_reviewed',
        'created_at': now,
        'updated_at': now,
    }

    try:
        team = insert_registration_if_under_cap(values, config.cap)
    except IntegrityError:
        db.session.rollback()
        return json_error('You have already registered for this event.', 409)
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.error('Failed to register team: %s', e)
        return json_error('Failed to register team.', 500)

    if team is None:
        status, message = LOCK_ERROR_RESPONSES[LockError.STATEMENT_FULL]
        app.logger.info('Registration lost the race for %s user=%s',
                        statement.id, safe_user_id(current_user.id))
        return json_error(message, status, code=LockError.STATEMENT_FULL.value)

    app.logger.info('Team registered team=%s statement=%s user=%s',
                    team.id, statement.id, safe_user_id(current_user.id))
    broadcast_occupancy(statement.id)
    return jsonify({'team': {'id': team.id}, 'teams': [team.to_summary()]}), 201


@app.route('/api/register/<team_id>', methods=['PATCH'])
@limiter.limit('60 per 10 minutes')
@limiter.limit('20 per 10 minutes', key_func=current_user_key)
@same_origin_required
@login_required
def update_registration(team_id):
    data, error_response = read_json_body()
    if error_response:
        return error_response

    team = get_owned_team(team_id)
    if team is None:
        return json_error('Team not found.', 404)

    submission, error = validate_team_submission(data)
    if error:
        return json_error(error, 400)

    try:
        if 'problemStatementId' in data:
            statement = get_problem_statement_by_id(data['problemStatementId'])
            team.problem_statement_id = statement.id if statement else data['problemStatementId']
    except ValueError as e:
        db.session.rollback()
        return json_error(str(e), 409, code='STATEMENT_LOCKED')

    team.team_name = submission.team_name
    team.team_type = submission.team_type
    team.lead = submission.lead.to_dict()
    team.members = [member.to_dict() for member in submission.members]
    team.member_count = submission.member_count

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.error('Failed to update team %s: %s', team_id, e)
        return json_error('Failed to update team.', 500)

    return jsonify({'team': team.to_detail()})


@app.route('/api/register/<team_id>', methods=['DELETE'])
@limiter.limit('60 per 10 minutes')
@limiter.limit('20 per 10 minutes', key_func=current_user_key)
@same_origin_required
@login_required
def delete_registration(team_id):
    team = get_owned_team(team_id)
    if team is None:
        return json_error('Team not found.', 404)

    problem_statement_id = team.problem_statement_id
    try:
        db.session.delete(team)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.error('Failed to remove team %s: %s', team_id, e)
        return json_error('Failed to remove team.', 500)

    broadcast_occupancy(problem_statement_id)
    teams = Team.query.filter_by(owner_id=current_user.id).all()
    return jsonify({'teams': [t.to_summary() for t in teams]})


@app.route('/api/register/<team_id>/presentation', methods=['POST'])
@limiter.limit('10 per hour')
@limiter.limit('5 per hour', key_func=current_user_key)
@same_origin_required
@login_required
def upload_presentation(team_id):
    team = get_owned_team(team_id)
    if team is None:
        return json_error('Team not found.', 404)
    if team.presentation_file_name:
        return json_error('Presentation already submitted.', 409)

    file = request.files.get('file')
    if not file or not file.filename:
        return json_error('No file uploaded', 400)

    data = file.stream.read(PRESENTATION_MAX_FILE_SIZE_BYTES + 1)
    error = validate_presentation(file.filename, file.mimetype, data)
    if error:
        return json_error(error, 400)

    relative_path, full_path = presentation_storage_path(
        app.config['PRESENTATION_UPLOAD_FOLDER'], team.id, file.filename
    )
    try:
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, 'wb') as f:
            f.write(data)
    except OSError as e:
        app.logger.error('Failed to store presentation for team %s: %s', team.id, e)
        return json_error('Failed to store presentation.', 500)

    team.presentation_file_name = os.path.basename(full_path)
    team.presentation_storage_path = relative_path
    team.presentation_file_size_bytes = len(data)
    team.presentation_uploaded_at = datetime.now(UTC)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.error('Failed to record presentation for team %s: %s', team.id, e)
        return json_error('Failed to store presentation.', 500)

    return jsonify({'team': team.to_detail()})


@app.route('/api/stats/registrations')
@stats_access_required
def registration_stats():
    stats = build_registration_stats(Team.query.all(), stats_excluded_emails(), statement_cap())
    stats['event']['eventTitle'] = app.config['EVENT_TITLE']
    return jsonify(stats)


@app.route('/api/stats/registrations/export')
@stats_access_required
def export_registrations():
    excluded = set(stats_excluded_emails())
    teams = [team for team in Team.query.all()
             if (team.registration_email or '').strip().lower() not in excluded]
    content = export_statement_results_csv(teams, statement_cap())
    filename = f"{app.config['EVENT_TITLE'].replace(' ', '_')}_registrations.csv"
    return jsonify({
        'success': True,
        'filename': filename,
        'content': content,
    })


@app.route('/api/admin/teams/<team_id>/approval', methods=['POST'])
@same_origin_required
@admin_required
def set_team_approval(team_id):
    data, error_response = read_json_body()
    if error_response:
        return error_response

    status = data.get('status')
    if status not in APPROVAL_STATUS_ORDER:
        return json_error(f'Status must be one of: {", ".join(APPROVAL_STATUS_ORDER)}', 400)

    team = db.session.get(Team, team_id)
    if team is None:
        return json_error('Team not found.', 404)

    team.approval_status = status
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        return json_error(str(e), 500)

    return jsonify({'success': True, 'team': team.to_summary()})


def init_db():
    with app.app_context():
        # Only create tables if they don't exist, don't drop existing data
        db.create_all()

        admin_email = (app.config.get('ADMIN_EMAIL') or '').strip().lower()
        admin_password = app.config.get('ADMIN_PASSWORD')
        if admin_email and admin_password and not User.query.filter_by(email=admin_email).first():
            admin = User(email=admin_email, role='admin')
            admin.set_password(admin_password)
            db.session.add(admin)
            try:
                db.session.commit()
            except SQLAlchemyError as e:
                app.logger.error('Error initializing database: %s', e)
                db.session.rollback()
                raise


if __name__ == '__main__':
    lock_config()
    init_db()
    socketio.run(app, debug=False, host='0.0.0.0', port=5000)
