"""Problem statement locking.

A lock is a signed, short-lived bearer token naming one problem statement and
one subject. Nothing is stored server-side: the issuer checks occupancy and
signs, and the verifier re-checks the signature, expiry, claims and occupancy
right before the registration insert. Capacity is therefore a soft cap; the
hard guarantee comes from the conditional insert that follows verification.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from enum import Enum
from typing import Callable, Optional

from itsdangerous import BadData, URLSafeSerializer

from problem_statements import (
    PROBLEM_STATEMENT_CAP,
    ProblemStatement,
    get_problem_statement_by_id,
)

logger = logging.getLogger(__name__)

LOCK_TOKEN_SALT = 'problem-statement-lock'
DEFAULT_LOCK_TTL = timedelta(minutes=5)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)


class LockError(str, Enum):
    UNKNOWN_STATEMENT = 'UnknownStatement'
    STATEMENT_FULL = 'StatementFull'
    INVALID_SIGNATURE = 'InvalidSignature'
    EXPIRED = 'Expired'
    MISMATCHED_CLAIM = 'MismatchedClaim'


class InvalidLockToken(ValueError):
    """Raised by the codec when a token is forged, corrupted or malformed."""


@dataclass(frozen=True)
class LockConfig:
    secret: str
    ttl: timedelta = DEFAULT_LOCK_TTL
    cap: int = PROBLEM_STATEMENT_CAP

    def __post_init__(self):
        if not isinstance(self.secret, str) or not self.secret.strip():
            raise ValueError('Problem statement lock secret is not configured')
        if self.ttl <= timedelta(0):
            raise ValueError('Lock TTL must be positive')
        if self.cap < 1:
            raise ValueError('Problem statement cap must be at least 1')


@dataclass(frozen=True)
class LockClaims:
    problem_statement_id: str
    subject_id: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class LockResult:
    error: Optional[LockError] = None
    token: Optional[str] = None
    claims: Optional[LockClaims] = None
    problem_statement: Optional[ProblemStatement] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def expires_at(self) -> Optional[datetime]:
        return self.claims.expires_at if self.claims else None


@dataclass(frozen=True)
class VerifyResult:
    error: Optional[LockError] = None
    claims: Optional[LockClaims] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are treated as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _truncate_to_millis(value: datetime) -> datetime:
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def _to_millis(value: datetime) -> int:
    return (_as_utc(value) - _EPOCH) // _MILLISECOND


def _from_millis(value: int) -> datetime:
    return _EPOCH + value * _MILLISECOND


def _now(now: Optional[datetime]) -> datetime:
    return _as_utc(now) if now is not None else datetime.now(UTC)


# Token codec

def _serializer(secret: str) -> URLSafeSerializer:
    return URLSafeSerializer(secret, salt=LOCK_TOKEN_SALT)


def encode_lock_token(claims: LockClaims, secret: str) -> str:
    payload = {
        'ps': claims.problem_statement_id,
        'sub': claims.subject_id,
        'iat': _to_millis(claims.issued_at),
        'exp': _to_millis(claims.expires_at),
    }
    return _serializer(secret).dumps(payload)


def _is_millis(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def decode_lock_token(token: str, secret: str) -> LockClaims:
    """Verify the MAC on ``token`` and return its claims.

    Raises :class:`InvalidLockToken` for anything that is not a token this
    server signed with ``secret``. Expiry is not checked here.
    """
    if not isinstance(token, str) or not token:
        raise InvalidLockToken('Lock token is missing')

    try:
        payload = _serializer(secret).loads(token)
    except BadData as e:
        raise InvalidLockToken('Lock token signature is invalid') from e

    if not isinstance(payload, dict):
        raise InvalidLockToken('Lock token payload is malformed')

    problem_statement_id = payload.get('ps')
    subject_id = payload.get('sub')
    issued_at = payload.get('iat')
    expires_at = payload.get('exp')

    if not isinstance(problem_statement_id, str) or not problem_statement_id:
        raise InvalidLockToken('Lock token payload is malformed')
    if not isinstance(subject_id, str) or not subject_id:
        raise InvalidLockToken('Lock token payload is malformed')
    if not _is_millis(issued_at) or not _is_millis(expires_at) or expires_at <= issued_at:
        raise InvalidLockToken('Lock token payload is malformed')

    return LockClaims(
        problem_statement_id=problem_statement_id,
        subject_id=subject_id,
        issued_at=_from_millis(issued_at),
        expires_at=_from_millis(expires_at),
    )


# Lock issuer

def issue_lock(
    problem_statement_id: str,
    subject_id,
    count_registrations: Callable[[str], int],
    config: LockConfig,
    now: Optional[datetime] = None,
) -> LockResult:
    """Mint a lock token if the statement exists and still has a free slot.

    ``count_registrations`` is read exactly once. No reservation is written:
    several callers may hold tokens for the last slot at the same time.
    """
    statement = get_problem_statement_by_id(problem_statement_id)
    if statement is None:
        return LockResult(error=LockError.UNKNOWN_STATEMENT)

    occupancy = count_registrations(statement.id)
    if occupancy >= config.cap:
        return LockResult(error=LockError.STATEMENT_FULL, problem_statement=statement)

    issued_at = _truncate_to_millis(_now(now))
    claims = LockClaims(
        problem_statement_id=statement.id,
        subject_id=str(subject_id),
        issued_at=issued_at,
        expires_at=_truncate_to_millis(issued_at + config.ttl),
    )
    token = encode_lock_token(claims, config.secret)
    return LockResult(token=token, claims=claims, problem_statement=statement)


# Lock verifier

def verify_and_consume(
    token: str,
    problem_statement_id: str,
    subject_id,
    current_occupancy: int,
    config: LockConfig,
    now: Optional[datetime] = None,
) -> VerifyResult:
    """Gate a registration write on a valid lock token.

    Checks run in order and stop at the first failure: signature, expiry,
    claim match, then capacity. ``current_occupancy`` must be read as close
    to the insert as possible. This function never writes anything.
    """
    try:
        claims = decode_lock_token(token, config.secret)
    except InvalidLockToken as e:
        logger.debug('Lock token rejected: %s', e)
        return VerifyResult(error=LockError.INVALID_SIGNATURE)

    if _now(now) >= claims.expires_at:
        return VerifyResult(error=LockError.EXPIRED, claims=claims)

    if (claims.problem_statement_id != problem_statement_id
            or claims.subject_id != str(subject_id)):
        return VerifyResult(error=LockError.MISMATCHED_CLAIM, claims=claims)

    if current_occupancy >= config.cap:
        return VerifyResult(error=LockError.STATEMENT_FULL, claims=claims)

    return VerifyResult(claims=claims)
