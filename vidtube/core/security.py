from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from vidtube.config import settings
from vidtube.core.exceptions import BusinessError
from vidtube.i18n.codes import ErrorCode

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _get_jwt_config() -> tuple[str, str]:
    secret = settings.JWT_SECRET
    algorithm = settings.JWT_ALGORITHM
    if not secret or not algorithm:
        raise RuntimeError("JWT_SECRET or JWT_ALGORITHM is not set")
    return secret, algorithm


def _get_refresh_config() -> tuple[str, str]:
    secret = settings.REFRESH_TOKEN_SECRET
    algorithm = settings.JWT_ALGORITHM
    if not secret or not algorithm:
        raise RuntimeError("REFRESH_TOKEN_SECRET or JWT_ALGORITHM is not set")
    return secret, algorithm


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(password, hashed)


def create_token(
    subject: str,
    secret: str,
    algorithm: str,
    expires_in: timedelta,
    claims: Optional[dict[str, object]] = None,
) -> str:
    now = datetime.now(timezone.utc)
    payload: dict[str, object] = dict(claims or {})
    payload.update({"sub": subject, "iat": now, "exp": now + expires_in})
    return jwt.encode(payload, secret, algorithm=algorithm)


def create_access_token(user_id: str, username: str, email: str) -> str:
    secret, algorithm = _get_jwt_config()
    return create_token(
        user_id,
        secret,
        algorithm,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        claims={"username": username, "email": email},
    )


def create_refresh_token(user_id: str) -> str:
    secret, algorithm = _get_refresh_config()
    return create_token(
        user_id,
        secret,
        algorithm,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        claims={"jti": uuid4().hex},
    )


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise BusinessError(ErrorCode.AUTH_TOKEN_NOT_PROVIDED)
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise BusinessError(ErrorCode.AUTH_TOKEN_INVALID)
    return token


def decode_token(token: str, secret: str, algorithm: str) -> dict[str, object]:
    if not token:
        raise BusinessError(ErrorCode.AUTH_TOKEN_NOT_PROVIDED)
    try:
        payload: dict[str, object] = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"verify_aud": False},
        )
        return payload
    except ExpiredSignatureError as exc:
        raise BusinessError(ErrorCode.AUTH_TOKEN_EXPIRED) from exc
    except JWTError as exc:
        raise BusinessError(ErrorCode.AUTH_TOKEN_INVALID) from exc


def decode_access_token(token: str) -> dict[str, object]:
    secret, algorithm = _get_jwt_config()
    return decode_token(token, secret, algorithm)


def decode_refresh_token(token: str) -> dict[str, object]:
    secret, algorithm = _get_refresh_config()
    return decode_token(token, secret, algorithm)


def resolve_caller(authorization: Optional[str]) -> str:
    """Map an Authorization header onto the caller's user id."""
    token = extract_bearer_token(authorization)
    payload = decode_access_token(token)
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise BusinessError(ErrorCode.AUTH_TOKEN_INVALID)
    return subject


def resolve_optional_caller(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    return resolve_caller(authorization)
