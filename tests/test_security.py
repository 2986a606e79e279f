from __future__ import annotations

from datetime import timedelta

import pytest

from vidtube.config import settings
from vidtube.core.exceptions import BusinessError
from vidtube.core.security import (
    create_access_token,
    create_token,
    decode_access_token,
    hash_password,
    resolve_caller,
    resolve_optional_caller,
    verify_password,
)
from vidtube.i18n.codes import ErrorCode


def test_password_hashing() -> None:
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("anything", "")


def test_access_token_carries_identity() -> None:
    token = create_access_token("user-1", "alice", "alice@example.com")
    payload = decode_access_token(token)
    assert payload["sub"] == "user-1"
    assert payload["username"] == "alice"


def test_resolve_caller() -> None:
    token = create_access_token("user-1", "alice", "alice@example.com")
    assert resolve_caller(f"Bearer {token}") == "user-1"
    assert resolve_optional_caller(None) is None


@pytest.mark.parametrize(
    ("header", "code"),
    [
        (None, ErrorCode.AUTH_TOKEN_NOT_PROVIDED),
        ("Token abc", ErrorCode.AUTH_TOKEN_INVALID),
        ("Bearer not-a-jwt", ErrorCode.AUTH_TOKEN_INVALID),
    ],
)
def test_resolve_caller_rejects(header: str | None, code: ErrorCode) -> None:
    with pytest.raises(BusinessError) as exc_info:
        resolve_caller(header)
    assert exc_info.value.code == code


def test_expired_token() -> None:
    token = create_token(
        "user-1", settings.JWT_SECRET or "", "HS256", timedelta(seconds=-5)
    )
    with pytest.raises(BusinessError) as exc_info:
        resolve_caller(f"Bearer {token}")
    assert exc_info.value.code == ErrorCode.AUTH_TOKEN_EXPIRED
