from __future__ import annotations

from datetime import timedelta

import jwt

from rdb.core import config
from rdb.features.users.auth import encode_token, verify_token


def test_round_trip() -> None:
    assert verify_token(encode_token(2)) == 2


def test_expired_token() -> None:
    assert verify_token(encode_token(2, expires_in=timedelta(seconds=-5))) is None


def test_wrong_secret() -> None:
    token = jwt.encode({"sub": "2"}, "another-secret", algorithm=config.SESSION_ALGORITHM)
    assert verify_token(token) is None


def test_garbage() -> None:
    assert verify_token("not.a.jwt") is None


def test_subject_must_be_numeric() -> None:
    token = jwt.encode({"sub": "jsmith"}, config.SESSION_SECRET, algorithm=config.SESSION_ALGORITHM)
    assert verify_token(token) is None
