import jwt

from roadtrippi.config import get_settings
from roadtrippi.core.jwt import create_access_token, decode_token


def test_issue_and_decode_token():
    token = create_access_token("42", expires_minutes=5)
    payload = decode_token(token)
    assert payload["sub"] == "42"
    assert "exp" in payload


def test_expired_token_is_rejected():
    token = create_access_token("42", expires_minutes=-1)
    assert decode_token(token) is None


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"sub": "42"}, "some-other-secret-that-is-long-enough", algorithm="HS256")
    assert decode_token(token) is None


def test_garbage_token_is_rejected():
    assert decode_token("not.a.token") is None


def test_uses_configured_algorithm():
    token = create_access_token("7")
    header = jwt.get_unverified_header(token)
    assert header["alg"] == get_settings().security.jwt_algorithm
