from datetime import timedelta

import pytest
from jose import jwt

from app.services.auth import (
    InvalidSessionToken,
    create_session_token,
    decode_session_token,
    generate_reset_token,
    generate_verification_code,
    hash_password,
    verify_password,
)
from app.utils.config import settings


def test_verification_codes_are_six_digits():
    for _ in range(200):
        code = generate_verification_code()
        assert len(code) == 6
        assert 100000 <= int(code) <= 999999


def test_reset_tokens_are_random_hex():
    tokens = {generate_reset_token() for _ in range(50)}
    assert len(tokens) == 50
    for token in tokens:
        assert len(token) == 40
        int(token, 16)


def test_password_hash_is_salted_bcrypt():
    first, second = hash_password("Secret1!"), hash_password("Secret1!")
    assert first != second
    assert first.startswith("$2b$10$")
    assert verify_password("Secret1!", first)
    assert not verify_password("secret1!", first)


def test_session_token_round_trip_and_lifetime():
    token = create_session_token("user-1")
    assert decode_session_token(token) == "user-1"

    claims = jwt.get_unverified_claims(token)
    assert claims["exp"] - claims["iat"] == settings.session_token_expires_days * 24 * 60 * 60


def test_expired_session_token_is_invalid():
    token = create_session_token("user-1", expires_delta=timedelta(seconds=-1))
    with pytest.raises(InvalidSessionToken):
        decode_session_token(token)


def test_token_of_other_type_is_invalid():
    token = jwt.encode({"sub": "user-1", "typ": "refresh"}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    with pytest.raises(InvalidSessionToken):
        decode_session_token(token)
