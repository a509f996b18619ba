"""Unit tests for the PyJWT-backed access token codec."""

from __future__ import annotations

import jwt
import pytest
from freezegun import freeze_time

from authkit.infra.jwt.pyjwt_token_codec import JWTTokenCodec
from authkit.services._shared.errors import (
    InvalidSignatureError,
    InvalidTokenError,
    TokenExpiredError,
)
from authkit.services._shared.roles import Role

SECRET = "codec-test-secret-with-more-than-32-chars"
OTHER_SECRET = "another-secret-that-is-also-long-enough!!"


@pytest.fixture
def codec():
    return JWTTokenCodec(SECRET, 3600)


def test_issue_embeds_expected_claims(codec):
    with freeze_time("2024-01-01 00:00:00"):
        token = codec.issue(42, Role.MANAGER)
        claims = codec.verify(token)

    assert claims.subject_id == 42
    assert claims.role is Role.MANAGER
    assert claims.expires_at - claims.issued_at == 3600
    assert claims.jti

    raw = jwt.decode(token, options={"verify_signature": False})
    assert raw["sub"] == "42"
    assert raw["role"] == int(Role.MANAGER)


def test_every_token_gets_a_fresh_jti(codec):
    with freeze_time("2024-01-01 00:00:00"):
        a = codec.verify(codec.issue(1, Role.USER))
        b = codec.verify(codec.issue(1, Role.USER))
    assert a.jti != b.jti


def test_expired_token_is_rejected(codec):
    with freeze_time("2024-01-01 00:00:00"):
        token = codec.issue(1, Role.USER)
    with freeze_time("2024-01-01 01:00:00"), pytest.raises(TokenExpiredError):
        codec.verify(token)
    with freeze_time("2024-01-01 00:59:59"):
        assert codec.verify(token).subject_id == 1


def test_injected_clock_drives_expiry():
    now = [1_000]
    codec = JWTTokenCodec(SECRET, 60, clock=lambda: now[0])
    token = codec.issue(1, Role.USER)
    now[0] += 61
    with pytest.raises(TokenExpiredError):
        codec.verify(token)


def test_wrong_secret_is_rejected(codec):
    token = JWTTokenCodec(OTHER_SECRET, 3600).issue(1, Role.ADMIN)
    with pytest.raises(InvalidSignatureError):
        codec.verify(token)


def test_tampered_payload_is_rejected(codec):
    header, payload, signature = codec.issue(1, Role.USER).split(".")
    forged = jwt.encode({"sub": "1", "role": 1, "iat": 0, "exp": 9999999999}, "x" * 40)
    forged_payload = forged.split(".")[1]
    with pytest.raises(InvalidSignatureError):
        codec.verify(f"{header}.{forged_payload}.{signature}")


def test_unexpected_algorithm_is_rejected(codec):
    token = jwt.encode(
        {"sub": "1", "role": 3, "iat": 0, "exp": 9999999999}, SECRET, algorithm="HS512"
    )
    with pytest.raises(InvalidSignatureError):
        codec.verify(token)


def test_missing_claims_are_rejected(codec):
    token = jwt.encode({"sub": "1", "exp": 9999999999}, SECRET, algorithm="HS256")
    with pytest.raises(InvalidSignatureError):
        codec.verify(token)


def test_unknown_role_is_rejected(codec):
    token = jwt.encode(
        {"sub": "1", "role": 99, "iat": 0, "exp": 9999999999}, SECRET, algorithm="HS256"
    )
    with pytest.raises(InvalidSignatureError):
        codec.verify(token)


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c"])
def test_garbage_is_rejected(codec, garbage):
    with pytest.raises(InvalidSignatureError):
        codec.verify(garbage)


def test_decode_reads_claims_without_checking_signature_or_expiry(codec):
    with freeze_time("2020-01-01"):
        token = JWTTokenCodec(OTHER_SECRET, 60).issue(5, Role.USER)
    claims = codec.decode(token)
    assert claims.subject_id == 5


def test_decode_rejects_garbage(codec):
    with pytest.raises(InvalidTokenError):
        codec.decode("garbage")


def test_out_of_range_expiry_is_rejected(codec):
    token = jwt.encode(
        {"sub": "1", "role": int(Role.USER), "iat": 0, "exp": float("inf"), "jti": "x"},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        codec.decode(token)
    with pytest.raises(InvalidSignatureError):
        codec.verify(token)


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        JWTTokenCodec("", 60)
