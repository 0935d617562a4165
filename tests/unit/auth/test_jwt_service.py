from datetime import timedelta

import jwt
import pytest

from acquisitions.infrastructure.auth import InvalidTokenError, JWTService, TokenClaims

CLAIMS = TokenClaims(id=7, email="alice@x.com", role="user")


def test_sign_then_verify_returns_original_claims(jwt_service):
    token = jwt_service.sign(CLAIMS)

    assert jwt_service.verify(token) == CLAIMS


def test_token_payload_carries_issuer_and_subject(jwt_service):
    token = jwt_service.sign(CLAIMS)
    payload = jwt.decode(token, options={"verify_signature": False})

    assert payload["iss"] == "acquisitions"
    assert payload["sub"] == "7"
    assert payload["email"] == "alice@x.com"
    assert payload["exp"] - payload["iat"] == int(timedelta(days=1).total_seconds())


def test_expired_token_is_rejected(jwt_service):
    token = jwt_service.sign(CLAIMS, expires_delta=timedelta(seconds=-1))

    with pytest.raises(InvalidTokenError):
        jwt_service.verify(token)


def test_token_signed_with_other_secret_is_rejected(jwt_service):
    other = JWTService(secret_key="another-secret")
    token = other.sign(CLAIMS)

    with pytest.raises(InvalidTokenError):
        jwt_service.verify(token)


def test_tampered_token_is_rejected(jwt_service):
    header, payload, signature = jwt_service.sign(CLAIMS).split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    with pytest.raises(InvalidTokenError):
        jwt_service.verify(tampered)


def test_garbage_token_is_rejected(jwt_service):
    with pytest.raises(InvalidTokenError):
        jwt_service.verify("not.a.token")


def test_token_missing_claims_is_rejected(jwt_service):
    token = jwt.encode(
        {"iss": "acquisitions", "sub": "7", "iat": 1, "exp": 9999999999},
        "test-secret-key-not-for-production",
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        jwt_service.verify(token)


def test_all_rejections_share_one_message(jwt_service):
    expired = jwt_service.sign(CLAIMS, expires_delta=timedelta(seconds=-1))

    messages = set()
    for token in (expired, "garbage"):
        with pytest.raises(InvalidTokenError) as exc_info:
            jwt_service.verify(token)
        messages.add(str(exc_info.value))

    assert messages == {"Invalid token"}


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        JWTService(secret_key="")


def test_from_settings_uses_configured_lifetime(settings):
    settings.jwt_expires_in = "2h"
    service = JWTService.from_settings(settings)

    assert service.expires_delta == timedelta(hours=2)
