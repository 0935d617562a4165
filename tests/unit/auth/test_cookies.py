import pytest
from fastapi import Response
from starlette.requests import Request

from acquisitions.core.config import Settings
from acquisitions.infrastructure.auth import SESSION_COOKIE_NAME, SessionCookieManager


def _request_with_cookie(value: str) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [(b"cookie", f"{SESSION_COOKIE_NAME}={value}".encode())],
        }
    )


def test_default_options(cookie_manager):
    options = cookie_manager.options()

    assert options == {
        "httponly": True,
        "secure": False,
        "samesite": "strict",
        "max_age": 900,
        "path": "/",
    }


def test_secure_in_production():
    settings = Settings(environment="production", jwt_secret="a-real-production-secret")

    assert SessionCookieManager(settings).options()["secure"] is True


def test_httponly_cannot_be_overridden(cookie_manager):
    assert cookie_manager.options(httponly=False)["httponly"] is True


def test_overrides_are_applied(cookie_manager):
    options = cookie_manager.options(max_age=60, path="/api")

    assert options["max_age"] == 60
    assert options["path"] == "/api"


def test_unknown_override_is_rejected(cookie_manager):
    with pytest.raises(ValueError):
        cookie_manager.options(colour="blue")


def test_set_writes_httponly_cookie(cookie_manager):
    response = Response()

    cookie_manager.set(response, SESSION_COOKIE_NAME, "abc")

    header = response.headers["set-cookie"]
    assert header.startswith("token=abc")
    assert "httponly" in header.lower()
    assert "samesite=strict" in header.lower()
    assert "max-age=900" in header.lower()


def test_get_reads_request_cookie(cookie_manager):
    assert cookie_manager.get(_request_with_cookie("abc"), SESSION_COOKIE_NAME) == "abc"


def test_clear_expires_cookie(cookie_manager):
    response = Response()

    cookie_manager.clear(response, SESSION_COOKIE_NAME)

    header = response.headers["set-cookie"].lower()
    assert header.startswith('token=""')
    assert "max-age=0" in header
    assert "httponly" in header
