"""Tests for admin session resolution."""

import base64

import pytest

from web.session import ANONYMOUS, SessionContext, resolve_session


def _basic(credentials: str) -> str:
    return "Basic " + base64.b64encode(credentials.encode()).decode()


@pytest.fixture
def admin_env(monkeypatch):
    monkeypatch.setenv("ADMIN_USER", "admin")
    monkeypatch.setenv("ADMIN_PASS", "s3cret")


def test_valid_credentials(admin_env):
    session = resolve_session(_basic("admin:s3cret"))
    assert session == SessionContext(username="admin", is_admin=True)
    assert session.is_authenticated


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        _basic("admin:wrong"),
        _basic("someone:s3cret"),
        _basic("no-colon"),
        "Basic !!!not-base64",
        "Bearer abc123",
    ],
)
def test_anything_else_is_anonymous(admin_env, header):
    session = resolve_session(header)
    assert session is ANONYMOUS
    assert not session.is_authenticated


def test_unconfigured_credentials_are_anonymous(monkeypatch):
    monkeypatch.delenv("ADMIN_USER", raising=False)
    monkeypatch.delenv("ADMIN_PASS", raising=False)
    assert resolve_session(_basic(":")) is ANONYMOUS


def test_password_may_contain_colons(monkeypatch):
    monkeypatch.setenv("ADMIN_USER", "admin")
    monkeypatch.setenv("ADMIN_PASS", "a:b:c")
    assert resolve_session(_basic("admin:a:b:c")).is_admin


def test_non_ascii_credentials_are_compared(admin_env):
    assert resolve_session(_basic("josé:x")) is ANONYMOUS


def test_non_ascii_admin_password(monkeypatch):
    monkeypatch.setenv("ADMIN_USER", "josé")
    monkeypatch.setenv("ADMIN_PASS", "contraseña")
    assert resolve_session(_basic("josé:contraseña")).is_admin
    assert resolve_session(_basic("josé:contrasena")) is ANONYMOUS
