"""Tests for registration, login and identity resolution."""

import pytest

from conftest import FROZEN_MILLIS
from quizengine.accounts import login, logout, register, resolve_identity
from quizengine.errors import AccessError, AlreadyExists, InputError, InvalidCredentials, Unauthenticated


@pytest.mark.asyncio
async def test_register_persists_account(state, backend):
    await register(state, "a@example.com", "secret", "Alice")

    assert state.accounts["a@example.com"].name == "Alice"
    assert len(backend.writes) == 1


@pytest.mark.asyncio
async def test_register_twice_is_rejected_and_keeps_first_account(state, backend):
    await register(state, "a@example.com", "secret", "Alice")

    with pytest.raises(AlreadyExists) as excinfo:
        await register(state, "a@example.com", "other", "Mallory")

    assert isinstance(excinfo.value, InputError)
    account = state.accounts["a@example.com"]
    assert account.name == "Alice"
    assert account.password == "secret"
    assert len(backend.writes) == 1


@pytest.mark.asyncio
async def test_login_returns_email_and_millis_token(state):
    await register(state, "a@example.com", "secret", "Alice")

    token = login(state, "a@example.com", "secret")

    assert token == f"a@example.com:{FROZEN_MILLIS}"


@pytest.mark.asyncio
async def test_login_rejects_wrong_secret_and_unknown_email(state):
    await register(state, "a@example.com", "secret", "Alice")

    with pytest.raises(InvalidCredentials):
        login(state, "a@example.com", "wrong")
    with pytest.raises(InvalidCredentials) as excinfo:
        login(state, "nobody@example.com", "secret")
    assert isinstance(excinfo.value, AccessError)


def test_logout_always_succeeds():
    assert logout("anything") is None
    assert logout(None) is None


@pytest.mark.asyncio
async def test_resolve_identity_accepts_raw_and_bearer_tokens(state):
    await register(state, "a@example.com", "secret", "Alice")
    token = login(state, "a@example.com", "secret")

    assert resolve_identity(state, token) == "a@example.com"
    assert resolve_identity(state, f"Bearer {token}") == "a@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize("header", [None, "", "Bearer ", "a@example.com", "a@example.com:soon", ":123"])
async def test_resolve_identity_rejects_missing_or_malformed_header(state, header):
    await register(state, "a@example.com", "secret", "Alice")

    with pytest.raises(Unauthenticated):
        resolve_identity(state, header)


def test_resolve_identity_rejects_unknown_account(state):
    with pytest.raises(Unauthenticated):
        resolve_identity(state, "ghost@example.com:1700000000000")
