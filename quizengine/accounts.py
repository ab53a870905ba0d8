from __future__ import annotations

from typing import Optional

from .errors import AlreadyExists, InvalidCredentials, Unauthenticated
from .models import Account
from .state import DomainState

BEARER_PREFIX = "Bearer "


async def register(state: DomainState, email: str, password: str, name: str) -> None:
    if email in state.accounts:
        raise AlreadyExists("Account already exists")
    state.accounts[email] = Account(password=password, name=name)
    await state.flush()


def login(state: DomainState, email: str, password: str) -> str:
    account = state.accounts.get(email)
    if account is None or account.password != password:
        raise InvalidCredentials()
    return issue_token(state, email)


def logout(token: Optional[str]) -> None:
    # Tokens are self-describing; there is nothing to revoke.
    return None


def issue_token(state: DomainState, email: str) -> str:
    millis = int(state.clock().timestamp() * 1000)
    return f"{email}:{millis}"


def resolve_identity(state: DomainState, auth_header: Optional[str]) -> str:
    if not auth_header:
        raise Unauthenticated("No auth header")
    token = auth_header[len(BEARER_PREFIX):] if auth_header.startswith(BEARER_PREFIX) else auth_header
    email, sep, millis = token.strip().rpartition(":")
    if not sep or not email or not millis.isdigit():
        raise Unauthenticated("Malformed auth token")
    if email not in state.accounts:
        raise Unauthenticated("Invalid user")
    return email
