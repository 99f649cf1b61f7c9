"""
Startup login gate.

The state machine is explicit: ``verify`` and ``retry`` take a
ThrottleState and return the next one, so nothing lives in module globals.

    awaiting_credentials --verify--> granted
                         --verify--> denied --retry (after backoff)--> awaiting_credentials
                         --verify--> locked   (attempts == max_attempts)

Verification itself is synchronous and happens inside ``verify``.
"""

from __future__ import annotations

import getpass
import hmac
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Tuple

import bcrypt
from loguru import logger

from .errors import ConfigError

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class LoginStatus(str, Enum):
    AWAITING_CREDENTIALS = "awaiting_credentials"
    GRANTED = "granted"
    DENIED = "denied"
    LOCKED = "locked"


@dataclass(frozen=True)
class ThrottleState:
    attempts: int = 0
    max_attempts: int = 3
    status: LoginStatus = LoginStatus.AWAITING_CREDENTIALS

    @property
    def finished(self) -> bool:
        return self.status in (LoginStatus.GRANTED, LoginStatus.LOCKED)


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


@dataclass(frozen=True)
class Credentials:
    username: str
    password_hash: str

    def check(self, username: str, password: str) -> bool:
        user_ok = hmac.compare_digest(username.encode("utf-8"), self.username.encode("utf-8"))
        try:
            pass_ok = bcrypt.checkpw(_password_bytes(password), self.password_hash.encode("utf-8"))
        except ValueError as exc:
            raise ConfigError(f"APP_PASS_HASH is not a valid bcrypt hash: {exc}") from exc
        return user_ok and pass_ok


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("ascii")


def verify(state: ThrottleState, credentials: Credentials, username: str, password: str) -> ThrottleState:
    if state.status is not LoginStatus.AWAITING_CREDENTIALS:
        raise ValueError(f"cannot verify credentials in state {state.status.value}")

    if credentials.check(username, password):
        return replace(state, status=LoginStatus.GRANTED)

    attempts = state.attempts + 1
    status = LoginStatus.LOCKED if attempts >= state.max_attempts else LoginStatus.DENIED
    return replace(state, attempts=attempts, status=status)


def retry(state: ThrottleState) -> ThrottleState:
    if state.status is not LoginStatus.DENIED:
        raise ValueError(f"cannot retry from state {state.status.value}")
    return replace(state, status=LoginStatus.AWAITING_CREDENTIALS)


def backoff_delay(state: ThrottleState, unit: float) -> float:
    """Seconds to wait before the next prompt; grows linearly with failures."""
    return state.attempts * unit


def prompt_credentials() -> Tuple[str, str]:
    username = input("Username: ")
    password = getpass.getpass("Password: ")
    return username, password


def run_login(
    credentials: Credentials,
    max_attempts: int = 3,
    backoff_unit: float = 2.0,
    prompt: Callable[[], Tuple[str, str]] = prompt_credentials,
    sleep: Callable[[float], None] = time.sleep,
) -> ThrottleState:
    """Prompt until the user is granted or locked out; return the final state."""
    state = ThrottleState(max_attempts=max_attempts)
    logger.info("Secure login required (max attempts: {})", max_attempts)

    while True:
        username, password = prompt()
        state = verify(state, credentials, username, password)

        if state.status is LoginStatus.GRANTED:
            logger.success("Login success")
            return state

        logger.warning("Login failed ({}/{})", state.attempts, state.max_attempts)
        if state.status is LoginStatus.LOCKED:
            logger.error("Too many failed attempts")
            return state

        wait = backoff_delay(state, backoff_unit)
        logger.info("Wait {}s...", wait)
        sleep(wait)
        state = retry(state)
