"""
Session state: who is acting on behalf of the current connection.

A Session holds at most one identity. The console owns a single Session for
its lifetime; the HTTP layer rebuilds one per request from the bearer token.
Every service operation calls `require()` before touching the store.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scheduler.exceptions import AlreadyLoggedIn, NotAuthenticated, NotLoggedIn, WrongRole


class Role(str, Enum):
    PATIENT = "patient"
    CAREGIVER = "caregiver"


@dataclass(frozen=True)
class Identity:
    """Resolved identity attached to a session."""
    role: Role
    username: str

    @property
    def is_patient(self) -> bool:
        return self.role == Role.PATIENT

    @property
    def is_caregiver(self) -> bool:
        return self.role == Role.CAREGIVER


class Session:
    def __init__(self, identity: Optional[Identity] = None, token_id: Optional[str] = None):
        self._identity = identity
        # jti of the bearer token this session was restored from (HTTP only)
        self.token_id = token_id

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    def login(self, identity: Identity) -> None:
        if self._identity is not None:
            raise AlreadyLoggedIn()
        self._identity = identity

    def logout(self) -> Identity:
        if self._identity is None:
            raise NotLoggedIn()
        previous, self._identity = self._identity, None
        self.token_id = None
        return previous

    def require(self, role: Optional[Role] = None) -> Identity:
        """Return the current identity, failing fast if absent or of the wrong role."""
        if self._identity is None:
            raise NotAuthenticated()
        if role is not None and self._identity.role != role:
            raise WrongRole(role.value)
        return self._identity

    def __repr__(self) -> str:
        if self._identity is None:
            return "Session(anonymous)"
        return f"Session({self._identity.role.value}={self._identity.username!r})"
