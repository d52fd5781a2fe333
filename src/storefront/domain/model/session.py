"""Authenticated identity held by the client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(Enum):
    USER = "USER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class User:

    id: str
    email: str
    name: str | None = None
    role: UserRole = UserRole.USER


@dataclass(frozen=True)
class Session:
    """Current user identity and credential token.

    Both absent means anonymous.  Sessions are immutable; the holder
    swaps in a new one on login and an empty one on logout.
    """

    user: User | None = None
    token: str | None = None

    @staticmethod
    def anonymous() -> Session:
        return Session()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)
