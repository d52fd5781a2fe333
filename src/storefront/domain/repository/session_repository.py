"""Abstract durable storage for the auth session."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.session import Session


class SessionRepository(ABC):

    @abstractmethod
    def load(self) -> Session:
        """Return the persisted session, or an anonymous one."""

    @abstractmethod
    def save(self, session: Session) -> None:
        """Durably replace the stored session."""

    @abstractmethod
    def delete(self) -> None:
        """Purge the stored session, including its token."""
