"""Application services: Auth Session Holder and the login flows.

``AuthSessionHolder`` is the only owner of the Session.  Other
components read it through ``current_session()``; the only writers are
``set_session`` and ``clear``.

``AuthService`` talks to the backend for login, registration and token
verification and feeds the results into the holder.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import UnauthenticatedError, ValidationError
from storefront.domain.gateway.backend_api import BackendApi
from storefront.domain.model.session import Session, User
from storefront.domain.repository.session_repository import SessionRepository

logger = logging.getLogger(__name__)


class AuthSessionHolder:

    def __init__(self, session_repo: SessionRepository) -> None:
        self._session_repo = session_repo
        self._session = session_repo.load()

    def current_session(self) -> Session:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session.is_authenticated

    def set_session(self, user: User, token: str) -> None:
        if not token:
            raise ValidationError("Credential token is required")
        self._session = Session(user=user, token=token)
        self._session_repo.save(self._session)
        logger.info("Session started for %s", user.email)

    def clear(self) -> None:
        had_session = self._session.is_authenticated
        self._session = Session.anonymous()
        self._session_repo.delete()
        if had_session:
            logger.info("Session cleared")


class AuthService:

    def __init__(self, api: BackendApi, holder: AuthSessionHolder) -> None:
        self._api = api
        self._holder = holder

    async def login(self, email: str, password: str) -> User:
        grant = await self._api.login(email, password)
        self._holder.set_session(grant.user, grant.token)
        return grant.user

    async def register(self, email: str, password: str, name: str | None = None) -> User:
        grant = await self._api.register(email, password, name)
        self._holder.set_session(grant.user, grant.token)
        return grant.user

    def logout(self) -> None:
        self._holder.clear()

    async def verify(self) -> User:
        """Check the stored token against ``/users/me``.

        Refreshes the stored identity on success.  A rejected token
        clears the session (the API client does that on any 401) and
        re-raises ``UnauthenticatedError``.
        """
        session = self._holder.current_session()
        if not session.is_authenticated:
            raise UnauthenticatedError()
        try:
            user = await self._api.get_me()
        except UnauthenticatedError:
            self._holder.clear()
            raise UnauthenticatedError("Session expired. Please login again.")
        self._holder.set_session(user, session.token)  # type: ignore[arg-type]
        return user
