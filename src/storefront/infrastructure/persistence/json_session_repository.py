"""JSON-file-backed implementation of SessionRepository."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from storefront.domain.model.session import Session, User, UserRole
from storefront.domain.repository.session_repository import SessionRepository

logger = logging.getLogger(__name__)


class JsonSessionRepository(SessionRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- SessionRepository interface ------------------------------------------

    def load(self) -> Session:
        if not self._file_path.exists():
            return Session.anonymous()
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
            return self._to_domain(raw)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Discarding unreadable session at %s (%r)", self._file_path, exc)
            return Session.anonymous()

    def save(self, session: Session) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._file_path.with_suffix(".tmp")
        tmp_path.write_text(
            json.dumps(self._to_raw(session), indent=2) + "\n", encoding="utf-8"
        )
        tmp_path.replace(self._file_path)

    def delete(self) -> None:
        self._file_path.unlink(missing_ok=True)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(session: Session) -> dict:
        user = session.user
        return {
            "token": session.token,
            "user": None if user is None else {
                "id": user.id,
                "email": user.email,
                "name": user.name,
                "role": user.role.value,
            },
        }

    @staticmethod
    def _to_domain(raw: dict) -> Session:
        user_raw = raw.get("user")
        user = None
        if user_raw:
            user = User(
                id=user_raw["id"],
                email=user_raw["email"],
                name=user_raw.get("name"),
                role=UserRole(user_raw.get("role", "USER")),
            )
        return Session(user=user, token=raw.get("token"))
