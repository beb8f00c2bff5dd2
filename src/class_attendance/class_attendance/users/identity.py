from __future__ import annotations

from typing import Optional, Protocol

from flask import has_request_context, session


class IdentityProvider(Protocol):
    """Source of the authenticated user id; authentication itself happens elsewhere."""

    def current_uid(self) -> Optional[str]:
        raise NotImplementedError

    def sign_in(self, uid: str) -> None:
        raise NotImplementedError

    def sign_out(self) -> None:
        raise NotImplementedError


class InMemoryIdentity(IdentityProvider):
    def __init__(self, uid: Optional[str] = None):
        self._uid = uid

    def current_uid(self) -> Optional[str]:
        return self._uid

    def sign_in(self, uid: str) -> None:
        self._uid = uid

    def sign_out(self) -> None:
        self._uid = None


class SessionIdentity(IdentityProvider):
    """Identity kept in the Flask session cookie."""

    key = "uid"

    def current_uid(self) -> Optional[str]:
        if not has_request_context():
            return None
        return session.get(self.key)

    def sign_in(self, uid: str) -> None:
        session[self.key] = uid

    def sign_out(self) -> None:
        session.pop(self.key, None)
