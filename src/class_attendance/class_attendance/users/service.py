from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_non_empty
from ..core.exceptions import NotAuthenticatedError
from ..sync.coordinator import SyncCoordinator
from .identity import IdentityProvider

logger = logging.getLogger(__name__)


class SessionService:
    """Use case: attach/detach an already authenticated user to this device."""

    def __init__(self, identity: IdentityProvider, sync: SyncCoordinator):
        self._identity = identity
        self._sync = sync

    def current_uid(self) -> Optional[str]:
        return self._identity.current_uid()

    def require_uid(self) -> str:
        uid = self._identity.current_uid()
        if not uid:
            raise NotAuthenticatedError("Sign in to use cloud backup")
        return uid

    def sign_in(self, uid: str) -> str:
        uid = require_non_empty(uid, "User id")
        self._identity.sign_in(uid)
        logger.info("user %s signed in", uid)
        return uid

    async def pull(self, uid: str) -> bool:
        """Replace local data with the user's remote copy."""
        return await self._sync.pull_on_login(uid)

    async def login(self, uid: str) -> bool:
        return await self.pull(self.sign_in(uid))

    def logout(self) -> None:
        uid = self._identity.current_uid()
        self._sync.clear()
        self._identity.sign_out()
        logger.info("user %s signed out; local data cleared", uid)
