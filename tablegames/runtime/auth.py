"""Caller identity: bearer credentials, auth contexts and mode authorization."""

from __future__ import annotations

import hmac
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple

from tablegames.protocol.errors import AuthenticationError, AuthorizationError


ALL_MODES = "*"


def parse_bearer(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    modes: FrozenSet[str] = field(default_factory=frozenset)

    def can_access(self, mode_id: str) -> bool:
        return ALL_MODES in self.modes or mode_id in self.modes


@dataclass(frozen=True)
class Principal:
    token: str
    user_id: str
    modes: Tuple[str, ...] = (ALL_MODES,)


class TokenAuthenticator:
    """Resolves bearer tokens against a static table of principals."""

    def __init__(self, principals: Iterable[Principal]):
        self._principals = tuple(principals)

    async def authenticate(self, credential: Optional[str]) -> AuthContext:
        if not credential:
            raise AuthenticationError("Missing bearer credential")

        matched = None
        # Every entry is compared so lookup time does not depend on which token matched.
        for principal in self._principals:
            if hmac.compare_digest(principal.token.encode("utf-8"), credential.encode("utf-8")):
                matched = principal
        if matched is None:
            raise AuthenticationError("Invalid bearer credential")
        return AuthContext(user_id=matched.user_id, modes=frozenset(matched.modes))


class ModeAuthorizer:
    def authorize(self, context: AuthContext, mode_id: str) -> None:
        if not context.can_access(mode_id):
            raise AuthorizationError(f"User '{context.user_id}' may not act on game mode '{mode_id}'")
