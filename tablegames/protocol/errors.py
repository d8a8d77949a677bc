"""Error kinds and the exception taxonomy shared by the registry and dispatcher."""

from __future__ import annotations

from typing import Optional


AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
UNKNOWN_MODE = "UNKNOWN_MODE"
DUPLICATE_MODE = "DUPLICATE_MODE"
MAPPING_ERROR = "MAPPING_ERROR"
HANDLER_ERROR = "HANDLER_ERROR"
INTERNAL_ERROR = "INTERNAL_ERROR"

STATUS_CODES = {
    AUTHENTICATION_ERROR: 401,
    AUTHORIZATION_ERROR: 403,
    UNKNOWN_MODE: 404,
    MAPPING_ERROR: 400,
    HANDLER_ERROR: 409,
    INTERNAL_ERROR: 500,
    DUPLICATE_MODE: 500,
}

GENERIC_INTERNAL_MESSAGE = "An unexpected error occurred. Please try again later."


class TableGamesError(Exception):
    kind = INTERNAL_ERROR

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    @property
    def public_message(self) -> str:
        return str(self)


class AuthenticationError(TableGamesError):
    kind = AUTHENTICATION_ERROR


class AuthorizationError(TableGamesError):
    kind = AUTHORIZATION_ERROR


class UnknownModeError(TableGamesError):
    kind = UNKNOWN_MODE

    def __init__(self, mode_id: object):
        super().__init__(f"Game mode '{mode_id}' is not registered")
        self.mode_id = mode_id


class DuplicateModeError(TableGamesError):
    kind = DUPLICATE_MODE

    def __init__(self, mode_id: str):
        super().__init__(f"Game mode '{mode_id}' is already registered")
        self.mode_id = mode_id


class RegistryFrozenError(RuntimeError):
    pass


class MappingError(TableGamesError):
    kind = MAPPING_ERROR


class HandlerError(TableGamesError):
    """Raised by a game-mode handler.

    `kind` is declared by the handler: "domain" errors are reported to the
    caller as-is, "internal" ones are reported as an internal error.
    """

    DOMAIN = "domain"
    INTERNAL = "internal"

    def __init__(self, message: str, kind: str = DOMAIN):
        if kind not in (self.DOMAIN, self.INTERNAL):
            raise ValueError(f"unknown handler error kind: {kind}")
        super().__init__(message)
        self.declared_kind = kind

    @property
    def kind(self) -> str:  # type: ignore[override]
        return HANDLER_ERROR if self.declared_kind == self.DOMAIN else INTERNAL_ERROR

    @property
    def public_message(self) -> str:
        if self.declared_kind == self.INTERNAL:
            return GENERIC_INTERNAL_MESSAGE
        return str(self)


class InternalError(TableGamesError):
    kind = INTERNAL_ERROR

    def __init__(self, message: str = GENERIC_INTERNAL_MESSAGE, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    @property
    def public_message(self) -> str:
        return GENERIC_INTERNAL_MESSAGE
