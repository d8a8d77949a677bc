from tablegames.protocol.errors import (
    AUTHENTICATION_ERROR,
    AUTHORIZATION_ERROR,
    DUPLICATE_MODE,
    HANDLER_ERROR,
    INTERNAL_ERROR,
    MAPPING_ERROR,
    UNKNOWN_MODE,
    AuthenticationError,
    AuthorizationError,
    DuplicateModeError,
    HandlerError,
    InternalError,
    MappingError,
    RegistryFrozenError,
    TableGamesError,
    UnknownModeError,
)
from tablegames.protocol.models import ActionRequest, ErrorBody, ErrorResponse, SuccessResponse
from tablegames.protocol.version import PROTOCOL_VERSION

__all__ = [
    "AUTHENTICATION_ERROR",
    "AUTHORIZATION_ERROR",
    "ActionRequest",
    "AuthenticationError",
    "AuthorizationError",
    "DUPLICATE_MODE",
    "DuplicateModeError",
    "ErrorBody",
    "ErrorResponse",
    "HANDLER_ERROR",
    "HandlerError",
    "INTERNAL_ERROR",
    "InternalError",
    "MAPPING_ERROR",
    "MappingError",
    "PROTOCOL_VERSION",
    "RegistryFrozenError",
    "SuccessResponse",
    "TableGamesError",
    "UNKNOWN_MODE",
    "UnknownModeError",
]
