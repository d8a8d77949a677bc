"""Handler contract for game modes.

A handler owns one game mode. It turns the opaque wire payload into its own
domain input (`map_payload`) and acts on that input (`handle`). Handlers never
see credentials or raw HTTP; the dispatcher hands them an already authorized
`HandlerContext`. `handle` may be a coroutine function when it waits on I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Protocol, Union

from tablegames.runtime.auth import AuthContext


@dataclass(frozen=True)
class HandlerContext:
    mode_id: str
    auth: AuthContext
    request_id: str


class GameModeHandler(Protocol):
    def manifest(self) -> Dict[str, Any]:
        ...

    def map_payload(self, payload: Dict[str, Any]) -> Any:
        ...

    def handle(self, action: Any, context: HandlerContext) -> Union[Any, Awaitable[Any]]:
        ...
