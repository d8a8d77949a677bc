from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from tablegames.api.deps import get_dispatcher, get_registry
from tablegames.protocol.version import PROTOCOL_VERSION
from tablegames.registry import GameModeRegistry
from tablegames.runtime.auth import parse_bearer
from tablegames.runtime.dispatcher import Dispatcher

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/modes")
async def list_modes_route(registry: GameModeRegistry = Depends(get_registry)) -> dict[str, Any]:
    return {"modes": list(registry.list_modes()), "protocol_version": PROTOCOL_VERSION}


@router.post("/actions")
async def post_action_route(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    try:
        body = await request.json()
    except ValueError:
        # Not JSON at all; the dispatcher reports it as a mapping error.
        body = None

    result = await dispatcher.dispatch(body, parse_bearer(authorization))
    headers = {"WWW-Authenticate": "Bearer"} if result.status_code == 401 else None
    return JSONResponse(status_code=result.status_code, content=result.body, headers=headers)
