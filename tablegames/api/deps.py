from __future__ import annotations

from fastapi import Request

from tablegames.registry import GameModeRegistry
from tablegames.runtime.dispatcher import Dispatcher


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


def get_registry(request: Request) -> GameModeRegistry:
    return request.app.state.registry
