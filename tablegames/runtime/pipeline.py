"""Pipeline states, stages and the result types threaded between stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

from tablegames.protocol.errors import TableGamesError


T = TypeVar("T")


class Stage(str, Enum):
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOLUTION = "resolution"
    MAPPING = "mapping"
    HANDLER = "handler"
    RESPONSE = "response"


class PipelineState(str, Enum):
    RECEIVED = "received"
    AUTHENTICATED = "authenticated"
    AUTHORIZED = "authorized"
    RESOLVED = "resolved"
    MAPPED = "mapped"
    HANDLED = "handled"
    RESPONDED = "responded"
    FAILED = "failed"


# State reached when each stage passes.
STAGE_OUTCOMES = {
    Stage.AUTHENTICATION: PipelineState.AUTHENTICATED,
    Stage.AUTHORIZATION: PipelineState.AUTHORIZED,
    Stage.RESOLUTION: PipelineState.RESOLVED,
    Stage.MAPPING: PipelineState.MAPPED,
    Stage.HANDLER: PipelineState.HANDLED,
    Stage.RESPONSE: PipelineState.RESPONDED,
}


@dataclass(frozen=True)
class Passed(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failed:
    # None when the envelope was rejected on receipt, before any stage ran.
    stage: Union[Stage, None]
    error: TableGamesError


StageResult = Union[Passed[Any], Failed]
