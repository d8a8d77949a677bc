"""Blackjack game mode: action vocabulary and table configuration.

Only the request surface lives here. Actions are parsed into typed models and
acknowledged; dealing, scoring and payouts are not part of this package.
"""

from __future__ import annotations

import json
from copy import deepcopy
from datetime import timedelta
from pathlib import Path
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, model_validator

from tablegames.modes import BLACKJACK
from tablegames.modes.base import HandlerContext
from tablegames.protocol.errors import HandlerError, MappingError


class BlackjackConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    min_players: int = 1
    max_players: Optional[int] = None
    starting_balance: int = 1000
    min_bet: int = 0
    betting_time_limit: timedelta = timedelta(seconds=30)
    turn_time_limit: timedelta = timedelta(seconds=30)

    @model_validator(mode="after")
    def _check_limits(self) -> "BlackjackConfig":
        if self.starting_balance <= 0:
            raise ValueError(f"Starting balance must be positive. Got: {self.starting_balance}")
        if self.min_bet < 0:
            raise ValueError(f"Minimum bet cannot be negative. Got: {self.min_bet}")
        if self.min_bet > self.starting_balance:
            raise ValueError(
                f"Minimum bet ({self.min_bet}) cannot exceed starting balance ({self.starting_balance})."
            )
        if self.betting_time_limit <= timedelta(0):
            raise ValueError(f"Betting time limit must be positive. Got: {self.betting_time_limit}")
        if self.turn_time_limit <= timedelta(0):
            raise ValueError(f"Turn time limit must be positive. Got: {self.turn_time_limit}")
        if self.min_players < 1:
            raise ValueError(f"Minimum players must be at least 1. Got: {self.min_players}")
        if self.max_players is not None and self.max_players < self.min_players:
            raise ValueError(
                f"Maximum players ({self.max_players}) cannot be less than minimum players ({self.min_players})."
            )
        return self


class _Action(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class BetAction(_Action):
    action: Literal["bet"]
    amount: StrictInt = Field(gt=0)


class HitAction(_Action):
    action: Literal["hit"]


class StandAction(_Action):
    action: Literal["stand"]


class DoubleAction(_Action):
    action: Literal["double"]


class SplitAction(_Action):
    action: Literal["split"]
    amount: StrictInt = Field(gt=0)


class SurrenderAction(_Action):
    action: Literal["surrender"]


class HurryUpAction(_Action):
    action: Literal["hurry_up"]


BlackjackAction = Annotated[
    Union[BetAction, HitAction, StandAction, DoubleAction, SplitAction, SurrenderAction, HurryUpAction],
    Field(discriminator="action"),
]

_ACTIONS = TypeAdapter(BlackjackAction)


def _normalize(payload: Dict[str, Any]) -> Dict[str, Any]:
    # Field names and the action name are matched case-insensitively.
    normalized: Dict[str, Any] = {}
    for key, value in payload.items():
        name = str(key).lower()
        if name in normalized:
            raise MappingError(f"Field '{name}' is given more than once (field names ignore case)")
        normalized[name] = value
    if isinstance(normalized.get("action"), str):
        normalized["action"] = normalized["action"].lower()
    return normalized


class Handler:
    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        manifest_path = Path(__file__).with_name("mode.json")
        self._manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        settings = {**self._manifest.get("config", {}), **(config or {})}
        self.config = BlackjackConfig.model_validate(settings)

    def manifest(self) -> Dict[str, Any]:
        manifest = deepcopy(self._manifest)
        manifest["config"] = self.config.model_dump(mode="json")
        return manifest

    def map_payload(self, payload: Dict[str, Any]) -> BlackjackAction:
        if "action" not in {str(key).lower() for key in payload}:
            raise MappingError(f"Blackjack payload requires an 'action' ({', '.join(self._manifest['actions'])})")
        return _ACTIONS.validate_python(_normalize(payload))

    def _check_wager(self, amount: int) -> None:
        if amount < self.config.min_bet:
            raise HandlerError(f"Wager of {amount} is below the table minimum of {self.config.min_bet}")
        if amount > self.config.starting_balance:
            raise HandlerError(
                f"Wager of {amount} exceeds the starting balance of {self.config.starting_balance}"
            )

    def handle(self, action: BlackjackAction, context: HandlerContext) -> Dict[str, Any]:
        if isinstance(action, (BetAction, SplitAction)):
            self._check_wager(action.amount)

        return {
            "mode": BLACKJACK,
            "action": action.action,
            "player_id": context.auth.user_id,
            "accepted": True,
            "details": action.model_dump(exclude={"action"}),
        }
