from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from tablegames.modes.base import HandlerContext
from tablegames.modes.blackjack.mode import (
    BetAction,
    BlackjackConfig,
    DoubleAction,
    Handler,
    HitAction,
    HurryUpAction,
    SplitAction,
    StandAction,
    SurrenderAction,
)
from tablegames.protocol.errors import HandlerError, MappingError
from tablegames.runtime.auth import AuthContext


def make_context(user_id="player-1"):
    return HandlerContext(mode_id="blackjack", auth=AuthContext(user_id=user_id), request_id="req-1")


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"action": "bet", "amount": 25}, BetAction(action="bet", amount=25)),
        ({"action": "hit"}, HitAction(action="hit")),
        ({"action": "stand"}, StandAction(action="stand")),
        ({"action": "double"}, DoubleAction(action="double")),
        ({"action": "split", "amount": 10}, SplitAction(action="split", amount=10)),
        ({"action": "surrender"}, SurrenderAction(action="surrender")),
        ({"action": "hurry_up"}, HurryUpAction(action="hurry_up")),
    ],
)
def test_every_action_maps_to_its_model(payload, expected):
    assert Handler().map_payload(payload) == expected


def test_mapping_is_case_insensitive():
    action = Handler().map_payload({"Action": "BET", "Amount": 40})
    assert action == BetAction(action="bet", amount=40)


def test_missing_action_is_a_mapping_error():
    with pytest.raises(MappingError):
        Handler().map_payload({"amount": 10})


@pytest.mark.parametrize(
    "payload",
    [
        {"action": "fold"},
        {"action": "bet"},
        {"action": "bet", "amount": 0},
        {"action": "bet", "amount": "10"},
        {"action": "bet", "amount": True},
        {"action": "hit", "amount": 10},
        {"action": 3},
    ],
)
def test_malformed_payloads_fail_validation(payload):
    with pytest.raises(ValidationError):
        Handler().map_payload(payload)


def test_handle_acknowledges_action():
    handler = Handler()
    result = handler.handle(handler.map_payload({"action": "split", "amount": 30}), make_context("dealer"))

    assert result == {
        "mode": "blackjack",
        "action": "split",
        "player_id": "dealer",
        "accepted": True,
        "details": {"amount": 30},
    }


def test_wager_below_table_minimum_is_rejected():
    handler = Handler(config={"min_bet": 20})

    with pytest.raises(HandlerError) as excinfo:
        handler.handle(BetAction(action="bet", amount=10), make_context())

    assert excinfo.value.declared_kind == HandlerError.DOMAIN
    assert excinfo.value.status_code == 409
    assert "table minimum of 20" in str(excinfo.value)


def test_wager_above_starting_balance_is_rejected():
    with pytest.raises(HandlerError, match="starting balance of 1000"):
        Handler().handle(BetAction(action="bet", amount=1001), make_context())


def test_manifest_reports_effective_config():
    manifest = Handler(config={"min_bet": 5, "max_players": 6}).manifest()

    assert manifest["id"] == "blackjack"
    assert "hurry_up" in manifest["actions"]
    assert manifest["config"]["min_bet"] == 5
    assert manifest["config"]["max_players"] == 6


def test_default_config_from_manifest():
    config = Handler().config

    assert config.starting_balance == 1000
    assert config.min_bet == 0
    assert config.turn_time_limit == timedelta(seconds=30)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"starting_balance": 0}, "Starting balance must be positive"),
        ({"min_bet": -1}, "Minimum bet cannot be negative"),
        ({"min_bet": 2000}, "cannot exceed starting balance"),
        ({"betting_time_limit": 0}, "Betting time limit must be positive"),
        ({"turn_time_limit": -5}, "Turn time limit must be positive"),
        ({"min_players": 0}, "Minimum players must be at least 1"),
        ({"min_players": 4, "max_players": 2}, "cannot be less than minimum players"),
    ],
)
def test_invalid_config_is_rejected(overrides, message):
    with pytest.raises(ValidationError, match=message):
        BlackjackConfig(**overrides)


def test_field_names_differing_only_by_case_are_rejected():
    with pytest.raises(MappingError, match="amount"):
        Handler().map_payload({"action": "bet", "amount": 10, "AMOUNT": 900})


def test_action_given_twice_is_rejected():
    with pytest.raises(MappingError):
        Handler().map_payload({"action": "hit", "Action": "stand"})
