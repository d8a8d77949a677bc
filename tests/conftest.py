from __future__ import annotations

import pytest

from tablegames.config import CONFIG_ENV, LOG_LEVEL_ENV, MODES_ENV
from tablegames.registry import GameModeRegistry
from tablegames.runtime.auth import Principal, TokenAuthenticator
from tablegames.runtime.dispatcher import Dispatcher


DEALER_TOKEN = "dealer-token"
PLAYER_TOKEN = "player-token"
OUTSIDER_TOKEN = "outsider-token"


class RecordingHandler:
    """Handler double that records which pipeline hooks were reached."""

    def __init__(self, output=None, error=None):
        self.output = output if output is not None else {"handled": True}
        self.error = error
        self.mapped = []
        self.handled = []
        self.closed = False

    def manifest(self):
        return {"id": "recording"}

    def map_payload(self, payload):
        self.mapped.append(payload)
        return payload

    def handle(self, action, context):
        self.handled.append((action, context))
        if self.error is not None:
            raise self.error
        return self.output

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    for name in (CONFIG_ENV, MODES_ENV, LOG_LEVEL_ENV):
        monkeypatch.delenv(name, raising=False)


def make_authenticator():
    return TokenAuthenticator(
        [
            Principal(DEALER_TOKEN, "dealer"),
            Principal(PLAYER_TOKEN, "player-1", ("blackjack",)),
            Principal(OUTSIDER_TOKEN, "outsider", ("poker",)),
        ]
    )


def make_dispatcher(**handlers):
    registry = GameModeRegistry()
    for mode_id, handler in handlers.items():
        registry.register(mode_id, handler)
    registry.freeze()
    return Dispatcher(registry, make_authenticator())
