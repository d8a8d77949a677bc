
"""Game-mode registry and handler discovery."""

from __future__ import annotations

import importlib
import json
import logging
import warnings
from pathlib import Path
from typing import Any, Dict, Iterable, KeysView, Optional

from tablegames.protocol.errors import DuplicateModeError, RegistryFrozenError, UnknownModeError


logger = logging.getLogger(__name__)

REQUIRED_HANDLER_METHODS = (
    "manifest",
    "map_payload",
    "handle",
)

MODES_DIR = Path(__file__).resolve().parent / "modes"


class GameModeRegistry:
    """Authoritative mapping from game-mode identifier to handler.

    Registration happens during startup only; call `freeze()` once it is
    done. After that the mapping is never mutated until `teardown()`, so
    `resolve` and `list_modes` need no locking.
    """

    def __init__(self) -> None:
        self._modes: Dict[str, Any] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, mode_id: str, handler: Any) -> None:
        if self._frozen:
            raise RegistryFrozenError(f"cannot register '{mode_id}': registry is frozen")
        if not isinstance(mode_id, str) or not mode_id.strip():
            raise ValueError("game mode id must be a non-empty string")
        if mode_id in self._modes:
            raise DuplicateModeError(mode_id)
        self._modes[mode_id] = handler

    def resolve(self, mode_id: str) -> Any:
        try:
            return self._modes[mode_id]
        except (KeyError, TypeError):
            raise UnknownModeError(mode_id) from None

    def list_modes(self) -> KeysView[str]:
        return self._modes.keys()

    def freeze(self) -> None:
        self._frozen = True

    def teardown(self) -> None:
        try:
            for mode_id, handler in reversed(list(self._modes.items())):
                close = getattr(handler, "close", None)
                if not callable(close):
                    continue
                logger.debug("closing handler for game mode %s", mode_id)
                try:
                    close()
                except Exception:
                    logger.exception("failed to close handler for game mode %s", mode_id)
        finally:
            self._modes.clear()
            self._frozen = False

    def __contains__(self, mode_id: object) -> bool:
        return mode_id in self._modes

    def __len__(self) -> int:
        return len(self._modes)


def _validate_handler(handler: object, manifest: dict) -> None:
    for method_name in REQUIRED_HANDLER_METHODS:
        if not callable(getattr(handler, method_name, None)):
            raise TypeError(f"missing required method: {method_name}")

    handler_manifest = handler.manifest()
    if not isinstance(handler_manifest, dict):
        raise TypeError("manifest() must return a dictionary")
    if handler_manifest.get("id") != manifest.get("id"):
        raise ValueError("manifest id does not match mode.json")


def _load_handler(mode_id: str) -> object:
    manifest_path = MODES_DIR / mode_id / "mode.json"
    manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    if manifest.get("id") != mode_id:
        raise ValueError(f"mode.json declares id '{manifest.get('id')}'")
    module = importlib.import_module(f"tablegames.modes.{mode_id}.mode")
    handler = module.Handler()
    _validate_handler(handler, manifest)
    return handler


def load_modes(mode_ids: Iterable[str], registry: Optional[GameModeRegistry] = None) -> GameModeRegistry:
    """Discover and register the handler of every configured game mode.

    A handler that cannot be loaded is skipped with a warning. A mode id
    configured twice raises `DuplicateModeError`.
    """
    registry = registry if registry is not None else GameModeRegistry()

    for mode_id in mode_ids:
        try:
            handler = _load_handler(mode_id)
        except Exception as exc:
            logger.warning("skipping game mode %s: %s", mode_id, exc)
            warnings.warn(
                f"Skipping game mode '{mode_id}': {exc}",
                RuntimeWarning,
                stacklevel=2,
            )
            continue
        registry.register(mode_id, handler)
        logger.info("registered game mode %s", mode_id)

    return registry
