"""Startup configuration: `config.toml` plus environment overrides."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from tablegames.modes import SUPPORTED_MODES
from tablegames.runtime.auth import ALL_MODES, Principal


CONFIG_ENV = "TABLEGAMES_CONFIG"
MODES_ENV = "TABLEGAMES_MODES"
LOG_LEVEL_ENV = "TABLEGAMES_LOG_LEVEL"


class PrincipalConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    token: StrictStr = Field(min_length=1)
    user_id: StrictStr = Field(min_length=1)
    modes: List[StrictStr] = Field(default_factory=lambda: [ALL_MODES])

    def to_principal(self) -> Principal:
        return Principal(token=self.token, user_id=self.user_id, modes=tuple(self.modes))


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    modes: List[StrictStr] = Field(default_factory=lambda: list(SUPPORTED_MODES))
    principals: List[PrincipalConfig] = Field(default_factory=list)
    log_level: StrictStr = "INFO"

    def build_principals(self) -> List[Principal]:
        return [principal.to_principal() for principal in self.principals]


DEFAULT_CONFIG_PATH = "config.toml"


def _read_config_file(path: Path, required: bool) -> Dict[str, Any]:
    if not path.exists():
        if required:
            raise FileNotFoundError(f"config file not found: {path}")
        return {}
    return tomllib.loads(path.read_text(encoding="utf-8"))


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Read settings once at startup. Invalid configuration raises.

    Only the implicit `./config.toml` may be absent; a path given explicitly
    or through `TABLEGAMES_CONFIG` must exist.
    """
    explicit = path or os.environ.get(CONFIG_ENV)
    data = _read_config_file(Path(explicit or DEFAULT_CONFIG_PATH), required=bool(explicit))

    modes = os.environ.get(MODES_ENV)
    if modes is not None:
        data["modes"] = [mode.strip() for mode in modes.split(",") if mode.strip()]
    log_level = os.environ.get(LOG_LEVEL_ENV)
    if log_level:
        data["log_level"] = log_level

    return Settings.model_validate(data)
