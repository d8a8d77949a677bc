"""Wire-level request and response models."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class ActionRequest(BaseModel):
    """Inbound action addressed to exactly one game mode."""

    model_config = ConfigDict(extra="forbid")

    mode_id: StrictStr = Field(alias="modeId")
    payload: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("mode_id")
    @classmethod
    def _mode_id_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("modeId must not be empty")
        return value


class ErrorBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: StrictStr
    message: StrictStr


class ErrorResponse(BaseModel):
    """Stable failure envelope: `{"error": {"kind": ..., "message": ...}}`."""

    model_config = ConfigDict(extra="forbid")

    error: ErrorBody


class SuccessResponse(BaseModel):
    """Stable success envelope: `{"result": ...}`."""

    model_config = ConfigDict(extra="forbid")

    result: Any = None
