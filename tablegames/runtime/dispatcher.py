
"""Request dispatcher: runs every inbound action through the fixed stage pipeline."""

from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from tablegames.modes.base import HandlerContext
from tablegames.protocol.errors import (
    HandlerError,
    InternalError,
    MappingError,
    TableGamesError,
)
from tablegames.protocol.models import ActionRequest, ErrorBody, ErrorResponse, SuccessResponse
from tablegames.registry import GameModeRegistry
from tablegames.runtime.auth import AuthContext, ModeAuthorizer
from tablegames.runtime.pipeline import STAGE_OUTCOMES, Failed, Passed, PipelineState, Stage, StageResult
from tablegames.runtime.serialization import stable_json_dumps


logger = logging.getLogger(__name__)

_ANY = TypeAdapter(Any)


def describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


@dataclass
class DispatchResult:
    status_code: int
    body: Dict[str, Any]
    state: PipelineState
    stage: Optional[Stage] = None
    entered: List[Stage] = field(default_factory=list)
    trace: List[PipelineState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.RESPONDED


@dataclass
class _Run:
    """Per-request bookkeeping; never shared between requests."""

    request_id: str
    mode_id: Optional[str] = None
    user_id: Optional[str] = None
    entered: List[Stage] = field(default_factory=list)
    trace: List[PipelineState] = field(default_factory=lambda: [PipelineState.RECEIVED])

    def enter(self, stage: Stage) -> None:
        self.entered.append(stage)

    def passed(self, stage: Stage, value: Any) -> Passed[Any]:
        self.trace.append(STAGE_OUTCOMES[stage])
        return Passed(value)


class Dispatcher:
    def __init__(self, registry: GameModeRegistry, authenticator: Any, authorizer: Optional[Any] = None):
        self.registry = registry
        self.authenticator = authenticator
        self.authorizer = authorizer or ModeAuthorizer()

    async def _complete(self, value: Any) -> Any:
        """Await `value` if needed, letting it finish even if we are cancelled meanwhile."""
        if not inspect.isawaitable(value):
            return value
        task = asyncio.ensure_future(value)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.done():
                await asyncio.wait({task})
            if not task.cancelled() and task.exception() is not None:
                logger.warning("stage failed after cancellation: %r", task.exception())
            raise

    def _parse_envelope(self, run: _Run, raw_request: Any) -> StageResult:
        if not isinstance(raw_request, dict):
            return Failed(None, MappingError("Request body must be a JSON object"))
        mode_id = raw_request.get("modeId")
        run.mode_id = mode_id if isinstance(mode_id, str) else None
        try:
            return Passed(ActionRequest.model_validate(raw_request))
        except ValidationError as exc:
            return Failed(None, MappingError(describe_validation_error(exc)))

    async def _authenticate(self, run: _Run, credential: Optional[str]) -> StageResult:
        run.enter(Stage.AUTHENTICATION)
        try:
            context = await self._complete(self.authenticator.authenticate(credential))
        except TableGamesError as exc:
            return Failed(Stage.AUTHENTICATION, exc)
        except Exception as exc:
            return Failed(Stage.AUTHENTICATION, InternalError(f"authenticator failed: {exc!r}", cause=exc))
        if not isinstance(context, AuthContext):
            return Failed(
                Stage.AUTHENTICATION,
                InternalError(f"authenticator returned {type(context).__name__}, expected AuthContext"),
            )
        run.user_id = context.user_id
        return run.passed(Stage.AUTHENTICATION, context)

    def _authorize(self, run: _Run, context: AuthContext, mode_id: str) -> StageResult:
        run.enter(Stage.AUTHORIZATION)
        try:
            self.authorizer.authorize(context, mode_id)
        except TableGamesError as exc:
            return Failed(Stage.AUTHORIZATION, exc)
        except Exception as exc:
            return Failed(Stage.AUTHORIZATION, InternalError(f"authorizer failed: {exc!r}", cause=exc))
        return run.passed(Stage.AUTHORIZATION, context)

    def _resolve(self, run: _Run, mode_id: str) -> StageResult:
        run.enter(Stage.RESOLUTION)
        try:
            handler = self.registry.resolve(mode_id)
        except TableGamesError as exc:
            return Failed(Stage.RESOLUTION, exc)
        return run.passed(Stage.RESOLUTION, handler)

    def _map_payload(self, run: _Run, handler: Any, payload: Dict[str, Any]) -> StageResult:
        run.enter(Stage.MAPPING)
        try:
            action = handler.map_payload(payload)
        except ValidationError as exc:
            return Failed(Stage.MAPPING, MappingError(describe_validation_error(exc)))
        except TableGamesError as exc:
            return Failed(Stage.MAPPING, exc)
        except Exception as exc:
            return Failed(Stage.MAPPING, InternalError(f"payload mapping failed: {exc!r}", cause=exc))
        return run.passed(Stage.MAPPING, action)

    async def _invoke(self, run: _Run, handler: Any, action: Any, context: AuthContext) -> StageResult:
        run.enter(Stage.HANDLER)
        handler_context = HandlerContext(mode_id=run.mode_id, auth=context, request_id=run.request_id)
        try:
            output = await self._complete(handler.handle(action, handler_context))
        except HandlerError as exc:
            return Failed(Stage.HANDLER, exc)
        except Exception as exc:
            return Failed(Stage.HANDLER, InternalError(f"handler raised {exc!r}", cause=exc))
        return run.passed(Stage.HANDLER, output)

    def _map_response(self, run: _Run, output: Any) -> StageResult:
        run.enter(Stage.RESPONSE)
        try:
            result = _ANY.dump_python(output, mode="json")
        except Exception as exc:
            return Failed(Stage.RESPONSE, InternalError(f"handler output is not serializable: {exc}", cause=exc))
        return run.passed(Stage.RESPONSE, SuccessResponse(result=result).model_dump())

    def _fail(self, run: _Run, failure: Failed) -> DispatchResult:
        error = failure.error
        run.trace.append(PipelineState.FAILED)
        body = ErrorResponse(error=ErrorBody(kind=error.kind, message=error.public_message)).model_dump()
        result = DispatchResult(
            status_code=error.status_code,
            body=body,
            state=PipelineState.FAILED,
            stage=failure.stage,
            entered=run.entered,
            trace=run.trace,
        )
        record = self._record(run, result)
        record["error"] = {"kind": error.kind, "message": str(error)}
        if result.status_code >= 500:
            cause = getattr(error, "cause", None)
            logger.error(
                "dispatch failed %s",
                stable_json_dumps(record),
                exc_info=(type(cause), cause, cause.__traceback__) if cause is not None else None,
            )
        else:
            logger.warning("dispatch rejected %s", stable_json_dumps(record))
        return result

    def _record(self, run: _Run, result: DispatchResult) -> Dict[str, Any]:
        return {
            "request_id": run.request_id,
            "mode_id": run.mode_id,
            "user_id": run.user_id,
            "state": result.state.value,
            "stage": result.stage.value if result.stage is not None else None,
            "status": result.status_code,
        }

    async def dispatch(self, raw_request: Any, credential: Optional[str] = None) -> DispatchResult:
        run = _Run(request_id=uuid.uuid4().hex)

        envelope = self._parse_envelope(run, raw_request)
        if isinstance(envelope, Failed):
            return self._fail(run, envelope)
        request: ActionRequest = envelope.value

        authenticated = await self._authenticate(run, credential)
        if isinstance(authenticated, Failed):
            return self._fail(run, authenticated)
        context: AuthContext = authenticated.value

        authorized = self._authorize(run, context, request.mode_id)
        if isinstance(authorized, Failed):
            return self._fail(run, authorized)

        resolved = self._resolve(run, request.mode_id)
        if isinstance(resolved, Failed):
            return self._fail(run, resolved)
        handler = resolved.value

        mapped = self._map_payload(run, handler, request.payload)
        if isinstance(mapped, Failed):
            return self._fail(run, mapped)

        handled = await self._invoke(run, handler, mapped.value, context)
        if isinstance(handled, Failed):
            return self._fail(run, handled)

        responded = self._map_response(run, handled.value)
        if isinstance(responded, Failed):
            return self._fail(run, responded)

        result = DispatchResult(
            status_code=200,
            body=responded.value,
            state=PipelineState.RESPONDED,
            entered=run.entered,
            trace=run.trace,
        )
        logger.info("dispatch ok %s", stable_json_dumps(self._record(run, result)))
        return result
