"""
JSON-lines codec for engine messages (pure, no I/O).

Every encoded message is one compact UTF-8 JSON object followed by a single
newline. Keys are the camelCase wire aliases, unset optional fields are left
out entirely, enums render as their wire strings and stone pairs render as
two-element arrays.

Responses carry no common tag, so decode_response() picks the variant with a
fixed, ordered structural check. The first rule that matches decides; if the
chosen variant then fails validation the line is rejected rather than tried
against later rules:

1. the line must be UTF-8 text holding a single JSON object
2. an "action" key: "query_version" -> Version, "clear_cache" -> CacheCleared,
   "terminate" -> TerminateAck; any other value is rejected
3. an "error" key -> EngineError; a "warning" key -> EngineWarning
4. both "moveInfos" and "rootInfo" -> Result
5. "noResults" or "turnNumber" -> Resultless
6. anything else is rejected

A line carrying "moveInfos" without "rootInfo" falls through to rule 5 and is
rejected there for lacking "noResults"; the engine is not known to emit one.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple, Type, Union, cast

from pydantic import ValidationError

from .errors import DecodeError, EncodeError, UnrecognizedAction, UnrecognizedResponse
from .models import (
    Action,
    CacheCleared,
    ClearCache,
    EngineError,
    EngineWarning,
    Query,
    QueryVersion,
    Response,
    Result,
    Resultless,
    Terminate,
    TerminateAck,
    Version,
    WireModel,
)
from .types import CLEAR_CACHE, QUERY_VERSION, TERMINATE

__all__ = ["encode_action", "encode_response", "decode_action", "decode_response"]


_ACTION_TYPES = (Query, QueryVersion, ClearCache, Terminate)
_RESPONSE_TYPES = (
    Result,
    Resultless,
    TerminateAck,
    Version,
    CacheCleared,
    EngineError,
    EngineWarning,
)

_ACTION_BY_KIND: Dict[str, Type[WireModel]] = {
    QUERY_VERSION: QueryVersion,
    CLEAR_CACHE: ClearCache,
    TERMINATE: Terminate,
}

_RESPONSE_BY_ACTION: Dict[str, Type[WireModel]] = {
    QUERY_VERSION: Version,
    CLEAR_CACHE: CacheCleared,
    TERMINATE: TerminateAck,
}


# --- Encoding ---

def _dump_line(payload: Dict[str, Any], message_id: Optional[str]) -> bytes:
    try:
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Cannot serialize message {message_id!r}: {exc}", action_id=message_id) from exc
    return text.encode("utf-8") + b"\n"


def _to_wire(message: WireModel, message_id: Optional[str]) -> Dict[str, Any]:
    try:
        return message.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"override_settings"},
        )
    except ValueError as exc:
        raise EncodeError(f"Cannot serialize message {message_id!r}: {exc}", action_id=message_id) from exc


def encode_action(action: Action) -> bytes:
    if not isinstance(action, _ACTION_TYPES):
        raise EncodeError(f"Not an action: {type(action).__name__}")
    payload = _to_wire(action, action.id)
    # Passed through untouched; json.dumps below is the only check
    if isinstance(action, Query) and action.override_settings is not None:
        payload["overrideSettings"] = dict(action.override_settings)
    return _dump_line(payload, action.id)


def encode_response(response: Response) -> bytes:
    if not isinstance(response, _RESPONSE_TYPES):
        raise EncodeError(f"Not a response: {type(response).__name__}")
    return _dump_line(_to_wire(response, response.id), response.id)


# --- Decoding ---

def _load_object(line: Union[str, bytes], error: Type[DecodeError]) -> Tuple[str, Dict[str, Any]]:
    if isinstance(line, bytes):
        try:
            text = line.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise error(line.decode("utf-8", errors="replace"), f"Invalid UTF-8: {exc.reason}") from exc
    else:
        text = line
    text = text.rstrip("\r\n")
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        raise error(text, f"Invalid JSON: {exc.msg}") from exc
    except RecursionError as exc:
        raise error(text, "Invalid JSON: nesting too deep") from exc
    if not isinstance(obj, dict):
        raise error(text, "Expected a JSON object")
    return text, obj


def _response_model(obj: Dict[str, Any]) -> Optional[Type[WireModel]]:
    if "action" in obj:
        kind = obj["action"]
        return _RESPONSE_BY_ACTION.get(kind) if isinstance(kind, str) else None
    if "error" in obj:
        return EngineError
    if "warning" in obj:
        return EngineWarning
    if "moveInfos" in obj and "rootInfo" in obj:
        return Result
    if "noResults" in obj or "turnNumber" in obj:
        return Resultless
    return None


def decode_response(line: Union[str, bytes]) -> Response:
    text, obj = _load_object(line, UnrecognizedResponse)
    model = _response_model(obj)
    if model is None:
        raise UnrecognizedResponse(text, "Matches no known response shape")
    try:
        return cast(Response, model.model_validate(obj))
    except ValidationError as exc:
        raise UnrecognizedResponse(text, f"Invalid {model.__name__}: {exc.error_count()} error(s)") from exc


def decode_action(line: Union[str, bytes]) -> Action:
    text, obj = _load_object(line, UnrecognizedAction)
    kind = obj.get("action")
    model: Optional[Type[WireModel]]
    if kind is None:
        model = Query
    else:
        model = _ACTION_BY_KIND.get(kind) if isinstance(kind, str) else None
    if model is None:
        raise UnrecognizedAction(text, f"Unknown action: {kind!r}")
    try:
        return cast(Action, model.model_validate(obj))
    except ValidationError as exc:
        raise UnrecognizedAction(text, f"Invalid {model.__name__}: {exc.error_count()} error(s)") from exc
