from .types import (
    Player,
    Rules,
    WhiteHandicapBonus,
    Coordinate,
    PlacedStone,
    GIT_HASH_OMITTED,
)
from .errors import (
    KataClientError,
    SpawnError,
    EncodeError,
    WriteError,
    DecodeError,
    UnrecognizedResponse,
    UnrecognizedAction,
    MissingFieldError,
)
from .models import (
    MoveGroup,
    Query,
    QueryBuilder,
    QueryVersion,
    ClearCache,
    Terminate,
    Action,
    MoveInfo,
    RootInfo,
    Result,
    Resultless,
    TerminateAck,
    Version,
    CacheCleared,
    EngineError,
    EngineWarning,
    Response,
)
from .codec import encode_action, encode_response, decode_action, decode_response
from .channel import (
    DEFAULT_LINE_LIMIT,
    EngineProcess,
    ActionSink,
    ResponseStream,
    DuplexChannel,
    start,
)

__all__ = [
    "Player",
    "Rules",
    "WhiteHandicapBonus",
    "Coordinate",
    "PlacedStone",
    "GIT_HASH_OMITTED",
    "KataClientError",
    "SpawnError",
    "EncodeError",
    "WriteError",
    "DecodeError",
    "UnrecognizedResponse",
    "UnrecognizedAction",
    "MissingFieldError",
    "MoveGroup",
    "Query",
    "QueryBuilder",
    "QueryVersion",
    "ClearCache",
    "Terminate",
    "Action",
    "MoveInfo",
    "RootInfo",
    "Result",
    "Resultless",
    "TerminateAck",
    "Version",
    "CacheCleared",
    "EngineError",
    "EngineWarning",
    "Response",
    "encode_action",
    "encode_response",
    "decode_action",
    "decode_response",
    "DEFAULT_LINE_LIMIT",
    "EngineProcess",
    "ActionSink",
    "ResponseStream",
    "DuplexChannel",
    "start",
]
