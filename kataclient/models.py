from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
)
from pydantic.alias_generators import to_camel

from .errors import MissingFieldError
from .types import (
    CLEAR_CACHE,
    GIT_HASH_OMITTED,
    QUERY_VERSION,
    TERMINATE,
    Coordinate,
    PlacedStone,
    Player,
    Rules,
    WhiteHandicapBonus,
)


class WireModel(BaseModel):
    """Immutable message value; snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# --- Outgoing -------------------------------------------------------------


class MoveGroup(WireModel):
    player: Player
    moves: List[Coordinate]
    until_depth: PositiveInt


class Query(WireModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str = Field(..., min_length=1)
    initial_stones: Optional[List[PlacedStone]] = None
    moves: List[PlacedStone]
    # Only the named presets; custom rule objects are not modelled
    rules: Rules
    initial_player: Optional[Player] = None
    komi: Optional[float] = None
    white_handicap_bonus: Optional[WhiteHandicapBonus] = None
    board_x_size: int = Field(..., ge=1, le=255)
    board_y_size: int = Field(..., ge=1, le=255)
    analyze_turns: Optional[List[NonNegativeInt]] = None
    max_visits: Optional[PositiveInt] = None
    root_policy_temperature: Optional[float] = None
    root_fpu_reduction_max: Optional[float] = None
    analysis_pv_len: Optional[NonNegativeInt] = Field(None, alias="analysisPVLen")
    include_ownership: Optional[bool] = None
    include_ownership_stdev: Optional[bool] = None
    include_moves_ownership: Optional[bool] = None
    include_moves_ownership_stdev: Optional[bool] = None
    include_policy: Optional[bool] = None
    include_pv_visits: Optional[bool] = Field(None, alias="includePVVisits")
    avoid_moves: Optional[List[MoveGroup]] = None
    # The engine accepts exactly one allow group
    allow_moves: Optional[Tuple[MoveGroup]] = None
    # Opaque engine settings; checked only when encoded
    override_settings: Optional[Dict[str, Any]] = None
    report_during_search_every: Optional[PositiveFloat] = None
    priority: Optional[int] = None
    priorities: Optional[List[int]] = None

    @classmethod
    def builder(cls) -> "QueryBuilder":
        return QueryBuilder()


class QueryVersion(WireModel):
    id: str = Field(..., min_length=1)
    action: Literal["query_version"] = QUERY_VERSION


class ClearCache(WireModel):
    id: str = Field(..., min_length=1)
    action: Literal["clear_cache"] = CLEAR_CACHE


class Terminate(WireModel):
    """Cancel the request `terminate_id`, optionally only some of its turns."""

    id: str = Field(..., min_length=1)
    action: Literal["terminate"] = TERMINATE
    terminate_id: str = Field(..., min_length=1)
    turn_numbers: Optional[List[NonNegativeInt]] = None


Action = Union[Query, QueryVersion, ClearCache, Terminate]


class QueryBuilder:
    """Chained construction for Query.

    Required fields are checked in build(), so a half-filled query never
    reaches the encoder:

        q = (Query.builder()
             .id("a1")
             .moves([(Player.BLACK, "Q16")])
             .rules(Rules.JAPANESE)
             .board_size(19)
             .set(komi=6.5, max_visits=400)
             .build())
    """

    REQUIRED = ("id", "moves", "rules", "board_x_size", "board_y_size")

    def __init__(self) -> None:
        self._fields: Dict[str, Any] = {}

    def id(self, value: str) -> "QueryBuilder":
        self._fields["id"] = value
        return self

    def moves(self, moves: Sequence[PlacedStone]) -> "QueryBuilder":
        self._fields["moves"] = list(moves)
        return self

    def rules(self, rules: Rules) -> "QueryBuilder":
        self._fields["rules"] = rules
        return self

    def board_size(self, x: int, y: Optional[int] = None) -> "QueryBuilder":
        self._fields["board_x_size"] = x
        self._fields["board_y_size"] = x if y is None else y
        return self

    def set(self, **options: Any) -> "QueryBuilder":
        unknown = sorted(k for k in options if k not in Query.model_fields)
        if unknown:
            raise TypeError(f"Unknown Query field(s): {', '.join(unknown)}")
        self._fields.update(options)
        return self

    def build(self) -> Query:
        missing = [name for name in self.REQUIRED if name not in self._fields]
        if missing:
            raise MissingFieldError(missing)
        return Query(**self._fields)


# --- Incoming -------------------------------------------------------------


class MoveInfo(WireModel):
    move: Coordinate
    visits: int
    winrate: float
    score_lead: float
    score_selfplay: float
    score_stdev: float
    prior: float
    utility: float
    lcb: float
    utility_lcb: float
    order: int
    pv: List[Coordinate]
    # Names another move in this result; never an owned copy of it
    is_symmetry_of: Optional[Coordinate] = None
    pv_visits: Optional[List[int]] = None
    pv_edge_visits: Optional[List[int]] = None
    edge_visits: Optional[int] = None
    ownership: Optional[List[float]] = None
    ownership_stdev: Optional[List[float]] = None
    score_mean: Optional[float] = None
    weight: Optional[float] = None
    edge_weight: Optional[float] = None
    play_selection_value: Optional[float] = None


class RootInfo(WireModel):
    winrate: float
    score_lead: float
    score_selfplay: float
    visits: int
    utility: Optional[float] = None
    score_stdev: Optional[float] = None
    this_hash: Optional[str] = None
    sym_hash: Optional[str] = None
    current_player: Optional[Player] = None


class Result(WireModel):
    id: str = Field(..., min_length=1)
    is_during_search: bool
    move_infos: List[MoveInfo]
    root_info: RootInfo
    turn_number: Optional[int] = None
    ownership: Optional[List[float]] = None
    ownership_stdev: Optional[List[float]] = None
    policy: Optional[List[float]] = None


class Resultless(WireModel):
    """Progress marker for a turn the engine had nothing to report on."""

    id: str = Field(..., min_length=1)
    is_during_search: bool
    turn_number: int
    no_results: bool


class TerminateAck(WireModel):
    id: str = Field(..., min_length=1)
    action: Literal["terminate"] = TERMINATE
    terminate_id: Optional[str] = None
    turn_number: Optional[int] = None
    turn_numbers: Optional[List[int]] = None


class Version(WireModel):
    id: str = Field(..., min_length=1)
    action: Literal["query_version"] = QUERY_VERSION
    # Released engines spell this key "git_hash"
    git_hash: str = Field(..., validation_alias=AliasChoices("gitHash", "git_hash"))
    version: str

    @property
    def git_hash_omitted(self) -> bool:
        return self.git_hash in (GIT_HASH_OMITTED, GIT_HASH_OMITTED.strip("<>"))


class CacheCleared(WireModel):
    id: str = Field(..., min_length=1)
    action: Literal["clear_cache"] = CLEAR_CACHE


class EngineError(WireModel):
    """The engine rejected a request; `id` is absent if it could not be read."""

    error: str
    field: Optional[str] = None
    id: Optional[str] = None


class EngineWarning(WireModel):
    warning: str
    field: Optional[str] = None
    id: Optional[str] = None


Response = Union[
    Result,
    Resultless,
    TerminateAck,
    Version,
    CacheCleared,
    EngineError,
    EngineWarning,
]
