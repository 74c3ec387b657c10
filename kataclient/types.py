from __future__ import annotations

from enum import Enum
from typing import Literal, Tuple, TypeAlias


class Player(str, Enum):
    BLACK = "B"
    WHITE = "W"


class Rules(str, Enum):
    """Rule-set shorthands understood by the engine."""
    TROMP_TAYLOR = "tromp-taylor"
    CHINESE = "chinese"
    CHINESE_OGS = "chinese-ogs"
    CHINESE_KGS = "chinese-kgs"
    JAPANESE = "japanese"
    KOREAN = "korean"
    STONE_SCORING = "stone-scoring"
    AGA = "aga"
    BGA = "bga"
    NEW_ZEALAND = "new-zealand"
    AGA_BUTTON = "aga-button"


class WhiteHandicapBonus(str, Enum):
    ZERO = "0"
    N = "N"
    N_MINUS_ONE = "N-1"


# Engine-native coordinate, e.g. "D4", "pass" or "(3,3)" on large boards
Coordinate: TypeAlias = str
PlacedStone: TypeAlias = Tuple[Player, Coordinate]

# Discriminator values carried in the "action" field
ActionKind: TypeAlias = Literal["query_version", "clear_cache", "terminate"]
QUERY_VERSION: ActionKind = "query_version"
CLEAR_CACHE: ActionKind = "clear_cache"
TERMINATE: ActionKind = "terminate"

# Builds without git metadata report this instead of a revision
GIT_HASH_OMITTED = "<omitted>"
