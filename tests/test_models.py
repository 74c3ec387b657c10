import pytest
from pydantic import ValidationError

from kataclient import (
    MissingFieldError,
    MoveGroup,
    Player,
    Query,
    QueryVersion,
    Rules,
    Terminate,
    Version,
)


def _moves():
    return [(Player.BLACK, "Q16"), (Player.WHITE, "D4")]


def test_builder_sets_required_and_optional_fields():
    q = (
        Query.builder()
        .id("a1")
        .moves(_moves())
        .rules(Rules.JAPANESE)
        .board_size(19)
        .set(komi=6.5, max_visits=400, include_ownership=True)
        .build()
    )
    assert q.id == "a1"
    assert q.board_x_size == 19 and q.board_y_size == 19
    assert q.komi == 6.5
    assert q.max_visits == 400
    assert q.include_ownership is True
    # Untouched options stay absent, not defaulted
    assert q.initial_player is None
    assert q.white_handicap_bonus is None


def test_builder_allows_rectangular_boards():
    q = Query.builder().id("r").moves([]).rules(Rules.CHINESE).board_size(9, 13).build()
    assert (q.board_x_size, q.board_y_size) == (9, 13)


def test_builder_reports_every_missing_field():
    with pytest.raises(MissingFieldError) as info:
        Query.builder().id("a1").set(komi=7.5).build()
    assert info.value.fields == ["moves", "rules", "board_x_size", "board_y_size"]
    # Still a ValueError for callers that only know the builtin
    assert isinstance(info.value, ValueError)


def test_builder_rejects_unknown_option():
    with pytest.raises(TypeError):
        Query.builder().set(komy=7.5)


def test_keyword_construction_requires_fields():
    with pytest.raises(ValidationError):
        Query(id="a1", moves=[], rules=Rules.AGA)  # type: ignore[call-arg]


def test_query_field_constraints():
    base = dict(id="a1", moves=[], rules=Rules.KOREAN, board_x_size=19, board_y_size=19)
    with pytest.raises(ValidationError):
        Query(**{**base, "id": ""})
    with pytest.raises(ValidationError):
        Query(**{**base, "board_x_size": 0})
    with pytest.raises(ValidationError):
        Query(**{**base, "komi": float("nan")})
    group = MoveGroup(player=Player.BLACK, moves=["A1"], until_depth=1)
    with pytest.raises(ValidationError):
        Query(**{**base, "allow_moves": [group, group]})
    assert Query(**{**base, "allow_moves": [group]}).allow_moves == (group,)


def test_models_are_immutable():
    q = QueryVersion(id="v1")
    with pytest.raises(ValidationError):
        q.id = "v2"  # type: ignore[misc]


def test_terminate_requires_target():
    with pytest.raises(ValidationError):
        Terminate(id="t1")  # type: ignore[call-arg]
    t = Terminate(id="t1", terminate_id="a1", turn_numbers=[3, 4])
    assert t.action == "terminate"


def test_version_git_hash_sentinel():
    assert Version(id="v", git_hash="<omitted>", version="1.15.3").git_hash_omitted
    assert Version(id="v", git_hash="omitted", version="1.15.3").git_hash_omitted
    assert not Version(id="v", git_hash="a1b2c3", version="1.15.3").git_hash_omitted
