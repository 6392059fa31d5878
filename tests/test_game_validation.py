try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from game_catalog.core.errors import ValidationError
from game_catalog.schemas import GameInput
from game_catalog.services.game_validation import (
    apply_defaults,
    build_row,
    format_playtime,
    is_valid_playtime,
    normalize_playtime,
    parse_game,
    playtime_to_minutes,
    validate_game,
)


def _record(**overrides):
    record = {"plataforma": "PC", "nome": "Celeste"}
    record.update(overrides)
    return record


def test_minimal_record_is_valid() -> None:
    assert validate_game(_record()) == []


def test_complete_record_is_valid() -> None:
    record = _record(
        dataLancamento="2018-01-25",
        genero="Platform",
        status="Concluído",
        tempo="12h 30m",
        inicio="2024-03-01T10:00:00Z",
        fim="2024-03-10",
        nota="9.5",
    )
    assert validate_game(record) == []


def test_every_problem_is_reported() -> None:
    errors = validate_game(
        {
            "plataforma": "",
            "nome": "   ",
            "dataLancamento": "not-a-date",
            "inicio": "2024-13-01",
            "status": "Zerado",
            "tempo": "forever",
            "nota": "11",
        }
    )

    assert len(errors) == 7
    assert "Platform is required." in errors
    assert "Name is required." in errors
    assert "Release date: must be an ISO 8601 date." in errors
    assert any(error.startswith("Score:") for error in errors)
    assert any(error.startswith("Status:") for error in errors)


def test_missing_required_fields_are_reported() -> None:
    assert validate_game({}) == ["Platform is required.", "Name is required."]


def test_length_limits() -> None:
    errors = validate_game(_record(plataforma="x" * 101, nome="y" * 201, genero="z" * 201))
    assert len(errors) == 3


@pytest.mark.parametrize("tempo", ["10h", "90m", "1h 30m", "1h30m", "2H 5M", ""])
def test_playtime_grammar_accepts(tempo: str) -> None:
    assert is_valid_playtime(tempo)
    assert validate_game(_record(tempo=tempo)) == []


@pytest.mark.parametrize("tempo", ["90", "h", "30m 1h", "1 hour", "1.5h"])
def test_playtime_grammar_rejects(tempo: str) -> None:
    assert not is_valid_playtime(tempo)
    assert validate_game(_record(tempo=tempo)) == [
        'Playtime: must look like "10h", "90m" or "1h 30m".'
    ]


@pytest.mark.parametrize("nota", [0, 10, "7", 5.5, "", None])
def test_score_accepts_range_or_empty(nota) -> None:
    assert validate_game(_record(nota=nota)) == []


@pytest.mark.parametrize("nota", [-1, 10.5, "abc", True, False, [3], float("nan")])
def test_score_rejects_out_of_range_or_non_numeric(nota) -> None:
    errors = validate_game(_record(nota=nota))
    assert len(errors) == 1
    assert errors[0].startswith("Score:")


def test_wrong_types_are_reported_with_other_problems() -> None:
    errors = validate_game(_record(nota=[3], tempo="zz", nome=42))

    assert len(errors) == 3
    assert {error.split(":")[0] for error in errors} == {"Score", "Playtime", "Name"}


def test_parse_game_returns_typed_model_with_defaults() -> None:
    game = parse_game(_record(nome="  Celeste  ", nota="7", status="", tempo=None))

    assert isinstance(game, GameInput)
    assert game.nome == "Celeste"
    assert game.nota == 7.0
    assert game.status == "Não iniciado"
    assert game.tempo == ""


def test_parse_game_raises_catalog_validation_error() -> None:
    with pytest.raises(ValidationError) as excinfo:
        parse_game(_record(nota=True))

    assert excinfo.value.message == "Invalid game data."
    assert len(excinfo.value.errors) == 1


def test_apply_defaults_fills_missing_fields() -> None:
    filled = apply_defaults({"plataforma": "PC", "nome": "Celeste", "nota": 0})

    assert filled["status"] == "Não iniciado"
    assert filled["tempo"] == ""
    assert filled["dataLancamento"] == ""
    assert filled["nota"] == 0


def test_apply_defaults_normalizes_playtime() -> None:
    filled = apply_defaults({"plataforma": "PC", "nome": "Celeste", "tempo": "1H 30M"})
    assert filled["tempo"] == "1h30m"


def test_build_row_uses_column_order() -> None:
    row = build_row({"nome": "Celeste", "plataforma": "PC", "fim": "2024-01-01"})
    assert row == ["PC", "Celeste", "", "", "Não iniciado", "", "", "2024-01-01", ""]


def test_playtime_to_minutes() -> None:
    assert playtime_to_minutes("1h 30m") == 90
    assert playtime_to_minutes("45m") == 45
    assert playtime_to_minutes("") == 0
    assert playtime_to_minutes(None) == 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(" 1H 30m ", "1h30m"), ("10h", "10h"), ("   ", ""), (None, "")],
)
def test_normalize_playtime(raw, expected) -> None:
    assert normalize_playtime(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1h30m", "1h 30min"), ("2h", "2h"), ("45m", "45min"), ("90m", "1h 30min"), ("", "-"), (None, "-")],
)
def test_format_playtime(raw, expected) -> None:
    assert format_playtime(raw) == expected
