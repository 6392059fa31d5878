"""Pytest configuration shared across the suite."""

from __future__ import annotations

import re
from typing import Any, List

import pytest

_RANGE_PATTERN = re.compile(r"^(?P<sheet>[^!]+)!A(?P<start>\d+):I(?P<end>\d+)?$")

HEADER = [
    "Plataforma",
    "Nome",
    "Data de Lançamento",
    "Gênero",
    "Status",
    "Tempo",
    "Início",
    "Fim",
    "Nota",
]


class FakeSheetTable:
    """In-memory stand-in for the spreadsheet; ``rows[0]`` is the header row."""

    def __init__(self, rows: List[List[Any]] | None = None, sheet_name: str = "Jogos") -> None:
        self.rows: List[List[Any]] = [list(HEADER)] + [list(row) for row in rows or []]
        self.sheet_name = sheet_name
        self.calls: list[tuple[str, Any]] = []

    def _start_row(self, range_: str) -> int:
        match = _RANGE_PATTERN.match(range_)
        assert match is not None, f"unexpected range {range_}"
        assert match.group("sheet") == self.sheet_name
        return int(match.group("start"))

    async def get_values(self, range_: str) -> List[List[Any]]:
        self.calls.append(("get_values", range_))
        start = self._start_row(range_)
        rows = [list(row) for row in self.rows[start - 1 :]]
        while rows and not rows[-1]:
            rows.pop()
        return rows

    async def append_row(self, range_: str, row: List[Any]) -> str:
        self.calls.append(("append_row", range_))
        self.rows.append(list(row))
        number = len(self.rows)
        return f"{self.sheet_name}!A{number}:I{number}"

    async def update_row(self, range_: str, row: List[Any]) -> None:
        self.calls.append(("update_row", range_))
        index = self._start_row(range_) - 1
        while len(self.rows) <= index:
            self.rows.append([])
        self.rows[index] = list(row)

    async def get_sheet_id(self, title: str) -> int | None:
        self.calls.append(("get_sheet_id", title))
        return 0 if title == self.sheet_name else None

    async def delete_rows(self, *, sheet_id: int, start_index: int, end_index: int) -> None:
        self.calls.append(("delete_rows", (sheet_id, start_index, end_index)))
        del self.rows[start_index:end_index]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


def make_row(plataforma: str, nome: str, **overrides: Any) -> List[Any]:
    values = {
        "dataLancamento": "",
        "genero": "",
        "status": "Não iniciado",
        "tempo": "",
        "inicio": "",
        "fim": "",
        "nota": "",
    }
    values.update(overrides)
    return [
        plataforma,
        nome,
        values["dataLancamento"],
        values["genero"],
        values["status"],
        values["tempo"],
        values["inicio"],
        values["fim"],
        values["nota"],
    ]


@pytest.fixture
def sheet_table() -> FakeSheetTable:
    return FakeSheetTable(
        [
            make_row("PC", "A", status="Jogando", tempo="10h"),
            make_row("PS5", "B", dataLancamento="2020-11-12", nota="9"),
        ]
    )


@pytest.fixture
def sheets_settings():
    from game_catalog.core.config import SheetsSettings

    return SheetsSettings(spreadsheet_id="test-spreadsheet", credentials_json="{}")
