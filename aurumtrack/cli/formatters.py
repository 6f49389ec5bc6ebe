"""Row renderers behind the global ``--format`` option."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable, Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

from .sinks import PLACEHOLDER

Row = Mapping[str, object]

# columns rendered right-aligned in tables
NUMERIC_COLUMNS = frozenset(
    {"price", "change", "percent", "inr_per_gram", "premium", "coefficient", "anchor", "current", "overnight", "expected_open"}
)


def select_columns(rows: Sequence[Row], columns: Sequence[str] | None) -> tuple[list[str], list[dict[str, object]]]:
    """Restrict ``rows`` to ``columns``, defaulting to the first row's keys."""

    if columns:
        names = list(columns)
    elif rows:
        names = list(rows[0])
    else:
        names = []
    return names, [{name: row.get(name) for name in names} for row in rows]


class OutputFormatter:
    """Base class; subclasses write ``rows`` to ``stream`` in one format."""

    name: str

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        title: str | None = None,
    ) -> None:
        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """One rich table per call, titled when a title is given."""

    name: str = "table"
    no_color: bool = False

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        title: str | None = None,
    ) -> None:
        names, projected = select_columns(rows, columns)
        console = Console(file=stream, no_color=self.no_color, color_system=None if self.no_color else "auto")

        table = Table(box=SIMPLE, title=title, header_style="" if self.no_color else "bold")
        for name in names:
            table.add_column(name, justify="right" if name in NUMERIC_COLUMNS else "left")
        for row in projected:
            table.add_row(*(PLACEHOLDER if value is None else str(value) for value in row.values()))

        console.print(table)
        if not projected:
            console.print("No rows.")


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """One JSON object per row; the title is not emitted."""

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        title: str | None = None,
    ) -> None:
        _, projected = select_columns(rows, columns)
        for row in projected:
            stream.write(json.dumps(row, ensure_ascii=False, default=str) + "\n")
        stream.flush()


FORMATTERS: dict[str, Callable[[bool], OutputFormatter]] = {
    "table": lambda no_color: TableFormatter(no_color=no_color),
    "jsonl": lambda no_color: JSONLFormatter(),
}


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Look up a formatter by name, raising ``ValueError`` for unknown ones."""

    factory = FORMATTERS.get(name.strip().lower())
    if factory is None:
        raise ValueError(f"Unsupported format '{name}'. Available formats: {', '.join(FORMATTERS)}.")
    return factory(no_color)


__all__ = ["FORMATTERS", "JSONLFormatter", "OutputFormatter", "TableFormatter", "create_formatter", "select_columns"]
