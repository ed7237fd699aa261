"""Box-drawn text tables over the series of a run."""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from rivernet.node import WaterNode
from rivernet.system.result import DetailedResult
from rivernet.units import Quantity


class BarStyle(Enum):
    SINGLE = "single"
    DOUBLE = "double"

    def glyph(self, name: str) -> str:
        return _GLYPHS[self][name]


_GLYPHS: dict[BarStyle, dict[str, str]] = {
    BarStyle.SINGLE: {
        "v": "│", "h": "─",
        "tl": "┌", "tr": "┐",
        "bl": "└", "bj": "┴", "br": "┘",
        "ml": "├", "mj": "┼", "mr": "┤",
        "hl": "├", "hj": "┼", "hr": "┤",
    },
    BarStyle.DOUBLE: {
        "v": "║", "h": "═",
        "tl": "╔", "tr": "╗",
        "bl": "╚", "bj": "╩", "br": "╝",
        "ml": "╠", "mj": "╬", "mr": "╣",
        "hl": "╟", "hj": "╫", "hr": "╢",
    },
}  # fmt: skip


@dataclass(frozen=True, slots=True)
class _Title:
    text: str


@dataclass(frozen=True, slots=True)
class _Row:
    cells: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class _Rule:
    # "strong": fill with the table's own bar; "light": single-line fill
    weight: str


@dataclass(frozen=True, slots=True)
class _EndCap:
    pass


_Element = _Title | _Row | _Rule | _EndCap


@dataclass
class PrintableTable:
    left_first: bool = True
    bar: BarStyle = BarStyle.DOUBLE
    _elements: list[_Element] = field(default_factory=list, init=False, repr=False)

    def add_title(self, title: str) -> "PrintableTable":
        self._elements.append(_Title(title))
        return self

    def add_row(self, cells: list[str]) -> "PrintableTable":
        self._elements.append(_Row(tuple("" if c is None else str(c) for c in cells)))
        return self

    def add_header_divider(self) -> "PrintableTable":
        self._elements.append(_Rule("strong"))
        return self

    def add_divider(self) -> "PrintableTable":
        self._elements.append(_Rule("light"))
        return self

    def add_end_cap(self) -> "PrintableTable":
        self._elements.append(_EndCap())
        return self

    def _widths(self) -> list[int]:
        rows = [e for e in self._elements if isinstance(e, _Row)]
        columns = max((len(r.cells) for r in rows), default=1) or 1
        widths = [0] * columns
        for row in rows:
            for i, cell in enumerate(row.cells):
                widths[i] = max(widths[i], len(cell))
        widths = [max(1, w) for w in widths]

        titles = [len(e.text.strip()) + 4 for e in self._elements if isinstance(e, _Title)]
        required = max(titles, default=0)
        if required > table_width(widths):
            widths[-1] += required - table_width(widths)
        return widths

    def render(self) -> str:
        widths = self._widths()
        lines: list[str] = []
        for element in self._elements:
            match element:
                case _Title(text):
                    lines.append(self._title_line(text, table_width(widths)))
                case _Row(cells):
                    lines.append(self._row_line(cells, widths))
                case _Rule("strong"):
                    lines.append(self._rule_line(widths, self.bar.glyph("h"), "ml", "mj", "mr"))
                case _Rule(_):
                    lines.append(self._rule_line(widths, BarStyle.SINGLE.glyph("h"), "hl", "hj", "hr"))
                case _EndCap():
                    lines.append(self._rule_line(widths, self.bar.glyph("h"), "bl", "bj", "br"))
        return "".join(line + "\n" for line in lines)

    def __str__(self) -> str:
        return self.render()

    def _title_line(self, title: str, total: int) -> str:
        text = f" {title.strip()} "
        inner = max(0, total - 2 - len(text))
        left = inner // 2
        fill = self.bar.glyph("h")
        return self.bar.glyph("tl") + fill * left + text + fill * (inner - left) + self.bar.glyph("tr")

    def _row_line(self, cells: tuple[str, ...], widths: list[int]) -> str:
        clipped = [(cells[i] if i < len(cells) else "")[: widths[i]] for i in range(len(widths))]
        padded = []
        for i, cell in enumerate(clipped):
            if i == 0 and self.left_first:
                padded.append(cell.ljust(widths[i]))
            else:
                padded.append(cell.rjust(widths[i]))
        v = self.bar.glyph("v")
        return v + "".join(f" {cell} {v}" for cell in padded)

    def _rule_line(self, widths: list[int], fill: str, left: str, join: str, right: str) -> str:
        segments = [fill * (w + 2) for w in widths]
        return self.bar.glyph(left) + self.bar.glyph(join).join(segments) + self.bar.glyph(right)


def table_width(widths: list[int]) -> int:
    return sum(widths) + 3 * len(widths) + 1


def format_volume(megalitres: float) -> str:
    return str(Quantity.megalitres(megalitres))


def _day_labels(days: int) -> list[str]:
    return [f"Day {d}" for d in range(1, days + 1)]


def volume_table(result: DetailedResult) -> PrintableTable:
    """Stored/in-transit volume after outflow, one column per river sorted by name."""
    rivers = result.rivers()
    table = PrintableTable(left_first=False)
    table.add_title(" Volume (After Outflow) ").add_row(["", *(r.name for r in rivers)]).add_header_divider()
    columns = [[format_volume(v) for v in result.storage(r)] for r in rivers]
    for day, label in enumerate(_day_labels(result.days)):
        table.add_row([label, *(col[day] for col in columns)])
    return table.add_end_cap()


def outflow_table(result: DetailedResult, root: WaterNode) -> PrintableTable:
    outflow = result.outflow(root)
    storage = result.storage(root)
    accumulated = np.cumsum(outflow)
    return (
        PrintableTable(left_first=True)
        .add_title(f" {root.name} Outflow ")
        .add_row(["", *_day_labels(result.days)])
        .add_header_divider()
        .add_row(["Outflow", *(format_volume(v) for v in outflow)])
        .add_row(["Storage", *(format_volume(v) for v in storage)])
        .add_divider()
        .add_row(["Accumulated", *(format_volume(v) for v in accumulated)])
        .add_end_cap()
    )


def render_report(result: DetailedResult, root: WaterNode) -> str:
    return volume_table(result).render() + outflow_table(result, root).render()
