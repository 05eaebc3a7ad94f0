"""Position catalogue records and quotation selections."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping

from .values import cell_text, safe_float, to_float, to_int


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Position:
    """Catalogue entry for one staffing title."""

    id: str
    name: str
    base_salary: float  # monthly
    specific_tool_cost: float | None = None  # one-off, per unit

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "base_salary": self.base_salary,
            "specific_tool_cost": self.specific_tool_cost,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Position":
        tool = to_float(raw.get("specific_tool_cost", raw.get("specificToolCost")))
        return cls(
            id=cell_text(raw.get("id")) or new_id(),
            name=cell_text(raw.get("name")),
            base_salary=safe_float(raw.get("base_salary", raw.get("baseSalary"))),
            specific_tool_cost=tool or None,
        )


@dataclass(frozen=True)
class SelectedPosition:
    """A catalogue position placed on a quotation with a headcount.

    ``unique_id`` identifies the selection itself, so the same title can be
    quoted on several lines.
    """

    position: Position
    qty: int
    unique_id: str

    @classmethod
    def from_position(
        cls, position: Position, qty: int, *, unique_id: str | None = None
    ) -> "SelectedPosition":
        return cls(position=position, qty=int(qty), unique_id=unique_id or new_id())

    @property
    def id(self) -> str:
        return self.position.id

    @property
    def name(self) -> str:
        return self.position.name

    @property
    def base_salary(self) -> float:
        return self.position.base_salary

    @property
    def specific_tool_cost(self) -> float | None:
        return self.position.specific_tool_cost

    def with_qty(self, qty: int) -> "SelectedPosition":
        return SelectedPosition(position=self.position, qty=int(qty), unique_id=self.unique_id)

    def to_dict(self) -> dict[str, Any]:
        data = self.position.to_dict()
        data.update({"qty": self.qty, "unique_id": self.unique_id})
        return data

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SelectedPosition":
        return cls(
            position=Position.from_dict(raw),
            qty=to_int(raw.get("qty")) or 0,
            unique_id=cell_text(raw.get("unique_id", raw.get("uniqueId"))) or new_id(),
        )


@dataclass(frozen=True)
class Client:
    id: int
    name: str
    address: str = ""
    attn: str = ""


class PositionCatalog:
    """Ordered, read-only collection of positions keyed by id and name."""

    def __init__(self, positions: Iterable[Position] = ()) -> None:
        self._positions: tuple[Position, ...] = tuple(positions)
        self._by_id = {position.id: position for position in self._positions}
        self._by_name: dict[str, Position] = {}
        for position in self._positions:
            self._by_name.setdefault(position.name, position)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, position_id: object) -> bool:
        return position_id in self._by_id

    def __repr__(self) -> str:
        return f"PositionCatalog({len(self._positions)} positions)"

    def get(self, position_id: str) -> Position | None:
        return self._by_id.get(position_id)

    def find_by_name(self, name: str) -> Position | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [position.name for position in self._positions]

    def sorted_by_name(self) -> "PositionCatalog":
        return PositionCatalog(sorted(self._positions, key=lambda p: (p.name.casefold(), p.name)))


__all__ = ["Client", "Position", "PositionCatalog", "SelectedPosition", "new_id"]
