"""Saved quotation projects."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from manpower_quoter.config import load_default_params

from .params import ParameterSet
from .positions import SelectedPosition, new_id
from .values import cell_text, to_int


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class SavedProject:
    """Named snapshot of a quotation: parameters plus the selected roster.

    Storage is left to the caller; :meth:`to_dict` produces JSON-ready data and
    :meth:`from_dict` reverses it.
    """

    id: str
    name: str
    last_modified: int
    client: str = ""
    ref: str = ""
    params: ParameterSet = field(default_factory=load_default_params)
    positions: tuple[SelectedPosition, ...] = ()

    @classmethod
    def create(
        cls,
        name: str,
        *,
        client: str = "",
        ref: str = "",
        params: ParameterSet | None = None,
        positions: Sequence[SelectedPosition] = (),
    ) -> "SavedProject":
        """Stamp a new project with a generated id and the current time."""

        return cls(
            id=new_id(),
            name=name,
            last_modified=_now_ms(),
            client=client,
            ref=ref,
            params=load_default_params() if params is None else params,
            positions=tuple(positions),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "last_modified": self.last_modified,
            "client": self.client,
            "ref": self.ref,
            "params": self.params.to_dict(),
            "positions": [selection.to_dict() for selection in self.positions],
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "SavedProject":
        if raw is None:
            raise ValueError("Cannot restore a project from None")
        params_raw = raw.get("params")
        positions_raw = raw.get("positions") or []
        return cls(
            id=cell_text(raw.get("id")) or new_id(),
            name=cell_text(raw.get("name")),
            last_modified=to_int(raw.get("last_modified", raw.get("lastModified"))) or 0,
            client=cell_text(raw.get("client")),
            ref=cell_text(raw.get("ref")),
            params=load_default_params().with_overrides(
                params_raw if isinstance(params_raw, Mapping) else {}
            ),
            positions=tuple(
                SelectedPosition.from_dict(item)
                for item in positions_raw
                if isinstance(item, Mapping)
            ),
        )


__all__ = ["SavedProject"]
