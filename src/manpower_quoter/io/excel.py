"""Reading and writing ``.xlsx`` workbooks as sheet grids."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from manpower_quoter.config import get_logger
from manpower_quoter.ingest.workbook import sheet_grid

logger = get_logger("io")


def read_workbook(path: str | Path) -> dict[str, list[list[Any]]]:
    """Return every sheet of ``path`` as a grid; empty cells become ``None``."""

    source = Path(path)
    frames = pd.read_excel(source, sheet_name=None, header=None, engine="openpyxl")
    sheets = {
        str(name): sheet_grid(frame.astype(object).values.tolist())
        for name, frame in frames.items()
    }
    logger.debug("Read %d sheets from %s", len(sheets), source)
    return sheets


def write_workbook(
    path: str | Path,
    sheets: Mapping[str, Sequence[Sequence[Any]]],
    *,
    column_widths: Mapping[str, Sequence[int]] | None = None,
) -> Path:
    """Write grids to ``path``, one worksheet per entry, without index or header."""

    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(destination, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            width = max((len(row) for row in rows), default=0)
            frame = pd.DataFrame([[*row, *([None] * (width - len(row)))] for row in rows])
            frame.to_excel(writer, sheet_name=name, header=False, index=False)
            widths = (column_widths or {}).get(name)
            if widths:
                worksheet = writer.sheets[name]
                for index, width in enumerate(widths, start=1):
                    worksheet.column_dimensions[get_column_letter(index)].width = width
    logger.info("Wrote %d sheets to %s", len(sheets), destination)
    return destination


__all__ = ["read_workbook", "write_workbook"]
