"""Command line interface for building quotations from workbooks.

Sub-commands:

* ``quote`` ingests a workbook, prices the selected positions and prints the
  matrix (or JSON), optionally writing the P&L report workbook.
* ``template`` writes a blank master-data workbook.
* ``master-data`` normalises any recognised workbook into the master-data
  layout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence, TextIO

from manpower_quoter.config import (
    AppEnvironment,
    ConfigError,
    configure_logging,
    default_currency,
    get_logger,
    load_default_params,
)
from manpower_quoter.domain_models.positions import PositionCatalog, SelectedPosition
from manpower_quoter.export import (
    blank_template_workbook,
    column_widths,
    master_data_workbook,
    quotation_report_workbook,
)
from manpower_quoter.formatting import Currency, format_money, format_number
from manpower_quoter.ingest.workbook import ingest_workbook
from manpower_quoter.io.excel import read_workbook, write_workbook
from manpower_quoter.pricing.report import CalculationResult, MatrixRow, calculate_quotation

logger = get_logger("cli")


def _selection_arg(raw: str) -> tuple[str, int]:
    name, sep, qty_text = raw.rpartition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=QTY, got {raw!r}")
    try:
        qty = int(qty_text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"quantity must be an integer in {raw!r}") from None
    if qty <= 0:
        raise argparse.ArgumentTypeError(f"quantity must be positive in {raw!r}")
    return name.strip(), qty


def _currency_arg(raw: str) -> Currency:
    try:
        return Currency.parse(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m manpower_quoter",
        description="Manpower contract costing and quotation tools.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging (also set by MANPOWER_QUOTER_DEBUG).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    quote_parser = subparsers.add_parser(
        "quote", help="Price positions from a master-data or pre-filled workbook.",
    )
    quote_parser.add_argument("workbook", type=Path, help="Path to the .xlsx workbook.")
    quote_parser.add_argument(
        "--select",
        dest="selections",
        action="append",
        type=_selection_arg,
        default=[],
        metavar="NAME=QTY",
        help="Quote NAME at QTY headcount (repeatable). Defaults to the workbook's Qty column.",
    )
    quote_parser.add_argument("--margin", type=float, help="Override the target margin %%.")
    quote_parser.add_argument("--duration", type=float, help="Override the contract months.")
    quote_parser.add_argument(
        "--currency",
        type=_currency_arg,
        default=None,
        help="Display currency: USD, QAR or EUR (default from settings).",
    )
    quote_parser.add_argument("--ref", default="QUOTE", help="Quotation reference.")
    quote_parser.add_argument("--client", default="", help="Client name for the report.")
    quote_parser.add_argument(
        "--json", action="store_true", help="Print the full result as JSON.",
    )
    quote_parser.add_argument(
        "--output", type=Path, help="Write the P&L report workbook to this path.",
    )
    quote_parser.set_defaults(handler=handle_quote)

    template_parser = subparsers.add_parser(
        "template", help="Write a blank master-data template workbook.",
    )
    template_parser.add_argument("output", type=Path)
    template_parser.set_defaults(handler=handle_template)

    master_parser = subparsers.add_parser(
        "master-data", help="Normalise a workbook into the master-data layout.",
    )
    master_parser.add_argument("workbook", type=Path)
    master_parser.add_argument("output", type=Path)
    master_parser.set_defaults(handler=handle_master_data)

    return parser


def resolve_selections(
    catalog: PositionCatalog, requested: Sequence[tuple[str, int]]
) -> list[SelectedPosition]:
    """Look up ``NAME=QTY`` requests; unknown names raise ``KeyError``."""

    resolved: list[SelectedPosition] = []
    for name, qty in requested:
        position = catalog.find_by_name(name)
        if position is None:
            raise KeyError(name)
        resolved.append(SelectedPosition.from_position(position, qty))
    return resolved


def _cell_text(row: MatrixRow, value: object, currency: Currency) -> str:
    if isinstance(value, str):
        return value
    if row.kind == "money":
        return format_money(value, currency)
    return format_number(value)


def render_matrix(
    result: CalculationResult,
    selections: Sequence[SelectedPosition],
    currency: Currency,
) -> list[str]:
    """Return the matrix as aligned text lines, one per row."""

    header = ["", *(selection.name for selection in selections), "TOTAL"]
    table = [header]
    for row in result.rows:
        cells = [_cell_text(row, value, currency) for value in row.values]
        total = "" if row.total is None else _cell_text(row, row.total, currency)
        table.append([row.label, *cells, total])

    widths = [max(len(line[index]) for line in table) for index in range(len(header))]
    lines = []
    for line in table:
        first = line[0].ljust(widths[0])
        rest = [cell.rjust(width) for cell, width in zip(line[1:], widths[1:])]
        lines.append("  ".join([first, *rest]).rstrip())
    lines.append("")
    lines.append(f"Margin: {result.margin_percent:.2f}%")
    return lines


def handle_quote(args: argparse.Namespace, out: TextIO) -> int:
    ingested = ingest_workbook(read_workbook(args.workbook))
    params = ingested.parameter_set(load_default_params())
    overrides = {"margin": args.margin, "duration": args.duration}
    params = params.with_overrides(
        {key: value for key, value in overrides.items() if value is not None}
    )

    if args.selections:
        try:
            selections = resolve_selections(ingested.positions, args.selections)
        except KeyError as exc:
            print(f"error: unknown position {exc.args[0]!r}", file=sys.stderr)
            return 2
    else:
        selections = ingested.selections()
    if not selections:
        logger.warning("No positions selected; the quotation is empty")

    result = calculate_quotation(params, selections)
    currency = args.currency or Currency.parse(default_currency(), Currency.USD)

    if args.json:
        json.dump(result.to_dict(), out, indent=2)
        out.write("\n")
    else:
        out.write("\n".join(render_matrix(result, selections, currency)) + "\n")

    if args.output is not None:
        sheets = quotation_report_workbook(result, args.ref, args.client, params.duration)
        widths = {
            name: column_widths(name, max((len(row) for row in rows), default=0))
            for name, rows in sheets.items()
        }
        write_workbook(args.output, sheets, column_widths=widths)
    return 0


def handle_template(args: argparse.Namespace, out: TextIO) -> int:
    path = write_workbook(args.output, blank_template_workbook())
    out.write(f"{path}\n")
    return 0


def handle_master_data(args: argparse.Namespace, out: TextIO) -> int:
    ingested = ingest_workbook(read_workbook(args.workbook))
    sheets = master_data_workbook(
        ingested.positions,
        ingested.clients,
        ingested.parameter_set(load_default_params()),
    )
    path = write_workbook(args.output, sheets)
    out.write(f"{path}\n")
    return 0


def main(argv: Iterable[str] | None = None, *, out: TextIO | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    env = AppEnvironment.from_env()
    configure_logging(logging.DEBUG if args.verbose else env.log_level)

    handler = args.handler
    try:
        return handler(args, out or sys.stdout)
    except (OSError, ConfigError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - exercised via module execution
    raise SystemExit(main())
