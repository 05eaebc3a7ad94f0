"""Spreadsheet ingestion into parameters, positions and clients."""

from .workbook import (
    CLIENTS_SHEET,
    PARAMETER_RULES,
    PARAMETERS_SHEET,
    HeaderSchema,
    IngestResult,
    ParameterRule,
    PreSelection,
    apply_parameter_rules,
    find_header_schema,
    ingest_workbook,
    materialize_selections,
    matching_rules,
    read_clients,
    read_parameters,
    read_positions,
    sheet_grid,
)

__all__ = [
    "CLIENTS_SHEET",
    "HeaderSchema",
    "IngestResult",
    "PARAMETERS_SHEET",
    "PARAMETER_RULES",
    "ParameterRule",
    "PreSelection",
    "apply_parameter_rules",
    "find_header_schema",
    "ingest_workbook",
    "materialize_selections",
    "matching_rules",
    "read_clients",
    "read_parameters",
    "read_positions",
    "sheet_grid",
]
