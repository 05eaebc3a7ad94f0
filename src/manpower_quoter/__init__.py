"""Costing and quotation engine for manpower services contracts."""

from __future__ import annotations

from manpower_quoter.domain_models import (
    Client,
    ParameterSet,
    Position,
    PositionCatalog,
    SavedProject,
    SelectedPosition,
)
from manpower_quoter.ingest import IngestResult, ingest_workbook, materialize_selections
from manpower_quoter.pricing import CalculationResult, calculate_quotation

__version__ = "0.1.0"

__all__ = [
    "CalculationResult",
    "Client",
    "IngestResult",
    "ParameterSet",
    "Position",
    "PositionCatalog",
    "SavedProject",
    "SelectedPosition",
    "__version__",
    "calculate_quotation",
    "ingest_workbook",
    "materialize_selections",
]
