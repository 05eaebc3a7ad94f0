"""Input records for the costing engine."""

from .params import DEFAULT_WORKING_DAYS, ParameterSet
from .positions import Client, Position, PositionCatalog, SelectedPosition, new_id
from .projects import SavedProject
from .values import (
    cell_text,
    coerce_float_or_none,
    is_blank,
    safe_float,
    to_flag,
    to_float,
    to_int,
)

__all__ = [
    "Client",
    "DEFAULT_WORKING_DAYS",
    "ParameterSet",
    "Position",
    "PositionCatalog",
    "SavedProject",
    "SelectedPosition",
    "cell_text",
    "coerce_float_or_none",
    "is_blank",
    "new_id",
    "safe_float",
    "to_flag",
    "to_float",
    "to_int",
]
