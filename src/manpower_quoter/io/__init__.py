"""Workbook file input and output."""

from .excel import read_workbook, write_workbook

__all__ = ["read_workbook", "write_workbook"]
