"""Readers that turn exported files into :class:`~statement_ingest.models.RawTable`."""

from .csv_table import load_raw_table, read_raw_table

__all__ = ["load_raw_table", "read_raw_table"]
