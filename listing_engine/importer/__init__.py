"""Bulk import of listings from spreadsheet files."""

from listing_engine.importer.csv_rows import (
    DEFAULT_COLUMN_SYNONYMS,
    TEMPLATE_COLUMNS,
    ImportBatch,
    ImportRow,
    parse_csv_text,
    parse_rows,
    resolve_columns,
    split_csv_line,
    template_csv,
)

__all__ = [
    "DEFAULT_COLUMN_SYNONYMS",
    "TEMPLATE_COLUMNS",
    "ImportBatch",
    "ImportRow",
    "parse_csv_text",
    "parse_rows",
    "resolve_columns",
    "split_csv_line",
    "template_csv",
]
