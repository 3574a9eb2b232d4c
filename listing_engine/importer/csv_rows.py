"""Bulk import normalization.

Turns spreadsheet rows into listing rows. Columns are matched by header
synonyms (English and Turkish), numeric columns are read from their
leading number (zero when there is none), and rows without a title are
kept for display but flagged and excluded from the importable set.
"""

import csv
import io
import math
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace

import structlog

logger = structlog.get_logger()

# Field name -> accepted header names (lowercase)
DEFAULT_COLUMN_SYNONYMS: dict[str, tuple[str, ...]] = {
    "title": ("title", "başlık", "ürün adı", "name"),
    "description": ("description", "açıklama", "desc"),
    "price": ("price", "fiyat", "satiş fiyatı", "satış fiyatı"),
    "stock": ("stock", "stok", "quantity", "miktar"),
    "sku": ("sku", "stok kodu", "barkod"),
    "category": ("category", "kategori"),
    "brand": ("brand", "marka"),
    "image_url_1": ("image_url_1", "image1", "görsel1", "resim1"),
    "image_url_2": ("image_url_2", "image2", "görsel2", "resim2"),
    "image_url_3": ("image_url_3", "image3", "görsel3", "resim3"),
}

IMAGE_FIELDS: tuple[str, ...] = ("image_url_1", "image_url_2", "image_url_3")

TEMPLATE_COLUMNS: tuple[str, ...] = (
    "title", "description", "price", "stock", "sku", "category", "brand", *IMAGE_FIELDS,
)

MISSING_TITLE_ERROR = "Title is required"

# Cells are read up to the first non-numeric character ("12 TL" -> 12)
_LEADING_FLOAT = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"\s*[+-]?\d+")


@dataclass(frozen=True)
class ImportRow:
    """One normalized row of an import file.

    Attributes:
        row_id: Stable row id (``import-<index>``).
        title: Listing title.
        description: Listing description.
        price: Price, 0 when missing or not numeric.
        stock: Stock, 0 when missing or not numeric.
        sku: Stock keeping unit.
        category: Category text as written in the file.
        brand: Brand name.
        images: Image URLs, blanks dropped.
        selected: Whether the user keeps the row for import.
        error: Why the row cannot be imported.
    """

    row_id: str
    title: str = ""
    description: str = ""
    price: float = 0.0
    stock: int = 0
    sku: str = ""
    category: str = ""
    brand: str = ""
    images: tuple[str, ...] = ()
    selected: bool = True
    error: str | None = None

    @property
    def has_error(self) -> bool:
        """Check if the row is flagged."""
        return self.error is not None


@dataclass(frozen=True)
class ImportBatch:
    """All rows parsed from one file."""

    rows: tuple[ImportRow, ...] = ()

    @property
    def importable(self) -> list[ImportRow]:
        """Rows that are selected and error-free."""
        return [r for r in self.rows if r.selected and not r.has_error]

    @property
    def importable_count(self) -> int:
        """Number of importable rows."""
        return len(self.importable)

    @property
    def error_count(self) -> int:
        """Number of flagged rows."""
        return sum(1 for r in self.rows if r.has_error)

    def toggle(self, row_id: str) -> "ImportBatch":
        """Flip the selection of one row."""
        return replace(
            self,
            rows=tuple(
                replace(r, selected=not r.selected) if r.row_id == row_id else r
                for r in self.rows
            ),
        )

    def select_all(self, selected: bool = True) -> "ImportBatch":
        """Select or deselect every row."""
        return replace(self, rows=tuple(replace(r, selected=selected) for r in self.rows))


# ============================================================================
# Parsing
# ============================================================================


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line, respecting double-quoted fields.

    Args:
        line: Raw line.

    Returns:
        Trimmed field values.
    """
    if not line.strip():
        return []
    fields = next(csv.reader([line], skipinitialspace=True))
    return [f.strip() for f in fields]


def resolve_columns(
    header_row: Sequence[str],
    column_synonyms: Mapping[str, Iterable[str]] = DEFAULT_COLUMN_SYNONYMS,
) -> dict[str, int | None]:
    """Map each field to the first header that is one of its synonyms.

    Args:
        header_row: Header cells.
        column_synonyms: Accepted header names per field.

    Returns:
        Column index per field (None when no header matches).
    """
    headers = [h.strip().lower() for h in header_row]
    columns: dict[str, int | None] = {}
    for field_name, synonyms in column_synonyms.items():
        names = {s.strip().lower() for s in synonyms}
        columns[field_name] = next((i for i, h in enumerate(headers) if h in names), None)
    return columns


def parse_rows(
    header_row: Sequence[str],
    data_rows: Iterable[Sequence[str]],
    column_synonyms: Mapping[str, Iterable[str]] = DEFAULT_COLUMN_SYNONYMS,
) -> list[ImportRow]:
    """Normalize data rows using header synonyms.

    Args:
        header_row: Header cells.
        data_rows: Data cells per row.
        column_synonyms: Accepted header names per field.

    Returns:
        One ImportRow per data row, flagged rows included.
    """
    columns = resolve_columns(header_row, column_synonyms)

    def cell(values: Sequence[str], field_name: str) -> str:
        index = columns.get(field_name)
        if index is None or index >= len(values):
            return ""
        return (values[index] or "").strip()

    rows: list[ImportRow] = []
    for index, values in enumerate(data_rows):
        title = cell(values, "title")
        rows.append(
            ImportRow(
                row_id=f"import-{index}",
                title=title,
                description=cell(values, "description"),
                price=_to_number(cell(values, "price")),
                stock=_to_int(cell(values, "stock")),
                sku=cell(values, "sku"),
                category=cell(values, "category"),
                brand=cell(values, "brand"),
                images=tuple(url for f in IMAGE_FIELDS if (url := cell(values, f))),
                error=None if title else MISSING_TITLE_ERROR,
            )
        )
    return rows


def parse_csv_text(
    text: str,
    column_synonyms: Mapping[str, Iterable[str]] = DEFAULT_COLUMN_SYNONYMS,
) -> ImportBatch:
    """Parse a whole CSV document.

    Blank lines are skipped. The first remaining line is the header.

    Args:
        text: File contents.
        column_synonyms: Accepted header names per field.

    Returns:
        ImportBatch (empty when there are no data rows).
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")), skipinitialspace=True)
    lines = [row for row in reader if any(cell.strip() for cell in row)]
    if len(lines) < 2:
        return ImportBatch()

    batch = ImportBatch(rows=tuple(parse_rows(lines[0], lines[1:], column_synonyms)))
    logger.info(
        "Parsed import file",
        rows=len(batch.rows),
        importable=batch.importable_count,
        errors=batch.error_count,
    )
    return batch


def template_csv() -> str:
    """Header plus one example row for users to fill in."""
    example = (
        "Örnek Ürün Başlığı", "Ürün açıklaması burada", "99.99", "100", "SKU-001",
        "Elektronik", "Marka Adı", "https://example.com/image1.jpg",
        "https://example.com/image2.jpg", "",
    )
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(TEMPLATE_COLUMNS)
    writer.writerow(example)
    return buffer.getvalue()


def _to_number(value: str) -> float:
    match = _LEADING_FLOAT.match(value)
    if match is None:
        return 0.0
    number = float(match.group())
    return number if math.isfinite(number) else 0.0


def _to_int(value: str) -> int:
    match = _LEADING_INT.match(value)
    return int(match.group()) if match else 0
