"""Reading the ANP weekly municipality workbook and extracting one locality's prices."""
from __future__ import annotations

import io
import logging
import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable

from openpyxl import load_workbook

from .types import ExtractionResult, PriceRecord

logger = logging.getLogger(__name__)

LOCALITY_COLUMNS = ("MUNICÍPIO", "MUNICIPIO")
PRODUCT_COLUMN = "PRODUTO"
PRICE_COLUMN = "PREÇO MÉDIO REVENDA"
PERIOD_START_COLUMN = "DATA INICIAL"
PERIOD_END_COLUMN = "DATA FINAL"

# Days between the spreadsheet epoch (1899-12-30) and 1970-01-01.
EXCEL_UNIX_EPOCH_OFFSET_DAYS = 25569
UNIX_EPOCH = datetime(1970, 1, 1)
DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class NoDataError(Exception):
    pass


def read_rows(data: bytes, header_row: int) -> list[dict[str, Any]]:
    """Parse the first sheet of an .xlsx payload into row dicts.

    ``header_row`` is the 0-based index of the header line; everything above
    it (title, legend) is skipped. Missing cells come back as ``None`` and
    rows with no values at all are dropped.
    """
    try:
        wb = load_workbook(io.BytesIO(data), data_only=True)
    except Exception as exc:
        raise ValueError(f"Cannot read Excel workbook: {exc}") from exc

    try:
        ws = wb.worksheets[0]
        lines = ws.iter_rows(min_row=header_row + 1, values_only=True)
        header_cells = next(lines, None)
        if header_cells is None:
            return []

        headers = [
            str(h).strip() if h is not None else f"col_{idx}"
            for idx, h in enumerate(header_cells, start=1)
        ]

        rows: list[dict[str, Any]] = []
        for values in lines:
            if all(v in (None, "") for v in values):
                continue
            row = {header: None for header in headers}
            for header, value in zip(headers, values):
                row[header] = value
            rows.append(row)
        return rows
    finally:
        wb.close()


def to_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return None
        days = math.floor(value - EXCEL_UNIX_EPOCH_OFFSET_DAYS)
        return UNIX_EPOCH + timedelta(days=days)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return to_datetime(datetime.fromisoformat(text))
        except ValueError:
            pass
        try:
            return datetime.strptime(text, "%d/%m/%Y")
        except ValueError:
            return None
    return None


def parse_price(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not DECIMAL_PATTERN.fullmatch(text):
            return None
        number = float(text)
    else:
        return None
    return number if math.isfinite(number) else None


def classify_product(product: str) -> str | None:
    name = product.upper()
    if "GASOLINA COMUM" in name:
        return "gasolina_comum"
    if "ETANOL" in name:
        return "etanol"
    if "DIESEL" in name and "S10" not in name:
        return "diesel"
    if "GNV" in name:
        return "gnv"
    return None


def _locality_of(row: dict[str, Any]) -> Any:
    for column in LOCALITY_COLUMNS:
        value = row.get(column)
        if value:
            return value
    return None


def filter_locality(rows: Iterable[dict[str, Any]], locality: str) -> list[dict[str, Any]]:
    target = locality.upper()
    out: list[dict[str, Any]] = []
    for row in rows:
        value = _locality_of(row)
        if value is not None and str(value).upper() == target:
            out.append(row)
    return out


def extract_prices(rows: list[dict[str, Any]], locality: str) -> ExtractionResult:
    local_rows = filter_locality(rows, locality)
    if not local_rows:
        raise NoDataError(f"No data found for {locality.upper()}")

    dated: list[tuple[datetime, dict[str, Any]]] = []
    for row in local_rows:
        period_end = to_datetime(row.get(PERIOD_END_COLUMN))
        if period_end is not None:
            dated.append((period_end, row))
    if not dated:
        raise NoDataError(f"No dated rows found for {locality.upper()}")

    latest_end = max(end for end, _ in dated)
    latest_rows = [row for end, row in dated if end == latest_end]

    starts = [
        start
        for start in (to_datetime(row.get(PERIOD_START_COLUMN)) for row in latest_rows)
        if start is not None
    ]
    latest_start = min(starts) if starts else latest_end

    prices = PriceRecord()
    seen: dict[str, str] = {}
    for row in latest_rows:
        product = str(row.get(PRODUCT_COLUMN) or "")
        category = classify_product(product)
        if category is None:
            continue
        if category in seen:
            logger.warning(
                "Duplicate %s rows for %s on %s: %r overrides %r",
                category,
                locality.upper(),
                latest_end.date().isoformat(),
                product,
                seen[category],
            )
        seen[category] = product
        setattr(prices, category, parse_price(row.get(PRICE_COLUMN)))

    return ExtractionResult(prices=prices, period_start=latest_start, period_end=latest_end)
