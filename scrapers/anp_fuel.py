"""ANP weekly fuel prices for one municipality.

Fetches the ANP "Levantamento de Preços de Combustíveis" weekly municipality
workbook, keeps the configured locality and reports the most recent week's
average resale prices.
"""
from __future__ import annotations

import logging
from dataclasses import asdict

from source_config import SourceConfig

from .anp_discovery import find_latest_excel_url
from .anp_workbook import extract_prices, read_rows
from .common import fetch_bytes, utc_now_iso

logger = logging.getLogger(__name__)


def resolve_source_url(config: SourceConfig) -> str:
    if config.discover:
        return find_latest_excel_url(config)
    return config.excel_url


def fetch_fuel_prices(config: SourceConfig) -> dict:
    excel_url = resolve_source_url(config)
    logger.info("Fetching ANP workbook %s", excel_url)
    data = fetch_bytes(excel_url, timeout=config.excel_timeout, label="Excel")

    rows = read_rows(data, config.header_row)
    result = extract_prices(rows, config.locality)

    return {
        "success": True,
        "data": asdict(result.prices),
        "period_start": result.period_start.date().isoformat(),
        "period_end": result.period_end.date().isoformat(),
        "source_url": excel_url,
        "updated_at": utc_now_iso(),
    }
