from .anp_discovery import DiscoveryError, find_latest_excel_url, find_link_candidates, resolve_url, select_latest
from .anp_fuel import fetch_fuel_prices, resolve_source_url
from .anp_workbook import NoDataError, extract_prices, read_rows
from .common import FetchError, FetchTimeoutError, fetch_bytes, fetch_url, utc_now_iso
from .types import ExtractionResult, LinkCandidate, PriceRecord

__all__ = [
    "DiscoveryError",
    "ExtractionResult",
    "FetchError",
    "FetchTimeoutError",
    "LinkCandidate",
    "NoDataError",
    "PriceRecord",
    "extract_prices",
    "fetch_bytes",
    "fetch_fuel_prices",
    "fetch_url",
    "find_latest_excel_url",
    "find_link_candidates",
    "read_rows",
    "resolve_source_url",
    "resolve_url",
    "select_latest",
    "utc_now_iso",
]
