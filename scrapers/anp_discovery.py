"""ANP weekly municipality spreadsheet discovery.

The historical-series page links one ``semanal-municipio-YYYY-YYYY.xlsx`` file
per two-year window. The newest window is the file we want.
"""
from __future__ import annotations

import logging
import re

from source_config import SHLP_BASE_DIR, SITE_ROOT, SourceConfig

from .common import fetch_url
from .types import LinkCandidate

logger = logging.getLogger(__name__)

HREF_PATTERN = re.compile(r'href="([^"]*semanal-municipio-(\d{4})-(\d{4})\.xlsx)"', re.IGNORECASE)
LOOSE_PATTERN = re.compile(r"semanal-municipio-(\d{4})-(\d{4})\.xlsx", re.IGNORECASE)


class DiscoveryError(Exception):
    pass


def find_link_candidates(html: str, base_dir: str = SHLP_BASE_DIR) -> list[LinkCandidate]:
    candidates = [
        LinkCandidate(url=m.group(1), start_year=int(m.group(2)), end_year=int(m.group(3)))
        for m in HREF_PATTERN.finditer(html)
    ]
    if candidates:
        return candidates

    # Links rendered outside an href (scripts, data attributes): rebuild from the known directory.
    return [
        LinkCandidate(
            url=f"{base_dir}semanal-municipio-{m.group(1)}-{m.group(2)}.xlsx",
            start_year=int(m.group(1)),
            end_year=int(m.group(2)),
        )
        for m in LOOSE_PATTERN.finditer(html)
    ]


def select_latest(candidates: list[LinkCandidate]) -> LinkCandidate:
    if not candidates:
        raise DiscoveryError("No municipality Excel files found on ANP page")
    return max(candidates, key=lambda c: (c.end_year, c.start_year))


def resolve_url(path: str, site_root: str = SITE_ROOT, base_dir: str = SHLP_BASE_DIR) -> str:
    if path.startswith("/"):
        return site_root.rstrip("/") + path
    if not path.startswith("http"):
        return base_dir + path
    return path


def find_latest_excel_url(config: SourceConfig) -> str:
    html = fetch_url(config.page_url, timeout=config.page_timeout, label="ANP page")
    candidates = find_link_candidates(html, base_dir=config.base_dir)
    latest = select_latest(candidates)
    url = resolve_url(latest.url, site_root=config.site_root, base_dir=config.base_dir)
    logger.info(
        "Latest ANP municipality file covers %d-%d: %s (%d candidates)",
        latest.start_year,
        latest.end_year,
        url,
        len(candidates),
    )
    return url
