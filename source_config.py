from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

SITE_ROOT = "https://www.gov.br"
ANP_PAGE_URL = (
    "https://www.gov.br/anp/pt-br/assuntos/precos-e-defesa-da-concorrencia/precos/"
    "precos-revenda-e-de-distribuicao-combustiveis/serie-historica-do-levantamento-de-precos"
)
SHLP_BASE_DIR = (
    "https://www.gov.br/anp/pt-br/assuntos/precos-e-defesa-da-concorrencia/precos/"
    "precos-revenda-e-de-distribuicao-combustiveis/shlp/semanal/"
)
EXCEL_URL = SHLP_BASE_DIR + "semanal-municipio-2024-2025.xlsx"

# Title and legend rows above the header in the ANP weekly sheet.
HEADER_ROW = 11
TARGET_LOCALITY = "GUARULHOS"

PAGE_TIMEOUT_SECONDS = 25
EXCEL_TIMEOUT_SECONDS = 30

CACHE_REFRESH_HOUR = 7
CACHE_MIN_SECONDS = 60
CACHE_MAX_SECONDS = 86400
STALE_WHILE_REVALIDATE_SECONDS = 300

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class SourceConfig:
    excel_url: str = EXCEL_URL
    page_url: str = ANP_PAGE_URL
    site_root: str = SITE_ROOT
    base_dir: str = SHLP_BASE_DIR
    discover: bool = True
    header_row: int = HEADER_ROW
    locality: str = TARGET_LOCALITY
    page_timeout: float = PAGE_TIMEOUT_SECONDS
    excel_timeout: float = EXCEL_TIMEOUT_SECONDS
    refresh_hour: int = CACHE_REFRESH_HOUR
    cache_min_seconds: int = CACHE_MIN_SECONDS
    cache_max_seconds: int | None = CACHE_MAX_SECONDS
    stale_while_revalidate: int = STALE_WHILE_REVALIDATE_SECONDS
    timezone: str | None = None


def load_config(environ: Mapping[str, str] | None = None) -> SourceConfig:
    env = os.environ if environ is None else environ
    config = SourceConfig()
    overrides: dict = {}

    locality = env.get("FUEL_PRICES_LOCALITY", "").strip()
    if locality:
        overrides["locality"] = locality.upper()

    excel_url = env.get("FUEL_PRICES_EXCEL_URL", "").strip()
    if excel_url:
        # An explicit file pins the source; discovery would ignore it.
        overrides["excel_url"] = excel_url
        overrides["discover"] = False

    discover = env.get("FUEL_PRICES_DISCOVER")
    if discover is not None and discover.strip():
        overrides["discover"] = discover.strip().lower() in _TRUTHY

    for key, field in (
        ("FUEL_PRICES_PAGE_TIMEOUT", "page_timeout"),
        ("FUEL_PRICES_EXCEL_TIMEOUT", "excel_timeout"),
    ):
        raw = env.get(key)
        if raw is None or not raw.strip():
            continue
        try:
            value = float(raw)
        except ValueError as exc:
            raise ConfigError(f"{key} must be a number of seconds, got {raw!r}") from exc
        if value <= 0:
            raise ConfigError(f"{key} must be positive, got {raw!r}")
        overrides[field] = value

    tz_name = env.get("FUEL_PRICES_TIMEZONE", "").strip()
    if tz_name:
        try:
            ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"FUEL_PRICES_TIMEZONE is not a known time zone: {tz_name!r}") from exc
        overrides["timezone"] = tz_name

    return replace(config, **overrides) if overrides else config


def config_payload(config: SourceConfig | None = None) -> dict:
    return asdict(config or SourceConfig())
