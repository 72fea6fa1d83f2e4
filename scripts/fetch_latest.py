from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models import FuelPricesResponse
from scrapers.anp_fuel import fetch_fuel_prices
from source_config import config_payload, load_config


def classify_detail(detail: str) -> str:
    text = (detail or "").lower()
    if "timed out" in text or "timeout" in text:
        return "timeout"
    if "403" in text or "forbidden" in text:
        return "blocked"
    if "no municipality excel files" in text:
        return "discovery"
    if "no data found" in text or "no dated rows" in text:
        return "no_data"
    return "other"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch the latest ANP weekly fuel prices for one municipality.")
    parser.add_argument("--json", action="store_true", help="Emit the API payload as JSON.")
    parser.add_argument("--url", help="Spreadsheet URL to use instead of discovering one.")
    parser.add_argument("--locality", help="Municipality name to extract (default from config).")
    parser.add_argument("--discover", action="store_true", help="Force discovery from the ANP page.")
    parser.add_argument("--show-config", action="store_true", help="Print the effective configuration and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline progress to stderr.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    if args.url:
        config = replace(config, excel_url=args.url, discover=False)
    if args.discover:
        config = replace(config, discover=True)
    if args.locality:
        config = replace(config, locality=args.locality.upper())

    if args.show_config:
        print(json.dumps(config_payload(config), indent=2))
        return 0

    started = time.time()
    try:
        payload = fetch_fuel_prices(config)
    except Exception as err:
        elapsed_ms = int((time.time() - started) * 1000)
        if args.json:
            print(json.dumps({"success": False, "error": str(err)}, indent=2))
        else:
            print(f"Failed after {elapsed_ms} ms class={classify_detail(str(err))}: {err}", file=sys.stderr)
        return 1

    elapsed_ms = int((time.time() - started) * 1000)
    validated = FuelPricesResponse.model_validate(payload)
    if args.json:
        print(json.dumps(validated.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
    else:
        prices = validated.data
        print(f"Locality: {config.locality}")
        print(f"Period: {validated.period_start} to {validated.period_end}")
        print(f"Source: {validated.source_url}")
        print(f"Gasolina comum: {prices.gasolina_comum}")
        print(f"Etanol: {prices.etanol}")
        print(f"Diesel: {prices.diesel}")
        print(f"GNV: {prices.gnv}")
        print(f"Elapsed: {elapsed_ms} ms")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
