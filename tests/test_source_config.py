from __future__ import annotations

import unittest

from source_config import EXCEL_URL, HEADER_ROW, ConfigError, SourceConfig, config_payload, load_config


class SourceConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = load_config({})
        self.assertEqual(SourceConfig(), config)
        self.assertEqual(11, HEADER_ROW)
        self.assertEqual("GUARULHOS", config.locality)
        self.assertTrue(config.discover)

    def test_env_overrides(self) -> None:
        config = load_config(
            {
                "FUEL_PRICES_LOCALITY": "campinas",
                "FUEL_PRICES_EXCEL_URL": "https://example.com/semanal-municipio-2025-2026.xlsx",
                "FUEL_PRICES_EXCEL_TIMEOUT": "55",
                "FUEL_PRICES_TIMEZONE": "America/Sao_Paulo",
            }
        )
        self.assertEqual("CAMPINAS", config.locality)
        self.assertEqual("https://example.com/semanal-municipio-2025-2026.xlsx", config.excel_url)
        self.assertFalse(config.discover)
        self.assertEqual(55.0, config.excel_timeout)
        self.assertEqual("America/Sao_Paulo", config.timezone)

    def test_discover_flag(self) -> None:
        self.assertFalse(load_config({"FUEL_PRICES_DISCOVER": "false"}).discover)
        self.assertTrue(load_config({"FUEL_PRICES_DISCOVER": "1"}).discover)

    def test_invalid_timeout_rejected(self) -> None:
        with self.assertRaises(ValueError):
            load_config({"FUEL_PRICES_PAGE_TIMEOUT": "soon"})
        with self.assertRaises(ValueError):
            load_config({"FUEL_PRICES_PAGE_TIMEOUT": "0"})

    def test_unknown_timezone_rejected(self) -> None:
        with self.assertRaises(ConfigError) as ctx:
            load_config({"FUEL_PRICES_TIMEZONE": "Mars/Olympus"})
        self.assertIn("Mars/Olympus", str(ctx.exception))

    def test_config_payload_is_plain_dict(self) -> None:
        payload = config_payload()
        self.assertEqual(EXCEL_URL, payload["excel_url"])
        self.assertEqual(11, payload["header_row"])


if __name__ == "__main__":
    unittest.main()
