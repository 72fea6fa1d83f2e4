from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class PriceRecord:
    gasolina_comum: float | None = None
    etanol: float | None = None
    diesel: float | None = None
    gnv: float | None = None


@dataclass(frozen=True)
class LinkCandidate:
    url: str
    start_year: int
    end_year: int


@dataclass
class ExtractionResult:
    prices: PriceRecord
    period_start: datetime
    period_end: datetime
