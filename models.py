from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FuelPrices(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    gasolina_comum: float | None = Field(None, alias="gasolinaComum", description="Gasolina comum, R$/l")
    etanol: float | None = Field(None, description="Etanol hidratado, R$/l")
    diesel: float | None = Field(None, description="Óleo diesel (excluding S10), R$/l")
    gnv: float | None = Field(None, description="Gás natural veicular, R$/m³")


class FuelPricesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    data: FuelPrices
    period_start: str = Field(..., alias="periodStart")
    period_end: str = Field(..., alias="periodEnd")
    source_url: str | None = Field(None, alias="sourceUrl")
    updated_at: str = Field(..., alias="updatedAt")


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
