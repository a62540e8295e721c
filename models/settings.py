"""User settings and the export snapshot schema."""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_EXCHANGE_RATES = {"EUR": 1.1, "GBP": 1.25, "CAD": 0.75, "RWF": 0.001}

SNAPSHOT_VERSION = "1.0"


class Settings(BaseModel):
    """Display settings stored alongside the working set.

    Currency conversion and theming are done by the presentation layer;
    these values are only stored and round-tripped.
    """

    model_config = ConfigDict(populate_by_name=True)

    base_currency: str = Field("USD", alias="baseCurrency")
    exchange_rates: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_EXCHANGE_RATES), alias="exchangeRates"
    )
    theme: Literal["light", "dark"] = "light"


class ExportSnapshot(BaseModel):
    """Interchange format produced by export and accepted by import."""

    model_config = ConfigDict(populate_by_name=True)

    transactions: List[Dict[str, Any]] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    settings: Settings = Field(default_factory=Settings)
    budget_cap: Optional[float] = Field(None, alias="budgetCap")
    export_date: str = Field(alias="exportDate")
    version: str = SNAPSHOT_VERSION
