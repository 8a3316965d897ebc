"""
CNVTBOT Data Models

🔒 One RateSnapshot per calendar date; a snapshot is never mutated after it
is built. Rates are held as decimal.Decimal, converted through str.
"""

import re
from datetime import date as date_type
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, Field, field_validator

CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


def normalize_code(code: Any) -> str:
    """Upper-case a currency code and check it is three letters."""
    if not isinstance(code, str):
        raise ValueError(f"Currency code must be a string, got {code!r}")
    normalized = code.strip().upper()
    if not CURRENCY_CODE.match(normalized):
        raise ValueError(f"Invalid currency code: {code!r}")
    return normalized


class RateSnapshot(BaseModel):
    """
    One day's exchange rates plus the currency codes valid for that day.

    rates[code] is the number of `code` units bought by 1 unit of `base`.

    frozen=True only blocks reassigning fields; `symbols` and `rates` are
    plain dicts (model_dump needs them to be). They are built fresh by the
    validators, so the provider payload is never aliased, and nothing in
    the package writes to them after construction.
    """
    date: str = Field(description="Calendar date, YYYY-MM-DD")
    symbols: dict[str, bool] = Field(description="Convertible currency codes")
    base: str
    rates: dict[str, Decimal]

    model_config = {"frozen": True}

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v: Any) -> str:
        if isinstance(v, date_type):
            return v.isoformat()
        if not isinstance(v, str):
            raise ValueError(f"Snapshot date must be a string, got {v!r}")
        return date_type.fromisoformat(v).isoformat()

    @field_validator("base", mode="before")
    @classmethod
    def validate_base(cls, v: Any) -> str:
        return normalize_code(v)

    @field_validator("symbols", mode="before")
    @classmethod
    def validate_symbols(cls, v: Any) -> dict[str, bool]:
        """Providers send code -> name; only the truthiness of the marker matters."""
        if not isinstance(v, dict):
            raise ValueError("symbols must be a mapping of currency codes")
        return {normalize_code(code): True for code, marker in v.items() if marker}

    @field_validator("rates", mode="before")
    @classmethod
    def validate_rates(cls, v: Any) -> dict[str, Decimal]:
        if not isinstance(v, dict):
            raise ValueError("rates must be a mapping of currency codes")
        rates: dict[str, Decimal] = {}
        for code, value in v.items():
            if isinstance(value, bool) or value is None:
                raise ValueError(f"Invalid rate for {code}: {value!r}")
            try:
                rate = value if isinstance(value, Decimal) else Decimal(str(value))
            except InvalidOperation as e:
                raise ValueError(f"Invalid rate for {code}: {value!r}") from e
            if not rate.is_finite() or rate <= 0:
                raise ValueError(f"Rate for {code} must be positive, got {value!r}")
            rates[normalize_code(code)] = rate
        return rates

    def supports(self, code: str) -> bool:
        return bool(code) and self.symbols.get(code, False)

    def rate_for(self, code: str) -> Decimal | None:
        """Rate of `code` against the base; the base itself is 1 when omitted."""
        rate = self.rates.get(code)
        if rate is None and code == self.base:
            return Decimal("1")
        return rate


class Command(BaseModel):
    """A bot command with its whitespace-separated arguments, in order."""
    name: str
    args: tuple[str, ...] = ()

    model_config = {"frozen": True}
