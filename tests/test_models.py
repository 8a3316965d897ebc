"""
RateSnapshot ingest validation.
"""

import pytest
from decimal import Decimal

from pydantic import ValidationError

from cnvtbot.models import Command, RateSnapshot, normalize_code


class TestRateSnapshot:

    def test_rates_become_exact_decimals(self):
        snapshot = RateSnapshot(date="2023-01-01", symbols={"USD": True}, base="EUR", rates={"USD": 1.1})
        assert snapshot.rates["USD"] == Decimal("1.1")
        assert isinstance(snapshot.rates["USD"], Decimal)

    def test_symbol_names_become_markers(self):
        snapshot = RateSnapshot(
            date="2023-01-01",
            symbols={"usd": "United States Dollar", "EUR": "Euro", "XXX": ""},
            base="eur",
            rates={}
        )
        assert snapshot.symbols == {"USD": True, "EUR": True}
        assert snapshot.base == "EUR"

    def test_date_objects_are_accepted(self):
        from datetime import date
        snapshot = RateSnapshot(date=date(2023, 1, 1), symbols={}, base="EUR", rates={})
        assert snapshot.date == "2023-01-01"

    @pytest.mark.parametrize("bad_date", ["2023-13-01", "01/01/2023", "today"])
    def test_rejects_bad_dates(self, bad_date):
        with pytest.raises(ValidationError):
            RateSnapshot(date=bad_date, symbols={}, base="EUR", rates={})

    @pytest.mark.parametrize("rate", [0, -1, "abc", None, True, "NaN"])
    def test_rejects_bad_rates(self, rate):
        with pytest.raises(ValidationError):
            RateSnapshot(date="2023-01-01", symbols={}, base="EUR", rates={"USD": rate})

    @pytest.mark.parametrize("code", ["US", "USDT", "12A", ""])
    def test_rejects_bad_codes(self, code):
        with pytest.raises(ValidationError):
            RateSnapshot(date="2023-01-01", symbols={code: True}, base="EUR", rates={})

    def test_is_frozen(self):
        snapshot = RateSnapshot(date="2023-01-01", symbols={}, base="EUR", rates={})
        with pytest.raises(ValidationError):
            snapshot.base = "USD"

    def test_does_not_alias_provider_payload(self):
        symbols = {"USD": "US Dollar", "EUR": "Euro"}
        rates = {"USD": Decimal("1.10")}
        snapshot = RateSnapshot(date="2023-01-01", symbols=symbols, base="EUR", rates=rates)

        symbols["GBP"] = "Pound"
        rates["USD"] = Decimal("99")

        assert not snapshot.supports("GBP")
        assert snapshot.rate_for("USD") == Decimal("1.10")

    def test_base_rate_defaults_to_one(self):
        snapshot = RateSnapshot(date="2023-01-01", symbols={"EUR": True}, base="EUR", rates={"USD": "1.1"})
        assert snapshot.rate_for("EUR") == Decimal("1")
        assert snapshot.rate_for("GBP") is None

    def test_json_dump_keeps_decimal_strings(self):
        snapshot = RateSnapshot(date="2023-01-01", symbols={"USD": True}, base="EUR", rates={"USD": "1.10"})
        assert snapshot.model_dump(mode="json")["rates"] == {"USD": "1.10"}


def test_normalize_code():
    assert normalize_code(" uah ") == "UAH"
    with pytest.raises(ValueError):
        normalize_code(840)


def test_command_args_are_ordered():
    command = Command(name="/convert", args=("USD", "UAH", "100"))
    assert command.args == ("USD", "UAH", "100")
