from datetime import date, datetime, timezone
from decimal import Decimal

from kostnotify.notifications.formatting import (
    format_currency,
    format_long_date,
    format_month,
    format_timestamp,
)
from kostnotify.notifications.messages import resolve_locale, t


def test_currency_uses_indonesian_grouping():
    assert format_currency(1500000, "id") == "Rp 1.500.000"


def test_currency_rounds_half_up_to_whole_rupiah():
    assert format_currency(Decimal("1499.5"), "id") == "Rp 1.500"
    assert format_currency("2500.49", "id") == "Rp 2.500"


def test_currency_english_grouping():
    assert format_currency(1500000, "en") == "Rp 1,500,000"


def test_long_date_uses_localized_month_names():
    assert format_long_date(date(2026, 10, 19), "id") == "19 Oktober 2026"
    assert format_long_date(date(2026, 10, 19), "en") == "19 October 2026"


def test_month_label():
    assert format_month(date(2026, 8, 1), "id") == "Agustus 2026"


def test_timestamp_converts_to_display_timezone():
    paid = datetime(2026, 10, 19, 3, 30, tzinfo=timezone.utc)
    assert format_timestamp(paid, "id", "Asia/Jakarta") == "19 Oktober 2026 10:30"


def test_naive_timestamp_is_treated_as_utc():
    assert format_timestamp(datetime(2026, 10, 19, 3, 30), "en", "Asia/Jakarta") == "19 October 2026 10:30"


def test_resolve_locale_falls_back_to_default():
    assert resolve_locale("en_US") == "en"
    assert resolve_locale("fr") == "id"
    assert resolve_locale(None, "en") == "en"


def test_message_lookup_fills_parameters():
    assert t("en", "greeting", name="Ani") == "Hello Ani,"
    assert t("xx", "greeting", name="Ani") == "Halo Ani,"
