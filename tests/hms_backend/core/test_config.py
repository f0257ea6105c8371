from datetime import date, datetime, timezone

import pytest

from hms_backend.core import config
from hms_backend.core.dates import coerce_instant, full_years_between


def test_get_list_splits_and_strips() -> None:
    assert config._get_list(' http://a.test , ,http://b.test ', []) == ['http://a.test', 'http://b.test']
    assert config._get_list(None, ['fallback']) == ['fallback']


@pytest.mark.parametrize(('raw', 'expected'), [('Yes', True), (' on ', True), ('0', False), (None, False)])
def test_get_bool(raw, expected: bool) -> None:
    assert config._get_bool(raw) is expected


def test_utc_timezone_does_not_need_tz_database(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'HOSPITAL_TIMEZONE', 'utc')

    assert config.get_hospital_timezone() is timezone.utc


def test_validate_runtime_config_rejects_sqlite_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')
    monkeypatch.setattr(config, 'DATABASE_URL', 'sqlite:///./hms.db')

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()


@pytest.mark.parametrize('bad_zone', ['', '../etc/passwd', '/absolute'])
def test_validate_runtime_config_rejects_malformed_timezone(monkeypatch: pytest.MonkeyPatch, bad_zone: str) -> None:
    monkeypatch.setattr(config, 'HOSPITAL_TIMEZONE', bad_zone)

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()


def test_validate_runtime_config_rejects_unknown_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'HOSPITAL_TIMEZONE', 'Mars/Olympus_Mons')

    with pytest.raises(RuntimeError):
        config.validate_runtime_config()


def test_full_years_between() -> None:
    assert full_years_between(date(1985, 6, 15), date(2025, 6, 14)) == 39
    assert full_years_between(date(1985, 6, 15), date(2025, 6, 15)) == 40
    assert full_years_between(None) is None


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        (date(2025, 6, 1), datetime(2025, 6, 1)),
        ('2025-06-10T09:00:00+00:00', datetime(2025, 6, 10, 9, 0, tzinfo=timezone.utc)),
        ('garbage', None),
        (None, None),
        (3.5, None),
    ],
)
def test_coerce_instant(value, expected) -> None:
    assert coerce_instant(value) == expected
