import pytest

from settings import Settings, parse_float, parse_int


def test_defaults_match_fixed_behaviour():
    s = Settings()
    assert s.vs_currency == "usd"
    assert s.per_page == 250
    assert s.pages == 2
    assert s.page_delay == 10.0
    assert s.rate_limit_backoff == 15.0
    assert s.validate() is s


def test_parse_helpers():
    assert parse_int(None, 3) == 3
    assert parse_int("  ", 3) == 3
    assert parse_int("7", 3) == 7
    assert parse_float("2.5", 1.0) == 2.5
    with pytest.raises(ValueError):
        parse_int("abc", 1)


def test_from_env(monkeypatch):
    monkeypatch.setenv("COINGECKO_BASE_URL", "http://localhost:8000/api/v3/")
    monkeypatch.setenv("COINGECKO_VS_CURRENCY", " EUR ")
    monkeypatch.setenv("COINGECKO_PAGES", "4")
    monkeypatch.setenv("COINGECKO_PAGE_DELAY", "0")
    monkeypatch.setenv("SNAPSHOT_OUT_DIR", "out")

    s = Settings.from_env()

    assert s.base_url == "http://localhost:8000/api/v3"
    assert s.vs_currency == "eur"
    assert s.pages == 4
    assert s.page_delay == 0.0
    assert s.out_dir == "out"
    assert s.per_page == 250


@pytest.mark.parametrize(
    "env, value",
    [
        ("COINGECKO_PER_PAGE", "251"),
        ("COINGECKO_PER_PAGE", "0"),
        ("COINGECKO_PAGES", "0"),
        ("COINGECKO_PAGE_DELAY", "-1"),
        ("COINGECKO_MAX_RETRIES", "-1"),
        ("COINGECKO_MAX_BACKOFF", "1"),
        ("COINGECKO_TIMEOUT", "0"),
    ],
)
def test_from_env_rejects_out_of_range(monkeypatch, env, value):
    monkeypatch.setenv(env, value)
    with pytest.raises(ValueError):
        Settings.from_env()
