import os
from dataclasses import dataclass


def parse_int(value, default):
    if value is None or value.strip() == "":
        return default
    return int(value)


def parse_float(value, default):
    if value is None or value.strip() == "":
        return default
    return float(value)


@dataclass(frozen=True)
class Settings:
    base_url: str = "https://api.coingecko.com/api/v3"
    vs_currency: str = "usd"
    per_page: int = 250          # CoinGecko max per page
    pages: int = 2               # 2 x 250 = top 500 coins
    page_delay: float = 10.0     # seconds between page requests
    rate_limit_backoff: float = 15.0
    max_backoff: float = 300.0
    max_retries: int = 5
    timeout: float = 15.0
    out_dir: str = "."

    def validate(self):
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if not self.vs_currency:
            raise ValueError("vs_currency must not be empty")
        if not 1 <= self.per_page <= 250:
            raise ValueError(f"per_page must be between 1 and 250, got {self.per_page}")
        if self.pages < 1:
            raise ValueError(f"pages must be >= 1, got {self.pages}")
        if self.page_delay < 0:
            raise ValueError(f"page_delay must be >= 0, got {self.page_delay}")
        if self.rate_limit_backoff < 0:
            raise ValueError(f"rate_limit_backoff must be >= 0, got {self.rate_limit_backoff}")
        if self.max_backoff < self.rate_limit_backoff:
            raise ValueError("max_backoff must not be smaller than rate_limit_backoff")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")
        return self

    @staticmethod
    def from_env():
        """Build settings from COINGECKO_* / SNAPSHOT_* environment variables."""
        defaults = Settings()
        return Settings(
            base_url=os.getenv("COINGECKO_BASE_URL", defaults.base_url).rstrip("/"),
            vs_currency=os.getenv("COINGECKO_VS_CURRENCY", defaults.vs_currency).strip().lower(),
            per_page=parse_int(os.getenv("COINGECKO_PER_PAGE"), defaults.per_page),
            pages=parse_int(os.getenv("COINGECKO_PAGES"), defaults.pages),
            page_delay=parse_float(os.getenv("COINGECKO_PAGE_DELAY"), defaults.page_delay),
            rate_limit_backoff=parse_float(
                os.getenv("COINGECKO_RATE_LIMIT_BACKOFF"), defaults.rate_limit_backoff
            ),
            max_backoff=parse_float(os.getenv("COINGECKO_MAX_BACKOFF"), defaults.max_backoff),
            max_retries=parse_int(os.getenv("COINGECKO_MAX_RETRIES"), defaults.max_retries),
            timeout=parse_float(os.getenv("COINGECKO_TIMEOUT"), defaults.timeout),
            out_dir=os.getenv("SNAPSHOT_OUT_DIR", defaults.out_dir),
        ).validate()
