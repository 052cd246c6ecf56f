import os
from functools import lru_cache
from pathlib import Path


class Settings:
    def __init__(
        self,
        database_url: str,
        timezone: str,
        owner_secret: str,
        owner_token_max_age_hours: int,
        page_size: int,
        orphan_sweep_minutes: int,
        api_url: str,
    ) -> None:
        self.database_url = database_url
        self.timezone = timezone
        self.owner_secret = owner_secret
        self.owner_token_max_age_hours = owner_token_max_age_hours
        self.page_size = page_size
        self.orphan_sweep_minutes = orphan_sweep_minutes
        self.api_url = api_url


def _ensure_data_dir() -> Path:
    root = Path(os.getenv("LEDGER_DATA_DIR", "./data")).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    data_dir = _ensure_data_dir()
    default_db = data_dir / "ledger.db"
    database_url = os.getenv("LEDGER_DATABASE_URL", f"sqlite:///{default_db}")
    timezone = os.getenv("LEDGER_TIMEZONE", "Europe/Berlin")
    owner_secret = os.getenv(
        "LEDGER_OWNER_SECRET",
        "5b0c7d2e91a4f3683be1c0d9a7e24f16c58d3a09b7e6f1d24c8a5e3b90f7d612",
    )
    owner_token_max_age_hours = int(
        os.getenv("LEDGER_OWNER_TOKEN_MAX_AGE_HOURS", "720")
    )
    page_size = int(os.getenv("LEDGER_PAGE_SIZE", "30"))
    orphan_sweep_minutes = int(os.getenv("LEDGER_ORPHAN_SWEEP_MINUTES", "60"))
    api_url = os.getenv("LEDGER_API_URL", "http://localhost:8000")
    return Settings(
        database_url=database_url,
        timezone=timezone,
        owner_secret=owner_secret,
        owner_token_max_age_hours=owner_token_max_age_hours,
        page_size=page_size,
        orphan_sweep_minutes=orphan_sweep_minutes,
        api_url=api_url,
    )
