"""
config/settings.py
Central configuration: reads from environment variables and .env file.
"""
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings:

    def __init__(self):
        self._load()

    def _load(self):
        import os
        env_file = BASE_DIR / ".env"
        if env_file.exists():
            for line in env_file.read_text().splitlines():
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, _, val = line.partition("=")
                    os.environ.setdefault(key.strip(), val.strip())

        # Rate tables: SQLite first, <table>.csv in data_dir second
        self.data_dir       = os.environ.get("DATA_DIR", str(BASE_DIR / "data"))
        self.sqlite_db_path = os.environ.get(
            "SQLITE_DB_PATH", str(Path(self.data_dir) / "spls.db")
        )

        # Currency
        self.default_inr_per_usd   = float(os.environ.get("DEFAULT_INR_PER_USD", "82.5"))
        self.exchange_rate_api_url = os.environ.get(
            "EXCHANGE_RATE_API_URL",
            "https://api.exchangerate.host/latest?base=USD&symbols=INR",
        )
        self.exchange_rate_online  = os.environ.get("EXCHANGE_RATE_ONLINE", "false").lower() in (
            "1", "true", "yes",
        )
        self.exchange_rate_timeout = float(os.environ.get("EXCHANGE_RATE_TIMEOUT", "5"))

        self.api_host    = os.environ.get("API_HOST", "0.0.0.0")
        self.api_port    = int(os.environ.get("API_PORT", "8000"))
        self.api_title   = "SPLS Port Cost Estimator API"
        self.api_version = "3.0.0"

        self.metrics_port = int(os.environ.get("METRICS_PORT", "9090"))
        self.log_level    = os.environ.get("LOG_LEVEL", "INFO")

        # GST applied uniformly to every module's subtotal
        self.tax_rate = float(os.environ.get("TAX_RATE", "0.18"))


settings = Settings()
