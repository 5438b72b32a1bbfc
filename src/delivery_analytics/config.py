"""Application settings and configuration."""

from datetime import date
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="DELIVERY_ANALYTICS_", env_file=".env")

    # Paths
    data_dir: Path = Path("data")
    sqlite_db_path: Path | None = None
    export_dir: Path | None = None  # reports are exported only when set

    # Text formats for date/time columns in CSV and SQLite sources
    date_format: str = "%Y-%m-%d"
    time_format: str = "%H:%M:%S"

    # Reference "now"; today when unset
    reference_date: date | None = None

    # Windows
    active_window_days: int = 30
    revenue_window_days: int = 30

    # Ranking limits
    top_spenders_limit: int = 10
    top_restaurants_limit: int = 5
    top_items_limit: int = 10
    fastest_riders_limit: int = 10
    top_riders_limit: int = 10

    # Thresholds
    min_completed_deliveries: int = 10
    frequent_customer_min_orders: int = 5


settings = Settings()
