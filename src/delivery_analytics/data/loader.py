"""Load the platform tables into a DataStore.

Two sources are supported:
1. A directory of CSV files, one per table (customers.csv, restaurants.csv, ...)
2. A SQLite database with the same five tables

Both are read as text where the source has no native type and parsed with
the configured date/time formats.
"""

import logging
import sqlite3
from pathlib import Path

import polars as pl

from delivery_analytics.config import Settings, settings as default_settings
from delivery_analytics.data.store import TABLE_NAMES, DataStore
from delivery_analytics.schemas import TABLE_SCHEMAS

logger = logging.getLogger(__name__)


def parse_text_columns(
    name: str,
    df: pl.DataFrame,
    date_format: str,
    time_format: str,
) -> pl.DataFrame:
    """Parse text date/time columns of a table into Date/Time dtypes."""
    exprs = []
    for column, dtype in TABLE_SCHEMAS[name].items():
        if column not in df.columns or df.schema[column] != pl.String:
            continue
        if dtype == pl.Date:
            exprs.append(pl.col(column).str.strip_chars().str.to_date(date_format))
        elif dtype == pl.Time:
            exprs.append(pl.col(column).str.strip_chars().str.to_time(time_format))

    if not exprs:
        return df
    return df.with_columns(exprs)


def load_csv_dir(
    path: Path | str,
    date_format: str = "%Y-%m-%d",
    time_format: str = "%H:%M:%S",
) -> DataStore:
    """Load <table>.csv for each of the five tables in a directory."""
    path = Path(path)
    if not path.is_dir():
        raise FileNotFoundError(f"Data directory not found: {path}")

    tables = {}
    for name in TABLE_NAMES:
        csv_path = path / f"{name}.csv"
        if not csv_path.exists():
            raise FileNotFoundError(f"Table file not found: {csv_path}")

        df = pl.read_csv(csv_path, infer_schema=False)
        tables[name] = parse_text_columns(name, df, date_format, time_format)
        logger.debug("Read %d rows from %s", df.height, csv_path)

    return DataStore(**tables)


def load_sqlite(
    db_path: Path | str,
    date_format: str = "%Y-%m-%d",
    time_format: str = "%H:%M:%S",
) -> DataStore:
    """Load the five tables from a SQLite database."""
    db_path = Path(db_path)
    if not db_path.exists():
        raise FileNotFoundError(f"Database not found: {db_path}")

    conn = sqlite3.connect(db_path)
    try:
        cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        existing = {row[0] for row in cursor.fetchall()}
        missing = [name for name in TABLE_NAMES if name not in existing]
        if missing:
            raise ValueError(f"Database {db_path} is missing tables: {', '.join(missing)}")

        tables = {}
        for name in TABLE_NAMES:
            columns = ", ".join(TABLE_SCHEMAS[name])
            df = pl.read_database(f"SELECT {columns} FROM {name}", connection=conn)
            tables[name] = parse_text_columns(name, df, date_format, time_format)
            logger.debug("Read %d rows from %s.%s", df.height, db_path, name)
    except sqlite3.OperationalError as e:
        raise ValueError(f"Could not read {db_path}: {e}") from e
    finally:
        conn.close()

    return DataStore(**tables)


def load_store(settings: Settings | None = None) -> DataStore:
    """
    Load and validate the store described by the settings.

    Uses sqlite_db_path when set, data_dir otherwise. Dangling foreign keys
    are logged, not rejected.
    """
    settings = settings or default_settings

    if settings.sqlite_db_path is not None:
        store = load_sqlite(settings.sqlite_db_path, settings.date_format, settings.time_format)
        source = settings.sqlite_db_path
    else:
        store = load_csv_dir(settings.data_dir, settings.date_format, settings.time_format)
        source = settings.data_dir

    store.validate()
    logger.info("Loaded %r from %s", store, source)

    for reference, count in store.dangling_references().items():
        if count:
            logger.warning("%d rows with dangling reference %s", count, reference)

    return store
