"""Tests for loading stores from CSV and SQLite."""

import logging
import sqlite3
from datetime import date, time

import polars as pl
import pytest

from delivery_analytics.config import Settings
from delivery_analytics.data.loader import load_csv_dir, load_sqlite, load_store
from delivery_analytics.schemas import TABLE_SCHEMAS


def create_sqlite_db(path, store) -> None:
    """Write a store into SQLite with text dates, as a dump would."""
    conn = sqlite3.connect(path)
    try:
        for name, schema in TABLE_SCHEMAS.items():
            columns = ", ".join(schema)
            conn.execute(f"CREATE TABLE {name} ({columns})")
            table = store.table(name).with_columns(
                pl.col(pl.Date).dt.strftime("%Y-%m-%d"),
                pl.col(pl.Time).dt.strftime("%H:%M:%S"),
            )
            placeholders = ", ".join("?" for _ in schema)
            conn.executemany(
                f"INSERT INTO {name} ({columns}) VALUES ({placeholders})",
                table.rows(),
            )
        conn.commit()
    finally:
        conn.close()


class TestLoadCsvDir:
    """Tests for the CSV loader."""

    def test_round_trip_preserves_tables(self, store, csv_dir):
        """Tables read back from CSV equal the originals."""
        loaded = load_csv_dir(csv_dir)

        for name in TABLE_SCHEMAS:
            assert loaded.table(name).equals(store.table(name)), name

    def test_dates_and_times_are_parsed(self, csv_dir):
        """Date and time columns get Date/Time dtypes."""
        loaded = load_csv_dir(csv_dir)

        assert loaded.orders.schema["order_date"] == pl.Date
        assert loaded.orders.schema["order_time"] == pl.Time
        assert loaded.orders.row(0, named=True)["order_date"] == date(2024, 6, 14)
        assert loaded.orders.row(0, named=True)["order_time"] == time(12, 10)

    def test_missing_directory(self, tmp_path):
        """A missing directory raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_csv_dir(tmp_path / "nope")

    def test_missing_table_file(self, csv_dir):
        """A missing table file raises FileNotFoundError."""
        (csv_dir / "riders.csv").unlink()
        with pytest.raises(FileNotFoundError, match="riders.csv"):
            load_csv_dir(csv_dir)

    def test_missing_column(self, csv_dir):
        """A table file without a required column raises ValueError."""
        (csv_dir / "customers.csv").write_text("customer_id,customer_name\n1,Alice\n")
        with pytest.raises(ValueError, match="reg_date"):
            load_csv_dir(csv_dir)

    def test_header_only_files_load_empty(self, tmp_path):
        """Files with only a header give empty tables."""
        for name, schema in TABLE_SCHEMAS.items():
            (tmp_path / f"{name}.csv").write_text(",".join(schema) + "\n")

        loaded = load_csv_dir(tmp_path)

        assert loaded.is_empty()


class TestLoadSqlite:
    """Tests for the SQLite loader."""

    def test_round_trip_preserves_tables(self, store, tmp_path):
        """Tables read back from SQLite equal the originals."""
        db_path = tmp_path / "food_delivery.db"
        create_sqlite_db(db_path, store)

        loaded = load_sqlite(db_path)

        for name in TABLE_SCHEMAS:
            assert loaded.table(name).equals(store.table(name)), name

    def test_missing_database(self, tmp_path):
        """A missing database file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_sqlite(tmp_path / "missing.db")

    def test_missing_table(self, tmp_path):
        """A database without one of the tables raises ValueError."""
        db_path = tmp_path / "partial.db"
        conn = sqlite3.connect(db_path)
        conn.execute("CREATE TABLE customers (customer_id, customer_name, reg_date)")
        conn.commit()
        conn.close()

        with pytest.raises(ValueError, match="missing tables"):
            load_sqlite(db_path)


class TestLoadStore:
    """Tests for settings-driven loading."""

    def test_uses_data_dir(self, csv_dir):
        """Without a database path the CSV directory is used."""
        loaded = load_store(Settings(data_dir=csv_dir))
        assert loaded.row_counts()["orders"] == 7

    def test_prefers_sqlite(self, store, tmp_path):
        """A configured database path wins over the CSV directory."""
        db_path = tmp_path / "food_delivery.db"
        create_sqlite_db(db_path, store)

        loaded = load_store(Settings(data_dir=tmp_path / "unused", sqlite_db_path=db_path))

        assert loaded.row_counts()["deliveries"] == 31

    def test_logs_dangling_references(self, tmp_path, caplog):
        """Dangling foreign keys are logged as warnings, not rejected."""
        for name, schema in TABLE_SCHEMAS.items():
            (tmp_path / f"{name}.csv").write_text(",".join(schema) + "\n")
        (tmp_path / "deliveries.csv").write_text(
            "delivery_id,delivery_status,delivery_time,rider_id\n1,Completed,30 minutes,42\n"
        )

        with caplog.at_level(logging.WARNING, logger="delivery_analytics.data.loader"):
            loaded = load_store(Settings(data_dir=tmp_path))

        assert loaded.deliveries.height == 1
        assert "deliveries.rider_id" in caplog.text
