"""In-memory data store.

Holds an immutable snapshot of the five platform tables as polars
DataFrames. The report queries only ever read from it.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import polars as pl
from pandera.errors import SchemaErrors
from pydantic import BaseModel

from delivery_analytics.schemas import RECORD_MODELS, TABLE_MODELS, TABLE_SCHEMAS


TABLE_NAMES = tuple(TABLE_SCHEMAS)

# (child table, foreign key column, parent table)
FOREIGN_KEYS = (
    ("orders", "customer_id", "customers"),
    ("orders", "restaurant_id", "restaurants"),
    ("deliveries", "rider_id", "riders"),
)


class StoreValidationError(ValueError):
    """One or more tables failed their pandera model."""

    def __init__(self, errors: dict[str, SchemaErrors]):
        self.errors = errors
        details = "\n\n".join(f"{name}:\n{error}" for name, error in errors.items())
        super().__init__(f"Invalid tables: {', '.join(errors)}\n\n{details}")


def conform_table(name: str, df: pl.DataFrame) -> pl.DataFrame:
    """Select a table's columns in schema order and cast them to schema dtypes."""
    schema = TABLE_SCHEMAS[name]
    missing = [column for column in schema if column not in df.columns]
    if missing:
        raise ValueError(f"Table '{name}' is missing columns: {', '.join(missing)}")

    return df.select([pl.col(column).cast(dtype) for column, dtype in schema.items()])


def empty_table(name: str) -> pl.DataFrame:
    """An empty table with the right dtypes."""
    return pl.DataFrame(schema=TABLE_SCHEMAS[name])


class DataStore:
    """
    Read-only snapshot of customers, restaurants, riders, deliveries and orders.

    Tables are conformed to their column schemas on construction. Referential
    integrity is not enforced: a dangling foreign key is simply a join miss
    for the queries. Use validate() and dangling_references() to inspect the
    data.
    """

    def __init__(
        self,
        customers: pl.DataFrame | None = None,
        restaurants: pl.DataFrame | None = None,
        riders: pl.DataFrame | None = None,
        deliveries: pl.DataFrame | None = None,
        orders: pl.DataFrame | None = None,
    ):
        given = {
            "customers": customers,
            "restaurants": restaurants,
            "riders": riders,
            "deliveries": deliveries,
            "orders": orders,
        }
        self._tables: dict[str, pl.DataFrame] = {
            name: empty_table(name) if df is None else conform_table(name, df)
            for name, df in given.items()
        }

    @classmethod
    def empty(cls) -> "DataStore":
        return cls()

    @classmethod
    def from_records(
        cls,
        customers: Iterable[BaseModel | Mapping[str, Any]] = (),
        restaurants: Iterable[BaseModel | Mapping[str, Any]] = (),
        riders: Iterable[BaseModel | Mapping[str, Any]] = (),
        deliveries: Iterable[BaseModel | Mapping[str, Any]] = (),
        orders: Iterable[BaseModel | Mapping[str, Any]] = (),
    ) -> "DataStore":
        """
        Build a store from records.

        Records may be the pydantic models from delivery_analytics.schemas or
        plain mappings; mappings are validated through the models.
        """
        given = {
            "customers": customers,
            "restaurants": restaurants,
            "riders": riders,
            "deliveries": deliveries,
            "orders": orders,
        }
        tables = {}
        for name, records in given.items():
            model = RECORD_MODELS[name]
            rows = [
                (record if isinstance(record, model) else model.model_validate(record)).model_dump()
                for record in records
            ]
            tables[name] = pl.DataFrame(rows, schema=TABLE_SCHEMAS[name])

        return cls(**tables)

    # -------------------------------------------------------------------------
    # Table accessors
    # -------------------------------------------------------------------------

    @property
    def customers(self) -> pl.DataFrame:
        return self._tables["customers"]

    @property
    def restaurants(self) -> pl.DataFrame:
        return self._tables["restaurants"]

    @property
    def riders(self) -> pl.DataFrame:
        return self._tables["riders"]

    @property
    def deliveries(self) -> pl.DataFrame:
        return self._tables["deliveries"]

    @property
    def orders(self) -> pl.DataFrame:
        return self._tables["orders"]

    def table(self, name: str) -> pl.DataFrame:
        if name not in self._tables:
            raise KeyError(f"Unknown table: {name}")
        return self._tables[name]

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def validate(self) -> "DataStore":
        """
        Validate every table against its pandera model.

        Every table is checked. Raises StoreValidationError holding the
        SchemaErrors of each invalid table.
        """
        errors = {}
        for name, model in TABLE_MODELS.items():
            try:
                model.validate(self._tables[name], lazy=True)
            except SchemaErrors as e:
                errors[name] = e
        if errors:
            raise StoreValidationError(errors)
        return self

    def dangling_references(self) -> dict[str, int]:
        """Count rows whose (non-null) foreign key has no referent."""
        result = {}
        for child, column, parent in FOREIGN_KEYS:
            key_column = next(iter(TABLE_SCHEMAS[parent]))
            missing = (
                self._tables[child]
                .filter(pl.col(column).is_not_null())
                .join(
                    self._tables[parent].select(pl.col(key_column).alias(column)),
                    on=column,
                    how="anti",
                )
            )
            result[f"{child}.{column}"] = missing.height
        return result

    def row_counts(self) -> dict[str, int]:
        return {name: df.height for name, df in self._tables.items()}

    def is_empty(self) -> bool:
        return all(df.height == 0 for df in self._tables.values())

    def __repr__(self) -> str:
        counts = ", ".join(f"{name}={count}" for name, count in self.row_counts().items())
        return f"DataStore({counts})"
